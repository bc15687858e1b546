import json
import math
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class Structured:
    """Backend answered with a JSON object; forwarded as-is."""

    status_code: int
    value: dict[str, Any]


@dataclass(frozen=True)
class Passthrough:
    """Backend answered with something that is not a JSON object."""

    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def as_payload(self) -> dict[str, Any]:
        return {"ok": self.ok, "passthrough": True, "body": self.body}


UpstreamOutcome = Union[Structured, Passthrough]


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {text}")
    return value


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant: {name}")


def decode_json(body: str) -> Any:
    """Decode ``body`` as strict JSON that can be rendered back as UTF-8.

    Raises ``ValueError`` for invalid JSON, NaN/Infinity, out-of-range
    numbers, and strings holding lone surrogates.
    """

    value = json.loads(body, parse_float=_finite_float, parse_constant=_reject_constant)
    json.dumps(value, ensure_ascii=False, allow_nan=False).encode("utf-8")
    return value


def _decode_object(body: str) -> tuple[bool, Any]:
    try:
        value = decode_json(body)
    except ValueError:
        return False, None
    return isinstance(value, dict), value


def normalize(status_code: int, body: str) -> UpstreamOutcome:
    """Classify a completed upstream response. Never raises.

    Only JSON objects count as structured: a bare array or scalar has no
    ``ok`` field to forward, so it travels as passthrough text like any other
    undecodable body.
    """

    decoded, value = _decode_object(body)
    if decoded:
        return Structured(status_code=status_code, value=value)
    return Passthrough(status_code=status_code, body=body)


__all__ = ["Structured", "Passthrough", "UpstreamOutcome", "decode_json", "normalize"]
