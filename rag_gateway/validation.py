import math
from collections.abc import Mapping
from typing import Any, Optional

from rag_gateway.errors import PayloadValidationError
from rag_gateway.operations import Operation, OperationSpec, get_spec
from rag_gateway.schemas import GatewayRequest


def _text(value: Any) -> str:
    """Return ``value`` as trimmed text; anything that is not a scalar is empty."""

    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return str(value)
    return ""


def coerce_k(value: Any, default: int) -> int:
    """Parse ``k`` leniently, falling back to ``default``.

    Numeric strings are accepted. Non-numeric, non-finite, and sub-1 values
    use the default; fractions are truncated. There is no upper bound.
    """

    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    elif isinstance(value, (int, float)):
        number = float(value)
    else:
        return default
    if not math.isfinite(number):
        return default
    k = int(number)
    return k if k >= 1 else default


def _resolve_mode(spec: OperationSpec, mode: Any, prefix: str) -> Optional[str]:
    if not spec.modes:
        return None
    selected = _text(mode)
    if not selected:
        raise PayloadValidationError(f"missing {prefix}mode")
    if selected not in spec.modes:
        raise PayloadValidationError(f"unknown mode: {selected}")
    return selected


def validate(
    operation: Operation,
    mode: Any,
    payload: Mapping[str, Any],
    *,
    location: str = "body",
) -> GatewayRequest:
    """Check ``payload`` against the field schema of ``operation`` and ``mode``.

    ``location`` only affects error wording: ``"body"`` yields messages such as
    ``missing body.question`` while ``"query"`` yields ``missing q``.
    """

    spec = get_spec(operation)
    prefix = "body." if location == "body" else ""
    selected_mode = _resolve_mode(spec, mode, prefix)
    schema = spec.schema_for(selected_mode)

    values: dict[str, str] = {}
    for key, raw in payload.items():
        name = spec.aliases.get(key, key)
        text = _text(raw)
        if text and not values.get(name):
            values[name] = text

    fields: dict[str, str] = {}
    for name in schema.required:
        if not values.get(name):
            suffix = f" for mode={selected_mode}" if selected_mode else ""
            raise PayloadValidationError(f"missing {prefix}{name}{suffix}")
        fields[name] = values[name]
    for name in schema.optional:
        if values.get(name):
            fields[name] = values[name]

    return GatewayRequest(
        operation=spec.operation,
        mode=selected_mode,
        k=coerce_k(payload.get("k"), spec.default_k),
        payload=fields,
    )


__all__ = ["coerce_k", "validate"]
