from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Operation(str, Enum):
    SEARCH = "search"
    CHAT = "chat"
    SUMMARIZE = "summarize"
    ANALYZE = "analyze"


@dataclass(frozen=True)
class FieldSchema:
    """Fields accepted for one operation (or one mode of it)."""

    required: tuple[str, ...]
    optional: tuple[str, ...] = ()


@dataclass(frozen=True)
class OperationSpec:
    """Everything that differs between operations, kept as data.

    ``schemas`` is keyed by mode; operations without modes use the single
    ``None`` key.
    """

    operation: Operation
    path: str
    method: str
    default_k: int
    schemas: dict[Optional[str], FieldSchema] = field(default_factory=dict)
    aliases: dict[str, str] = field(default_factory=dict)

    @property
    def modes(self) -> tuple[str, ...]:
        return tuple(mode for mode in self.schemas if mode is not None)

    def schema_for(self, mode: Optional[str]) -> FieldSchema:
        return self.schemas[mode]


OPERATIONS: dict[Operation, OperationSpec] = {
    Operation.SEARCH: OperationSpec(
        operation=Operation.SEARCH,
        path="/search",
        method="GET",
        default_k=5,
        schemas={None: FieldSchema(required=("q",), optional=("sourcePrefix",))},
        aliases={"query": "q"},
    ),
    Operation.CHAT: OperationSpec(
        operation=Operation.CHAT,
        path="/chat/openai",
        method="POST",
        default_k=5,
        schemas={
            None: FieldSchema(required=("question",), optional=("sourcePrefix", "model")),
        },
    ),
    Operation.SUMMARIZE: OperationSpec(
        operation=Operation.SUMMARIZE,
        path="/summarize",
        method="POST",
        default_k=20,
        schemas={
            "file": FieldSchema(required=("target",), optional=("question", "model")),
            "folder": FieldSchema(required=("target",), optional=("question", "model")),
        },
    ),
    Operation.ANALYZE: OperationSpec(
        operation=Operation.ANALYZE,
        path="/analyze",
        method="POST",
        default_k=12,
        schemas={
            "retrieve": FieldSchema(
                required=("query",),
                optional=("instruction", "model", "sourcePrefix"),
            ),
            "file": FieldSchema(required=("target",), optional=("instruction", "model")),
            "folder": FieldSchema(required=("target",), optional=("instruction", "model")),
        },
    ),
}


def get_spec(operation: Operation) -> OperationSpec:
    return OPERATIONS[Operation(operation)]


__all__ = ["Operation", "FieldSchema", "OperationSpec", "OPERATIONS", "get_spec"]
