"""Registry snapshot models.

A snapshot lists every registered namespace and, for each method, the
semantic types of its parameters and results as captured at registration
time. Loaders and programmatic callers build these models; the generator
only reads them.
"""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, model_validator


class TypeKind(str, Enum):
    """Tag of a semantic type."""

    BIGINT = "bigint"  # arbitrary precision, hex on the wire
    HASH = "hash"  # 256-bit
    ADDRESS = "address"  # 160-bit
    BYTES = "bytes"
    BLOCK_NUMBER = "block_number"  # number or tag
    BLOCK_NUMBER_OR_HASH = "block_number_or_hash"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    STRUCT = "struct"
    LIST = "list"
    OPTIONAL = "optional"
    MAP = "map"
    ANY = "any"
    CONTEXT = "context"
    ERROR = "error"
    FUNCTION = "function"
    CHANNEL = "channel"


# Kinds that never carry a JSON value.
UNREPRESENTABLE_KINDS = frozenset(
    {TypeKind.CONTEXT, TypeKind.ERROR, TypeKind.FUNCTION, TypeKind.CHANNEL}
)


class StructField(BaseModel):
    """One named field of a struct semantic type."""

    name: str
    type: "SemanticType"
    description: str = ""


class SemanticType(BaseModel):
    """A domain-level value shape.

    ``fields`` is used by ``struct``; ``element`` by ``list``, ``map`` and
    ``optional``. A bare string such as ``"hash"`` is accepted as shorthand
    for ``{"kind": "hash"}``.
    """

    kind: TypeKind
    name: str = ""  # declaring identity, e.g. "common:Hash"
    fields: list[StructField] = []
    element: "SemanticType | None" = None

    @model_validator(mode="before")
    @classmethod
    def _expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": data}
        return data

    def walk(self) -> Iterator["SemanticType"]:
        """Yield this type and every nested type, depth first."""
        yield self
        for field in self.fields:
            yield from field.type.walk()
        if self.element is not None:
            yield from self.element.walk()


StructField.model_rebuild()


class MethodEntry(BaseModel):
    """Registration metadata for a single callable method."""

    name: str
    params: list[SemanticType] = []
    param_names: list[str | None] | None = None
    results: list[SemanticType] = []
    subscription: bool = False
    has_context: bool = False
    identity: str = ""  # used for documentation lookup
    source: str = ""  # file:line of the implementation, if known


class RegistrySnapshot(BaseModel):
    """Namespace -> registered methods, in registration order."""

    namespaces: dict[str, list[MethodEntry]] = {}

    def entries(self) -> Iterator[tuple[str, MethodEntry]]:
        """Yield ``(namespace, entry)`` pairs in registration order."""
        for namespace, methods in self.namespaces.items():
            for entry in methods:
                yield namespace, entry
