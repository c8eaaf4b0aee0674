"""JSON Schema node model used in generated documents."""

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

COMPONENTS_PREFIX = "#/components/schemas/"


class SchemaNode(BaseModel):
    """A JSON Schema fragment: either a concrete schema or a pure reference.

    Keywords without a dedicated field (``minimum``, ``required``...) are kept
    as extra fields and serialized unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    ref: str | None = Field(None, alias="$ref")
    title: str | None = None
    type: str | list[str] | None = None
    pattern: str | None = None
    description: str | None = None
    enum: list[Any] | None = None
    properties: "dict[str, SchemaNode] | None" = None
    additional_properties: "bool | SchemaNode | None" = Field(None, alias="additionalProperties")
    items: "SchemaNode | list[SchemaNode] | None" = None
    one_of: "list[SchemaNode] | None" = Field(None, alias="oneOf")
    definitions: "dict[str, SchemaNode] | None" = None

    @classmethod
    def reference(cls, key: str) -> "SchemaNode":
        return cls(ref=COMPONENTS_PREFIX + key)

    def is_reference(self) -> bool:
        """True when the node holds nothing but a ``$ref``."""
        return self.ref is not None and self.to_dict().keys() == {"$ref"}

    def children(self) -> Iterator["SchemaNode"]:
        """Yield the direct sub-schemas of this node."""
        if self.properties:
            yield from self.properties.values()
        if isinstance(self.additional_properties, SchemaNode):
            yield self.additional_properties
        if isinstance(self.items, SchemaNode):
            yield self.items
        elif self.items:
            yield from self.items
        if self.one_of:
            yield from self.one_of
        if self.definitions:
            yield from self.definitions.values()

    def to_dict(self) -> dict:
        """Serialize with JSON Schema key names, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
