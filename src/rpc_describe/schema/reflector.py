"""Semantic type -> JSON Schema reflection.

Many values in this domain look primitive in storage but travel with a fixed
hex encoding, so the override table always wins over structural reflection.
"""

import copy
import logging

from rpc_describe.registry.base import SemanticType, TypeKind
from rpc_describe.schema.base import SchemaNode

logger = logging.getLogger(__name__)

INTEGER_SCHEMA = {
    "title": "integer",
    "type": "string",
    "pattern": "^0x[a-fA-F0-9]+$",
    "description": "Hex representation of the integer",
}

HASH_SCHEMA = {
    "title": "keccak",
    "type": "string",
    "description": "Hex representation of a Keccak 256 hash",
    "pattern": "^0x[a-fA-F\\d]{64}$",
}

ADDRESS_SCHEMA = {
    "title": "address",
    "type": "string",
    "pattern": "^0x[a-fA-F\\d]{40}$",
}

BYTES_SCHEMA = {
    "title": "bytes",
    "type": "string",
    "description": "Hex representation of a variable length byte array",
    "pattern": "^0x([a-fA-F0-9]?)+$",
}

BLOCK_NUMBER_TAG_SCHEMA = {
    "title": "blockNumberTag",
    "type": "string",
    "description": "The optional block height description",
    "enum": ["earliest", "latest", "pending"],
}

BLOCK_NUMBER_OR_TAG_SCHEMA = {
    "title": "blockNumberOrTag",
    "description": "Block tag or hex representation of a block number",
    "oneOf": [INTEGER_SCHEMA, BLOCK_NUMBER_TAG_SCHEMA],
}

BLOCK_NUMBER_OR_HASH_SCHEMA = {
    "title": "blockNumberOrHash",
    "description": "Hex representation of a block number or hash",
    "oneOf": [HASH_SCHEMA, INTEGER_SCHEMA],
}

DEFAULT_OVERRIDES: dict[TypeKind, dict] = {
    TypeKind.BIGINT: INTEGER_SCHEMA,
    TypeKind.HASH: HASH_SCHEMA,
    TypeKind.ADDRESS: ADDRESS_SCHEMA,
    TypeKind.BYTES: BYTES_SCHEMA,
    TypeKind.BLOCK_NUMBER: BLOCK_NUMBER_OR_TAG_SCHEMA,
    TypeKind.BLOCK_NUMBER_OR_HASH: BLOCK_NUMBER_OR_HASH_SCHEMA,
}

PRIMITIVE_TYPES: dict[TypeKind, str] = {
    TypeKind.INT: "integer",
    TypeKind.FLOAT: "number",
    TypeKind.BOOL: "boolean",
    TypeKind.STRING: "string",
}


class SchemaReflector:
    """Maps semantic types to schema fragments. Never fails.

    ``overrides`` may be keyed by TypeKind, replacing a built-in entry, or by
    a semantic type name such as ``"types:Receipt"``; name keys are checked
    first.
    """

    def __init__(self, overrides: dict[TypeKind | str, dict] | None = None):
        self.kind_overrides: dict[TypeKind, dict] = dict(DEFAULT_OVERRIDES)
        self.name_overrides: dict[str, dict] = {}
        for key, schema in (overrides or {}).items():
            if isinstance(key, TypeKind):
                self.kind_overrides[key] = schema
            else:
                self.name_overrides[key] = schema

    def reflect(self, semantic_type: SemanticType) -> SchemaNode:
        # Value and pointer-to-value share one override entry
        while semantic_type.kind == TypeKind.OPTIONAL and semantic_type.element is not None:
            semantic_type = semantic_type.element

        override = self._lookup_override(semantic_type)
        if override is not None:
            return SchemaNode.model_validate(copy.deepcopy(override))
        return self._reflect_structure(semantic_type)

    def _lookup_override(self, semantic_type: SemanticType) -> dict | None:
        if semantic_type.name and semantic_type.name in self.name_overrides:
            return self.name_overrides[semantic_type.name]
        return self.kind_overrides.get(semantic_type.kind)

    def _reflect_structure(self, semantic_type: SemanticType) -> SchemaNode:
        kind = semantic_type.kind

        if kind in PRIMITIVE_TYPES:
            return SchemaNode(type=PRIMITIVE_TYPES[kind])

        if kind == TypeKind.STRUCT:
            properties = {}
            for field in semantic_type.fields:
                node = self.reflect(field.type)
                # Field docs replace the generic text of an override
                if field.description:
                    node.description = field.description
                properties[field.name] = node
            return SchemaNode(type="object", properties=properties, additional_properties=False)

        if kind == TypeKind.LIST:
            if semantic_type.element is None:
                return SchemaNode(type="array")
            return SchemaNode(type="array", items=self.reflect(semantic_type.element))

        if kind == TypeKind.MAP:
            if semantic_type.element is None:
                return SchemaNode(type="object")
            return SchemaNode(type="object", additional_properties=self.reflect(semantic_type.element))

        logger.debug("no schema mapping for %s, using permissive schema", kind.value)
        return SchemaNode()
