"""Content-addressed schema deduplication.

Every parameter and result schema is walked bottom-up. Each concrete node is
stored once in ``components.schemas`` under a key derived from its content
and replaced in place by a reference to that key. Children are replaced
before their parent is keyed, so a parent's key covers the references it
holds rather than the expanded subtrees.
"""

import hashlib
import json
import logging

from rpc_describe.errors import SchemaEncodingError
from rpc_describe.generator.base import Document
from rpc_describe.schema.base import SchemaNode

logger = logging.getLogger(__name__)

DIGEST_BYTES = 4


def canonical_json(node: SchemaNode) -> str:
    """Deterministic serialization of a schema node."""
    try:
        return json.dumps(node.to_dict(), sort_keys=True, separators=(",", ":"))
    except (TypeError, ValueError) as e:
        raise SchemaEncodingError(f"cannot canonicalize schema {node!r}: {e}") from e


def schema_key(node: SchemaNode) -> str:
    """Human-scannable, content-addressed components key for a node.

    Layout: ``[<description token>_][<type>.][<title>.]<digest>``, e.g.
    ``string.keccak.1f2e3d4c``.
    """
    digest = hashlib.sha1(canonical_json(node).encode("utf-8")).digest()
    key = digest[:DIGEST_BYTES].hex()

    if node.title:
        key = f"{node.title}.{key}"

    if node.type:
        types = node.type if isinstance(node.type, list) else [node.type]
        key = f"{'+'.join(types)}.{key}"

    if node.description:
        token = node.description.split(":")[-1]
        if token and not any(c.isspace() for c in token):
            key = f"{token}_{key}"

    return key


class SchemaDeduplicator:
    """Centralizes recurring schema fragments into the components table."""

    def dedupe(self, document: Document) -> Document:
        """Return a copy of ``document`` with every schema replaced by a reference.

        Existing components entries are kept, so running the pass again on
        its own output changes nothing.
        """
        result = document.model_copy(deep=True)
        schemas = result.components.schemas
        before = len(schemas)

        for method in result.methods:
            for descriptor in method.content_descriptors():
                descriptor.schema_ = self._centralize(descriptor.schema_, schemas)

        logger.debug(
            "deduplicated %d methods into %d component schemas (%d new)",
            len(result.methods),
            len(schemas),
            len(schemas) - before,
        )
        return result

    def _centralize(self, node: SchemaNode, schemas: dict[str, SchemaNode]) -> SchemaNode:
        if node.is_reference():
            return node

        # Shared structure lives only in the top-level components table
        node.definitions = None
        self._centralize_children(node, schemas)

        key = schema_key(node)
        schemas.setdefault(key, node)
        return SchemaNode.reference(key)

    def _centralize_children(self, node: SchemaNode, schemas: dict[str, SchemaNode]) -> None:
        if node.properties:
            node.properties = {
                name: self._centralize(child, schemas) for name, child in node.properties.items()
            }
        if isinstance(node.additional_properties, SchemaNode):
            node.additional_properties = self._centralize(node.additional_properties, schemas)
        if isinstance(node.items, SchemaNode):
            node.items = self._centralize(node.items, schemas)
        elif node.items:
            node.items = [self._centralize(item, schemas) for item in node.items]
        if node.one_of:
            node.one_of = [self._centralize(option, schemas) for option in node.one_of]
