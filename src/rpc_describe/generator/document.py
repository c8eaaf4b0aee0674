"""Document assembler: turns a registry snapshot into an API description."""

import logging

from rpc_describe.config import GeneratorConfig
from rpc_describe.docs.resolver import DocumentationResolver, DocumentationSource
from rpc_describe.generator.base import Document, MethodDescriptor
from rpc_describe.generator.method import MethodDescriptorBuilder
from rpc_describe.registry.base import MethodEntry, RegistrySnapshot
from rpc_describe.schema.dedupe import SchemaDeduplicator

logger = logging.getLogger(__name__)


class DocumentAssembler:
    """Builds a complete Document from one registry snapshot.

    Holds no state between calls: every ``assemble()`` starts from an empty
    draft and its own components table.
    """

    def __init__(
        self,
        config: GeneratorConfig | None = None,
        builder: MethodDescriptorBuilder | None = None,
        deduplicator: SchemaDeduplicator | None = None,
    ):
        self.config = config or GeneratorConfig()
        self.builder = builder or MethodDescriptorBuilder()
        self.deduplicator = deduplicator or SchemaDeduplicator()

    def assemble(self, snapshot: RegistrySnapshot, resolver: DocumentationResolver) -> Document:
        """Describe every method in the snapshot.

        Raises RegistrationError if any method cannot be described; no
        partial document is returned.
        """
        methods: list[MethodDescriptor] = []
        seen: set[str] = set()

        for namespace, entry in snapshot.entries():
            if namespace == self.config.reserved_namespace:
                continue

            qualified_name = self.qualified_name(namespace, entry.name)
            if self._is_subscription(qualified_name, entry):
                logger.debug("skipping subscription method %s", qualified_name)
                continue

            # First registration wins
            if qualified_name in seen:
                logger.debug("dropping duplicate registration of %s from %s", qualified_name, namespace)
                continue

            docs = resolver.resolve_method(entry.identity)
            methods.append(self.builder.build(qualified_name, entry, docs))
            seen.add(qualified_name)

        methods.sort(key=lambda m: m.name)
        draft = Document(
            openrpc=self.config.openrpc_version,
            info=self.config.info.model_copy(deep=True),
            methods=methods,
            external_docs=self.config.external_docs,
        )
        logger.info("described %d methods", len(methods))
        return self.deduplicator.dedupe(draft)

    def qualified_name(self, namespace: str, method: str) -> str:
        return f"{namespace}{self.config.separator}{method}"

    def _is_subscription(self, qualified_name: str, entry: MethodEntry) -> bool:
        if entry.subscription:
            return True
        suffix = self.config.subscribe_suffix
        return bool(suffix) and qualified_name.endswith(suffix)


def describe(
    snapshot: RegistrySnapshot,
    docs: DocumentationSource | None = None,
    config: GeneratorConfig | None = None,
) -> Document:
    """Generate the API description for a registry snapshot."""
    assembler = DocumentAssembler(config=config)
    return assembler.assemble(snapshot, DocumentationResolver(docs))
