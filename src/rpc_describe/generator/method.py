"""Method descriptor builder: combines registry metadata, docs and schemas."""

import logging

from rpc_describe.docs.resolver import MethodDocs
from rpc_describe.errors import RegistrationError
from rpc_describe.generator.base import ContentDescriptor, ExternalDocs, MethodDescriptor
from rpc_describe.registry.base import UNREPRESENTABLE_KINDS, MethodEntry, SemanticType, TypeKind
from rpc_describe.schema.base import SchemaNode
from rpc_describe.schema.reflector import SchemaReflector

logger = logging.getLogger(__name__)

NULL_RESULT_NAME = "null"


class MethodDescriptorBuilder:
    """Builds the descriptor of a single registered method."""

    def __init__(self, reflector: SchemaReflector | None = None):
        self.reflector = reflector or SchemaReflector()

    def build(
        self,
        qualified_name: str,
        entry: MethodEntry,
        docs: MethodDocs | tuple[str, dict[str, str]] | None = None,
    ) -> MethodDescriptor:
        """Describe one method.

        Raises RegistrationError when the signature cannot be described
        completely; no partial descriptor is ever returned.
        """
        docs = _as_method_docs(docs)

        param_types = self._declared_params(entry)
        result_types = self._declared_results(entry)
        self._check_representable(qualified_name, "parameter", param_types)
        self._check_representable(qualified_name, "result", result_types)
        names = self._param_names(qualified_name, entry, len(param_types))

        params = [
            self._content_descriptor(name, semantic_type, docs)
            for name, semantic_type in zip(names, param_types)
        ]

        return MethodDescriptor(
            name=qualified_name,
            summary=docs.summary,
            description=docs.description or None,
            params=params,
            result=self._result(qualified_name, result_types, docs),
            external_docs=self._external_docs(entry),
        )

    def _declared_params(self, entry: MethodEntry) -> list[SemanticType]:
        types = list(entry.params)
        if entry.has_context and types and types[0].kind == TypeKind.CONTEXT:
            types = types[1:]
        return types

    def _declared_results(self, entry: MethodEntry) -> list[SemanticType]:
        types = list(entry.results)
        if types and types[-1].kind == TypeKind.ERROR:
            types = types[:-1]
        return types

    def _check_representable(self, method: str, label: str, types: list[SemanticType]) -> None:
        for i, semantic_type in enumerate(types):
            for nested in semantic_type.walk():
                if nested.kind in UNREPRESENTABLE_KINDS:
                    raise RegistrationError(
                        method, f"{label} {i}", f"{nested.kind.value} values cannot be described"
                    )

    def _param_names(self, method: str, entry: MethodEntry, count: int) -> list[str]:
        declared = entry.param_names
        if declared is None:
            declared = [None] * count
        elif len(declared) == count + 1 and len(entry.params) == count + 1:
            # Names were declared for the stripped context argument too
            declared = declared[1:]

        if len(declared) != count:
            raise RegistrationError(
                method,
                f"parameter {min(len(declared), count)}",
                f"{len(declared)} parameter names declared for {count} parameter types",
            )
        return [name or f"{method}Parameter{i}" for i, name in enumerate(declared)]

    def _result(self, method: str, types: list[SemanticType], docs: MethodDocs) -> ContentDescriptor:
        if not types:
            return ContentDescriptor(
                name=NULL_RESULT_NAME,
                schema_=SchemaNode(type="null", description="Null"),
            )
        if len(types) == 1:
            return self._content_descriptor(f"{method}Result", types[0], docs, doc_key="result")

        results = [
            self._content_descriptor(f"{method}Result{i}", semantic_type, docs, doc_key="result")
            for i, semantic_type in enumerate(types)
        ]
        logger.warning(
            "%s declares %d results; only %s is described", method, len(results), results[-1].name
        )
        return results[-1]

    def _content_descriptor(
        self,
        name: str,
        semantic_type: SemanticType,
        docs: MethodDocs,
        doc_key: str | None = None,
    ) -> ContentDescriptor:
        schema = self.reflector.reflect(semantic_type)
        type_name = _type_name(semantic_type)
        if type_name:
            schema.description = type_name

        summary = docs.fields.get(name)
        if summary is None and doc_key:
            summary = docs.fields.get(doc_key)
        return ContentDescriptor(name=name, summary=summary or None, schema_=schema)

    def _external_docs(self, entry: MethodEntry) -> ExternalDocs | None:
        if not entry.identity:
            return None
        url = entry.source
        if url and "://" not in url:
            url = f"file://{url}"
        return ExternalDocs(description=entry.identity, url=url)


def _type_name(semantic_type: SemanticType) -> str:
    """The declaring identity, looking through optional wrappers."""
    while not semantic_type.name and semantic_type.kind == TypeKind.OPTIONAL and semantic_type.element:
        semantic_type = semantic_type.element
    return semantic_type.name


def _as_method_docs(docs: MethodDocs | tuple[str, dict[str, str]] | None) -> MethodDocs:
    if docs is None:
        return MethodDocs()
    if isinstance(docs, MethodDocs):
        return docs
    summary, fields = docs
    return MethodDocs(summary=summary, fields=fields)
