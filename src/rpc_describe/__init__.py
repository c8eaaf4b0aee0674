"""Generate OpenRPC API descriptions from RPC method registries."""

from rpc_describe.config import GeneratorConfig
from rpc_describe.docs.resolver import DocumentationResolver, MappingDocumentationSource
from rpc_describe.errors import RegistrationError
from rpc_describe.generator.base import Document
from rpc_describe.generator.document import DocumentAssembler, describe
from rpc_describe.registry.base import MethodEntry, RegistrySnapshot, SemanticType, TypeKind

__all__ = [
    "DocumentAssembler",
    "Document",
    "DocumentationResolver",
    "GeneratorConfig",
    "MappingDocumentationSource",
    "MethodEntry",
    "RegistrationError",
    "RegistrySnapshot",
    "SemanticType",
    "TypeKind",
    "describe",
]
