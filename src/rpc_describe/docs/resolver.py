"""Best-effort documentation lookup for registered methods.

The resolver wraps a documentation source. Lookup failures are logged and
yield blank text; they never abort a build.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, ValidationError

from rpc_describe.errors import DocumentationLookupError, LoadError
from rpc_describe.registry.loader import read_mapping

logger = logging.getLogger(__name__)


class MethodDocs(BaseModel):
    """Human text for one method and its parameter/result fields."""

    summary: str = ""
    description: str = ""
    fields: dict[str, str] = {}


class DocumentationSource(Protocol):
    def lookup(self, identity: str) -> MethodDocs:
        """Return docs for a declaring identity or raise DocumentationLookupError."""
        ...


class MappingDocumentationSource:
    """Documentation held in a plain mapping of identity -> docs.

    Values may be MethodDocs, dicts with the same keys, or a bare string
    taken as the summary.
    """

    def __init__(self, docs: Mapping[str, MethodDocs | dict | str]):
        self.docs = {identity: _coerce(value) for identity, value in docs.items()}

    def lookup(self, identity: str) -> MethodDocs:
        try:
            return self.docs[identity]
        except KeyError as e:
            raise DocumentationLookupError(f"no documentation for {identity!r}") from e


def load_documentation(file_path: Path) -> MappingDocumentationSource:
    """Load a YAML/JSON documentation sidecar file.

    The file maps declaring identities to docs, optionally under a top-level
    ``methods`` key.
    """
    data = read_mapping(file_path)
    docs = data.get("methods", data)
    if not isinstance(docs, dict):
        raise LoadError(f"{file_path}: 'methods' must be a mapping")

    try:
        return MappingDocumentationSource(docs)
    except ValidationError as e:
        raise LoadError(f"{file_path}: {e}") from e


class DocumentationResolver:
    """Resolves declaring identities to documentation text."""

    def __init__(self, source: DocumentationSource | None = None):
        self.source = source

    def resolve(self, identity: str) -> tuple[str, dict[str, str]]:
        """Return ``(summary, per-field text)``; blanks when unknown."""
        docs = self.resolve_method(identity)
        return docs.summary, dict(docs.fields)

    def resolve_method(self, identity: str) -> MethodDocs:
        if not identity or self.source is None:
            return MethodDocs()
        try:
            return self.source.lookup(identity)
        except DocumentationLookupError as e:
            logger.warning("%s", e)
        except Exception:
            logger.warning("documentation lookup failed for %s", identity, exc_info=True)
        return MethodDocs()


def _coerce(value: MethodDocs | dict | str | None) -> MethodDocs:
    if isinstance(value, MethodDocs):
        return value
    if isinstance(value, str):
        return MethodDocs(summary=value)
    return MethodDocs.model_validate(value or {})
