"""Validates generated API description documents for internal consistency."""

from collections.abc import Iterator

from rpc_describe.schema.base import COMPONENTS_PREFIX


def validate_references(doc: dict) -> dict[str, str]:
    """Check that every ``$ref`` points at an existing components entry.

    Returns dict of {location: error_message} for broken references.
    """
    schemas = _component_schemas(doc)
    errors = {}
    for location, node in _walk_document(doc):
        ref = node.get("$ref")
        if ref is None:
            continue
        if not isinstance(ref, str) or not ref.startswith(COMPONENTS_PREFIX):
            errors[location] = f"unsupported reference {ref!r}"
        elif ref[len(COMPONENTS_PREFIX):] not in schemas:
            errors[location] = f"dangling reference {ref!r}"
    return errors


def validate_methods(doc: dict) -> dict[str, str]:
    """Check method names are unique and sorted, and every method has a result.

    Returns dict of {location: error_message}.
    """
    errors = {}
    names = []

    seen = set()
    for i, method in enumerate(doc.get("methods") or []):
        if not isinstance(method, dict):
            errors[f"methods[{i}]"] = "method is not a mapping"
            continue
        name = method.get("name")
        if not name or not isinstance(name, str):
            errors[f"methods[{i}]"] = "method has no name"
            continue
        names.append(name)
        if name in seen:
            errors[name] = "duplicate method name"
        seen.add(name)
        if "result" not in method:
            errors[f"{name}.result"] = "method has no result"

    if names != sorted(names):
        errors["methods"] = "methods are not sorted by name"
    return errors


def validate_document(doc: dict) -> dict[str, str]:
    """Run all validations on a serialized document.

    Returns dict of {location: error_message} for all problems found.
    """
    errors = {}
    errors.update(validate_methods(doc))
    errors.update(validate_references(doc))
    return errors


def _walk_document(doc: dict) -> Iterator[tuple[str, dict]]:
    for i, method in enumerate(doc.get("methods") or []):
        if not isinstance(method, dict):
            continue
        name = method.get("name") or f"methods[{i}]"
        for j, param in enumerate(method.get("params") or []):
            if isinstance(param, dict):
                yield from _walk_schema(f"{name}.params[{j}]", param.get("schema"))
        result = method.get("result")
        if isinstance(result, dict):
            yield from _walk_schema(f"{name}.result", result.get("schema"))
    for key, schema in _component_schemas(doc).items():
        yield from _walk_schema(f"components.schemas.{key}", schema)


def _component_schemas(doc: dict) -> dict:
    components = doc.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    return schemas if isinstance(schemas, dict) else {}


def _walk_schema(location: str, node: dict) -> Iterator[tuple[str, dict]]:
    if not isinstance(node, dict):
        return
    yield location, node
    for name, child in (node.get("properties") or {}).items():
        yield from _walk_schema(f"{location}.properties.{name}", child)
    for name, child in (node.get("definitions") or {}).items():
        yield from _walk_schema(f"{location}.definitions.{name}", child)
    additional = node.get("additionalProperties")
    if isinstance(additional, dict):
        yield from _walk_schema(f"{location}.additionalProperties", additional)
    items = node.get("items")
    if isinstance(items, list):
        for i, item in enumerate(items):
            yield from _walk_schema(f"{location}.items[{i}]", item)
    elif isinstance(items, dict):
        yield from _walk_schema(f"{location}.items", items)
    for i, option in enumerate(node.get("oneOf") or []):
        yield from _walk_schema(f"{location}.oneOf[{i}]", option)
