"""Registry snapshot file loader.

Reads a YAML or JSON description of the registered methods into a
RegistrySnapshot. Each namespace holds either a list of method entries or a
mapping of method name to entry:

    namespaces:
      eth:
        - name: getBalance
          params: [address, block_number]
          param_names: [address, blockNr]
          results: [bigint, error]
      admin:
        datadir:
          results: [string]
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from rpc_describe.errors import LoadError
from rpc_describe.registry.base import RegistrySnapshot


def read_mapping(file_path: Path) -> dict:
    """Read a YAML or JSON file whose top level is a mapping."""
    text = file_path.read_text(encoding="utf-8")

    data = None
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError:
        pass

    # Some valid JSON (e.g. tab-indented) is rejected by the YAML loader
    if data is None:
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, ValueError) as e:
            raise LoadError(f"{file_path}: not valid YAML or JSON") from e

    if not isinstance(data, dict):
        raise LoadError(f"{file_path}: top level must be a mapping")
    return data


def load_registry(file_path: Path) -> RegistrySnapshot:
    """Load a registry snapshot file."""
    doc = read_mapping(file_path)
    namespaces = doc.get("namespaces", doc)
    if not isinstance(namespaces, dict):
        raise LoadError(f"{file_path}: 'namespaces' must be a mapping")

    try:
        return RegistrySnapshot(
            namespaces={ns: _normalize_methods(file_path, ns, methods) for ns, methods in namespaces.items()}
        )
    except ValidationError as e:
        raise LoadError(f"{file_path}: {e}") from e


def _normalize_methods(file_path: Path, namespace: str, methods: list | dict | None) -> list:
    if not methods:
        return []
    if isinstance(methods, dict):
        result = []
        for name, entry in methods.items():
            if entry is None:
                entry = {}
            if not isinstance(entry, dict):
                raise LoadError(f"{file_path}: method {namespace}.{name} must be a mapping")
            result.append({"name": name, **entry})
        return result
    return methods
