"""CLI entry point for rpc-describe."""

import json
import logging
from pathlib import Path

import click
import yaml
from pydantic import ValidationError

from rpc_describe.config import GeneratorConfig
from rpc_describe.docs.resolver import load_documentation
from rpc_describe.errors import DescribeError
from rpc_describe.generator.document import describe
from rpc_describe.generator.validator import validate_document
from rpc_describe.registry.loader import load_registry, read_mapping


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _render(doc: dict, fmt: str, output: Path) -> str:
    """Serialize the document; 'auto' picks the format from the file suffix."""
    if fmt == "auto":
        fmt = "yaml" if output.suffix in (".yaml", ".yml") else "json"
    if fmt == "yaml":
        return yaml.safe_dump(doc, sort_keys=False, allow_unicode=True)
    return json.dumps(doc, indent=2) + "\n"


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """rpc-describe: generate OpenRPC documents from RPC method registries."""
    _configure_logging(verbose)


@main.command("describe")
@click.argument("registry_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(path_type=Path), help="Output file path for the document.")
@click.option("--docs", "docs_path", default=None, type=click.Path(exists=True, path_type=Path), help="Documentation sidecar file (YAML or JSON).")
@click.option("--format", "fmt", default="auto", type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--separator", default=None, help="Namespace/method separator (default '_').")
@click.option("--subscribe-suffix", default=None, help="Skip methods whose qualified name ends with this suffix.")
def describe_cmd(
    registry_path: Path,
    output: Path,
    docs_path: Path | None,
    fmt: str,
    separator: str | None,
    subscribe_suffix: str | None,
):
    """Generate an API description document from a registry snapshot."""
    click.echo(f"Loading registry {registry_path}...")
    try:
        snapshot = load_registry(registry_path)
        docs = load_documentation(docs_path) if docs_path else None
        config = GeneratorConfig.from_env().with_overrides(
            separator=separator,
            subscribe_suffix=subscribe_suffix,
        )
        document = describe(snapshot, docs=docs, config=config)
    except (DescribeError, ValidationError) as e:
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Described {len(document.methods)} methods "
        f"({len(document.components.schemas)} component schemas)."
    )

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(_render(document.to_dict(), fmt, output), encoding="utf-8")
    click.echo(f"Document saved to {output}")


@main.command("validate")
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def validate_cmd(doc_path: Path):
    """Check a generated document for broken references and method ordering."""
    try:
        doc = read_mapping(doc_path)
    except DescribeError as e:
        raise click.ClickException(str(e)) from e

    errors = validate_document(doc)
    if errors:
        for location, message in errors.items():
            click.echo(f"  {location}: {message}")
        raise click.ClickException(f"{len(errors)} problem(s) found in {doc_path}")

    click.echo(f"{doc_path} is valid ({len(doc.get('methods', []))} methods).")
