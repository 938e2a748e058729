"""CLI entry point for highsystems-codegen."""

import logging
from pathlib import Path

import click

from highsystems_codegen.generator.client import ClientGenerator
from highsystems_codegen.generator.operation import function_name_for
from highsystems_codegen.generator.overrides import OverrideResolver, load_overrides
from highsystems_codegen.generator.template import load_template
from highsystems_codegen.parser.swagger import parse_openapi

DEFAULT_DOC = Path("assets/openapi.json")
DEFAULT_OUTPUT = Path("src/client.ts")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )


@click.group()
def main():
    """High Systems codegen — generate the typed TypeScript client from the API document."""
    pass


@main.command()
@click.option("--doc", "doc_path", default=DEFAULT_DOC, show_default=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="API document (JSON or YAML).")
@click.option("-o", "--output", default=DEFAULT_OUTPUT, show_default=True, type=click.Path(dir_okay=False, path_type=Path), help="Generated client source file.")
@click.option("--template", "template_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="Output template (defaults to the packaged base.ts).")
@click.option("--overrides", "overrides_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML file of per-operation overrides.")
@click.option("--one-shot-overrides", is_flag=True, help="Apply each argument rename only on its first lookup.")
@click.option("-v", "--verbose", is_flag=True, help="Show schema warnings and debug output.")
def generate(doc_path: Path, output: Path, template_path: Path | None, overrides_path: Path | None, one_shot_overrides: bool, verbose: bool):
    """Generate the client from an API document."""
    _configure_logging(verbose)

    click.echo(f"Parsing {doc_path}...")
    document = parse_openapi(doc_path)
    click.echo(f"Found {len(document.operations)} operations.")

    overrides = load_overrides(overrides_path) if overrides_path else {}
    resolver = OverrideResolver(overrides, one_shot=one_shot_overrides)

    gen = ClientGenerator(template=load_template(template_path), resolver=resolver)
    gen.write(document, output)
    click.echo(f"Client saved to {output}")


@main.command("list-operations")
@click.option("--doc", "doc_path", default=DEFAULT_DOC, show_default=True, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="API document (JSON or YAML).")
def list_operations(doc_path: Path):
    """List operations in generation order with their method names."""
    document = parse_openapi(doc_path)
    for operation in document.operations:
        click.echo(f"{operation.method.upper()} {operation.path} -> {function_name_for(operation.operation_id)}")
