"""CLI entry point for kong-codegen."""

from pathlib import Path

import click

from kong_codegen.config import (
    KONG_HOST,
    KONG_PORT,
    OPTION_HELP,
    TARGET_API_NAME,
    load_config_file,
    resolve_config,
)
from kong_codegen.errors import KongCodegenError
from kong_codegen.generator.escaper import IdentifierEscaper
from kong_codegen.generator.script import ScriptGenerator, api_file_folder, write_files
from kong_codegen.generator.translator import OperationTranslator, translate_document
from kong_codegen.log import configure_logging
from kong_codegen.parser.base import RouteDescriptor, SchemaDocument
from kong_codegen.parser.swagger import parse_openapi


def _parse_mappings(values: tuple[str, ...]) -> dict[str, str]:
    """Parse WORD=REPLACEMENT pairs."""
    mappings = {}
    for value in values:
        word, sep, replacement = value.partition("=")
        if not sep or not word or not replacement:
            raise click.BadParameter(f"expected WORD=REPLACEMENT, got {value!r}", param_hint="--reserved-words-mapping")
        mappings[word] = replacement
    return mappings


def _translate(doc_path: Path, escaper: IdentifierEscaper, skip_invalid: bool) -> tuple[SchemaDocument, list[RouteDescriptor]]:
    document = parse_openapi(doc_path)
    translator = OperationTranslator(escaper=escaper)
    routes = translate_document(document, translator, skip_invalid=skip_invalid)
    return document, routes


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug output.")
@click.option("-q", "--quiet", is_flag=True, help="Only show warnings and errors.")
def main(verbose: bool, quiet: bool):
    """kong-codegen — generate Kong gateway route scripts from OpenAPI documents."""
    configure_logging(verbose=verbose, quiet=quiet)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output root directory.")
@click.option("--kong-host", default=None, help=OPTION_HELP[KONG_HOST])
@click.option("--kong-port", default=None, help=OPTION_HELP[KONG_PORT])
@click.option("--target-api-name", default=None, help=OPTION_HELP[TARGET_API_NAME])
@click.option("-c", "--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML/JSON file with generator options.")
@click.option("--source-folder", default="", help="Sub-folder of the output root for generated scripts.")
@click.option("--api-package", default="", help="Dotted package; becomes nested folders under the source folder.")
@click.option("--reserved-words-mapping", "reserved_mappings", multiple=True, metavar="WORD=REPLACEMENT", help="Replacement for a reserved word. Repeatable.")
@click.option("--skip-invalid", is_flag=True, help="Skip operations that cannot be translated instead of failing.")
def generate(
    doc_path: Path,
    output: Path,
    kong_host: str | None,
    kong_port: str | None,
    target_api_name: str | None,
    config_path: Path | None,
    source_folder: str,
    api_package: str,
    reserved_mappings: tuple[str, ...],
    skip_invalid: bool,
):
    """Generate bash scripts that register the API's routes in Kong."""
    mappings = _parse_mappings(reserved_mappings)
    try:
        overrides = load_config_file(config_path) if config_path else {}
        overrides.update({
            k: v
            for k, v in {KONG_HOST: kong_host, KONG_PORT: kong_port, TARGET_API_NAME: target_api_name}.items()
            if v is not None
        })
        config = resolve_config(overrides)

        escaper = IdentifierEscaper(mappings=mappings)
        click.echo(f"Parsing {doc_path}...")
        document, routes = _translate(doc_path, escaper, skip_invalid)
        click.echo(f"Translated {len(routes)} operations.")

        files = ScriptGenerator(config, escaper=escaper).generate(document, routes)
    except (ValueError, KongCodegenError) as e:
        raise click.ClickException(str(e)) from e

    folder = api_file_folder(output, source_folder, api_package)
    for file_path in write_files(files, folder):
        click.echo(f"  Created {file_path}")

    click.echo(f"Generated {len(files)} scripts in {folder} for {config.host}:{config.port}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--skip-invalid", is_flag=True, help="Skip operations that cannot be translated instead of failing.")
def routes(doc_path: Path, skip_invalid: bool):
    """Print the route every operation translates to."""
    try:
        _, translated = _translate(doc_path, IdentifierEscaper(), skip_invalid)
    except KongCodegenError as e:
        raise click.ClickException(str(e)) from e

    for route in translated:
        click.echo(f"{route.method} {route.path} -> {route.route_path}")
