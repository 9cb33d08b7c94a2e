"""CLI entry point for api-docs-explorer."""

import json
import logging
from pathlib import Path

import click

from api_docs_explorer.config import ExplorerConfig, load_config
from api_docs_explorer.errors import ExplorerError
from api_docs_explorer.generator.descriptors import message_snippet, request_name, request_snippet, route_path
from api_docs_explorer.generator.sample import SampleGenerator
from api_docs_explorer.parser.base import RegistryDocument
from api_docs_explorer.parser.formatter import format_type
from api_docs_explorer.parser.registry import get_docs
from api_docs_explorer.parser.shape import parse_object_shape


def _load_document(config: ExplorerConfig, docs_path: Path | None) -> RegistryDocument:
    """Load a pre-generated docs file, or extract the registry afresh."""
    if docs_path is not None:
        return RegistryDocument.model_validate_json(docs_path.read_text(encoding="utf-8"))
    response = get_docs(config)
    if response.status == "error":
        raise click.ClickException(response.message)
    return response.result


def _echo_shape(title: str, shape: str, indent: int):
    click.echo(f"{title}:")
    click.echo(format_type(shape, indent=indent))
    fields = parse_object_shape(shape)
    if fields:
        for field in fields:
            marker = "optional" if field.optional else "required"
            click.echo(f"  - {field.key} ({marker}): {field.type}")
    click.echo("")


@click.group()
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, path_type=Path), help="YAML config file.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool):
    """API Docs Explorer: browse endpoint and sync signatures from a generated type registry."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = load_config(config_path)
    except ExplorerError as e:
        raise click.ClickException(str(e)) from e


@main.command()
@click.option("--registry", default=None, type=click.Path(path_type=Path), help="Generated type registry file.")
@click.option("--source-root", default=None, type=click.Path(path_type=Path), help="Directory holding the page folders.")
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Write the docs JSON here instead of stdout.")
@click.pass_obj
def extract(config: ExplorerConfig, registry: Path | None, source_root: Path | None, output: Path | None):
    """Extract the registry into a docs JSON document."""
    updates = {}
    if registry is not None:
        updates["registry_path"] = registry
    if source_root is not None:
        updates["source_root"] = source_root
    config = config.model_copy(update=updates)

    document = _load_document(config, None)
    content = document.model_dump_json(indent=2)

    if output is None:
        click.echo(content)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(content, encoding="utf-8")
    click.echo(f"Extracted {document.signature_count()} signatures to {output}")


@main.command("list")
@click.option("--docs", "docs_path", default=None, type=click.Path(exists=True, path_type=Path), help="Pre-generated docs JSON.")
@click.pass_obj
def list_signatures(config: ExplorerConfig, docs_path: Path | None):
    """List every endpoint and sync signature by page."""
    document = _load_document(config, docs_path)

    click.echo("APIs")
    for page, signatures in document.endpoints.items():
        click.echo(f"  {page}")
        for sig in signatures:
            click.echo(f"    {sig.method:<6} {request_name(sig)} {sig.version}  {sig.route_id}  [{sig.auth.summary()}]")

    click.echo("Syncs")
    for page, signatures in document.broadcasts.items():
        click.echo(f"  {page}")
        for sig in signatures:
            click.echo(f"    SYNC   {request_name(sig)} {sig.version}  {sig.route_id}")


@main.command()
@click.argument("page")
@click.argument("name")
@click.option("--version", "version", default=None, help="Signature version (default: latest).")
@click.option("--sync", "is_sync", is_flag=True, help="Show a sync event instead of an API.")
@click.option("--seed", default=None, type=int, help="Seed for the example payload.")
@click.option("--docs", "docs_path", default=None, type=click.Path(exists=True, path_type=Path), help="Pre-generated docs JSON.")
@click.pass_obj
def show(config: ExplorerConfig, page: str, name: str, version: str | None, is_sync: bool, seed: int | None, docs_path: Path | None):
    """Show one signature with formatted shapes, an example payload and call snippets."""
    document = _load_document(config, docs_path)
    generator = SampleGenerator(seed=seed)

    if is_sync:
        sig = document.find_broadcast(page, name, version)
        if sig is None:
            raise click.ClickException(f"No sync event {page}/{name} found.")
        click.echo(f"SYNC {route_path(sig)}")
        click.echo("")
        _echo_shape("Client input (trigger)", sig.client_input, config.indent)
        _echo_shape("Server output (broadcast)", sig.server_output, config.indent)
        _echo_shape("Client output (local)", sig.client_output, config.indent)
        payload = generator.record_for(sig.client_input)
    else:
        sig = document.find_endpoint(page, name, version)
        if sig is None:
            raise click.ClickException(f"No API {page}/{name} found.")
        click.echo(f"{sig.method} {route_path(sig)}")
        if sig.description:
            click.echo(sig.description)
        click.echo("")
        click.echo(f"Auth: {sig.auth.summary()}")
        if sig.auth.raw:
            click.echo(sig.auth.raw)
        if sig.rate_limit is False:
            click.echo("Rate limit: None")
        elif sig.rate_limit is None:
            click.echo(f"Rate limit: {config.default_rate_limit} requests / min (default)")
        else:
            click.echo(f"Rate limit: {sig.rate_limit} requests / min")
        click.echo("")
        _echo_shape("Input", sig.input, config.indent)
        _echo_shape("Output", sig.output, config.indent)
        payload = generator.record_for(sig.input)

    click.echo("Example payload:")
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    click.echo("")
    click.echo("Request:")
    click.echo(request_snippet(sig, payload))
    click.echo("")
    click.echo("Socket message:")
    click.echo(message_snippet(sig, payload))
