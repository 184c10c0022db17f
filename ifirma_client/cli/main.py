"""ifirma command line client - Entry point."""
import json
from pathlib import Path
from typing import Any, Dict, Optional

import click
from colorama import Fore, Style, init

from ifirma_client.api.ifirma_client import IfirmaClient, encode_body
from ifirma_client.api.response import Response
from ifirma_client.builder.payload_builder import AttributeMapper
from ifirma_client.config import app_config
from ifirma_client.exceptions import IfirmaError
from ifirma_client.exporter.json_exporter import JsonExporter
from ifirma_client.mapper.loader import load_mapping_tables

# Initialize colorama
init(autoreset=True)


def print_banner():
    """Print application banner."""
    click.echo(f"{Fore.CYAN}{'=' * 44}")
    click.echo(f"{Fore.CYAN}║   {Fore.WHITE}ifirma Invoicing Client{Fore.CYAN}              ║")
    click.echo(f"{Fore.CYAN}{'=' * 44}{Style.RESET_ALL}")


def load_attributes(path: str) -> Dict[str, Any]:
    """Read an invoice attribute tree from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_mapper(mapping_file: Optional[str]) -> AttributeMapper:
    """Mapper with the built-in tables, or the tables from a mapping file."""
    mapping_file = mapping_file or app_config.mapping_file
    if not mapping_file:
        return AttributeMapper()
    field_map, value_map = load_mapping_tables(mapping_file)
    return AttributeMapper(field_map, value_map)


def print_response(response: Response) -> None:
    """Print the status of an API response."""
    if response.success():
        click.echo(f"{Fore.GREEN}✅ {response.info or 'OK'}")
    else:
        click.echo(f"{Fore.RED}❌ [{response.code}] {response.info}")


@click.group()
@click.version_option(version="0.1.0")
@click.option("--mapping", "mapping_file", type=click.Path(exists=True), help="JSON mapping tables")
@click.pass_context
def cli(ctx, mapping_file):
    """ifirma invoicing client."""
    ctx.ensure_object(dict)
    ctx.obj["mapping_file"] = mapping_file


@cli.command()
@click.argument("attributes_file", type=click.Path(exists=True))
@click.option("--output", type=click.Path(), help="Write the preview to a JSON file")
@click.pass_context
def preview(ctx, attributes_file, output):
    """Show the ifirma payload for an invoice attribute file."""
    try:
        attributes = load_attributes(attributes_file)
        mapper = build_mapper(ctx.obj["mapping_file"])
        payload = mapper.map_tree(attributes)
    except (IfirmaError, ValueError) as e:
        raise click.ClickException(str(e))

    click.echo(json.dumps(json.loads(encode_body(payload)), indent=2, ensure_ascii=False))

    if output:
        JsonExporter().export(Path(output), attributes, payload)
        click.echo(f"{Fore.GREEN}Preview saved to {output}")


@cli.command("create-invoice")
@click.argument("attributes_file", type=click.Path(exists=True))
@click.pass_context
def create_invoice(ctx, attributes_file):
    """Create an invoice from an attribute file."""
    print_banner()

    try:
        client = IfirmaClient(app_config.ifirma_api, build_mapper(ctx.obj["mapping_file"]))
        response = client.create_invoice(load_attributes(attributes_file))
    except (IfirmaError, ValueError) as e:
        raise click.ClickException(str(e))

    print_response(response)
    if response.success():
        click.echo(f"{Fore.GREEN}   Invoice id: {response.invoice_id}")


@cli.command("get-invoice")
@click.argument("invoice_id")
@click.option("--type", "doc_type", default="pdf", show_default=True, help="pdf, xml, json...")
@click.option("--output", type=click.Path(), help="File to save the document to")
@click.pass_context
def get_invoice(ctx, invoice_id, doc_type, output):
    """Download an invoice document."""
    print_banner()

    try:
        client = IfirmaClient(app_config.ifirma_api, build_mapper(ctx.obj["mapping_file"]))
        response = client.get_invoice(invoice_id, doc_type)
    except IfirmaError as e:
        raise click.ClickException(str(e))

    if not response.success():
        print_response(response)
        ctx.exit(1)

    if doc_type == "json":
        click.echo(json.dumps(response.to_attributes(), indent=2, ensure_ascii=False, default=str))
        return

    output_file = Path(output or Path(app_config.output_dir) / f"invoice_{invoice_id}.{doc_type}")
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_bytes(response.content)
    click.echo(f"{Fore.GREEN}✅ Saved {output_file}")


@cli.command("send-invoice")
@click.argument("invoice_id")
@click.option("--text", help="Message text")
@click.pass_context
def send_invoice(ctx, invoice_id, text):
    """E-mail an invoice to the customer."""
    print_banner()

    options = {"text": text} if text else {}
    try:
        client = IfirmaClient(app_config.ifirma_api, build_mapper(ctx.obj["mapping_file"]))
        response = client.send_invoice(invoice_id, **options)
    except IfirmaError as e:
        raise click.ClickException(str(e))

    print_response(response)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
