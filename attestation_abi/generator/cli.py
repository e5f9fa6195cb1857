"""Command-line interface for ABIProvider code generation."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click
from lark.exceptions import UnexpectedInput
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from attestation_abi.adapters import AttestationPlugin, CompileError, derive_attestation
from attestation_abi.generator import emitter
from attestation_abi.generator.engine import AbiEngine
from attestation_abi.generator.parser import ValidationError, parse
from attestation_abi.generator.types import ATTESTATION_DERIVE, RecordKind

if TYPE_CHECKING:
    from attestation_abi.generator.types import RecordDefinition, RecordDescriptor

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Cairo ABIProvider code generator."""
    _configure_logging(verbose)


def _read(input_file: str) -> str:
    with open(input_file, encoding="utf-8") as f:
        return f.read()


def _load(input_file: str) -> list[RecordDefinition]:
    try:
        return parse(_read(input_file))
    except (UnexpectedInput, ValidationError) as err:
        print(f"{input_file}: {err}")
        sys.exit(1)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input Cairo file")
@click.option("--output", "-o", "output_path", required=True, help="Output file, or directory with --split")
@click.option(
    "--split",
    is_flag=True,
    default=False,
    help="Write one <Name>_abi_provider.cairo file per struct into the output directory",
)
def gen(input_file: str, output_path: str, split: bool) -> None:
    """Generate ABIProvider implementations for #[derive(Attestation)] structs."""
    source = _read(input_file)

    try:
        results = AttestationPlugin().generate_module(source)
    except UnexpectedInput as err:
        print(f"{input_file}: {err}")
        sys.exit(1)

    diagnostics = [diag for result in results for diag in result.diagnostics]
    if diagnostics:
        for diag in diagnostics:
            print(f"{input_file}:{diag.line}:{diag.column}: {diag.severity}: {diag.message}")
        sys.exit(1)

    files = [result.code for result in results if result.code is not None]
    if not files:
        logger.warning("No #[derive(%s)] structs found in %s", ATTESTATION_DERIVE, input_file)

    if split:
        output_dir = Path(output_path)
        output_dir.mkdir(parents=True, exist_ok=True)
        for generated in files:
            (output_dir / generated.name).write_text(generated.content, encoding="utf-8")
    else:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write("\n".join(generated.content for generated in files))

    logger.info("Generated %d ABIProvider implementation(s) from %s", len(files), input_file)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="File holding one struct definition")
def expand(input_file: str) -> None:
    """Expand the Attestation derive for a single item and print the result."""
    try:
        generated = derive_attestation(_read(input_file))
    except CompileError as err:
        print(f"error: {err}")
        sys.exit(1)
    except (UnexpectedInput, ValidationError) as err:
        print(f"{input_file}: {err}")
        sys.exit(1)

    click.echo(generated, nl=False)


@cli.command()
@click.option("--output", "-o", "output_file", required=True, help="Output file")
def runtime(output_file: str) -> None:
    """Generate the ABIField, StructABI and ABIProvider declarations."""
    with open(output_file, "w", encoding="utf-8") as f:
        f.write(emitter.runtime())


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input Cairo file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
@click.option(
    "--all",
    "include_all",
    is_flag=True,
    help=f"Include structs without #[derive({ATTESTATION_DERIVE})]",
)
def info(input_file: str, output_json: bool, include_all: bool) -> None:
    """Display struct layouts and fixed sizes."""
    definitions = _load(input_file)

    engine = AbiEngine()
    descriptors = [
        engine.describe(definition)
        for definition in definitions
        if definition.kind == RecordKind.STRUCT
        and (include_all or definition.has_derive(ATTESTATION_DERIVE))
    ]

    if output_json:
        _output_json(descriptors)
    else:
        _output_plain(descriptors)


def _output_json(descriptors: list[RecordDescriptor]) -> None:
    """Output descriptors as JSON."""
    data = {
        descriptor.name: {
            **descriptor.to_dict(),
            "field_count": descriptor.field_count,
        }
        for descriptor in descriptors
    }
    print(json.dumps(data, indent=2))


def _output_plain(descriptors: list[RecordDescriptor]) -> None:
    """Output descriptors using rich text formatting."""
    console = Console()

    if not descriptors:
        console.print("[dim]No structs found[/dim]")
        return

    for descriptor in descriptors:
        title = descriptor.name
        if descriptor.abi_name:
            title += f" [dim](ABI name {descriptor.abi_name})[/dim]"
        if descriptor.abi_version:
            title += f" [dim]v{descriptor.abi_version}[/dim]"
        console.print(f"[bold cyan]{title}[/bold cyan]")

        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("Field", style="white")
        table.add_column("Type", style="green")
        table.add_column("Size", style="yellow", justify="right")

        for field in descriptor.fields:
            if field.type.is_unknown:
                type_str = f"[red]{field.type.cairo_name} (unknown)[/red]"
            else:
                type_str = field.type.cairo_name
            size_str = f"{field.byte_width} bytes" if field.byte_width else "variable"
            table.add_row(field.name, type_str, size_str)

        console.print(table)
        console.print(
            f"[dim]{descriptor.field_count} fields, {descriptor.total_fixed_size} fixed bytes[/dim]"
        )
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
