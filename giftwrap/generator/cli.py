"""Command-line interface for giftwrap code generation."""

from __future__ import annotations

import json
import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from giftwrap.generator import (
    CodeFragment,
    DeriveError,
    build_chain,
    derive,
    derive_declaration,
    load,
)
from giftwrap.generator.rust import render_type
from giftwrap.generator.types import Alternative, Product

if TYPE_CHECKING:
    from giftwrap.generator.loader import Declaration

logger = logging.getLogger(__name__)


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show debug logging")
def cli(verbose: bool) -> None:
    """Giftwrap conversion generator."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input declaration file (JSON)")
@click.option("--output", "-o", "output_file", required=True, help="Output file")
@click.option(
    "--only",
    type=click.Choice(["wrap", "unwrap"], case_sensitive=False),
    default=None,
    help="Derive only one direction, ignoring each declaration's derive list",
)
def gen(input_file: str, output_file: str, only: str | None) -> None:
    """Generate conversion code from a declaration file."""
    generated = CodeFragment()
    try:
        for declaration in load(input_file):
            if only is None:
                generated += derive_declaration(declaration)
            else:
                generated += derive(
                    declaration.target, wrap=only == "wrap", unwrap=only == "unwrap"
                )
    except DeriveError as e:
        print(f"Error: {e}")
        sys.exit(1)

    with open(output_file, "w", encoding="utf-8") as f:
        f.write(generated.render())

    logger.info("Wrote %d conversion(s) to %s", len(generated), output_file)


def _members(declaration: Declaration) -> list[tuple[str, Product | Alternative]]:
    target = declaration.target
    if isinstance(target, Product):
        return [("(struct)", target)]
    return [(alternative.name, alternative) for alternative in target.alternatives]


def _chain_info(shape: Product | Alternative) -> dict:
    """Chain details for one struct or alternative."""
    info: dict = {"config": shape.config.to_dict(), "chain": None}
    if len(shape.fields) == 1 and not shape.config.no_wrap:
        chain = build_chain(shape.fields[0].type, shape.config.chain_depth())
        info["chain"] = [render_type(t) for t in chain]
    return info


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input declaration file (JSON)")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def chains(input_file: str, output_json: bool) -> None:
    """Display the source types each declaration converts from."""
    try:
        declarations = load(input_file)
    except DeriveError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if output_json:
        _output_json(declarations)
    else:
        _output_plain(declarations)


def _output_json(declarations: list[Declaration]) -> None:
    """Output chains as JSON."""
    data: dict = {}
    for declaration in declarations:
        data[declaration.target.name] = {
            "derive": list(declaration.derives),
            "members": {name: _chain_info(shape) for name, shape in _members(declaration)},
        }
    print(json.dumps(data, indent=2))


def _format_depth(depth: int | None) -> str:
    """Format a wrap depth, handling None for the default."""
    if depth is None:
        return "1 (default)"
    return "unbounded" if depth == 0 else str(depth)


def _output_plain(declarations: list[Declaration]) -> None:
    """Output chains using rich text formatting."""
    console = Console()

    for declaration in declarations:
        target = declaration.target
        derives = ", ".join(declaration.derives)
        console.print(f"[bold cyan]{escape(target.name)}[/bold cyan] [dim]({derives})[/dim]")

        table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
        table.add_column("Member", style="white")
        table.add_column("Depth", style="yellow", justify="right")
        table.add_column("Converts from", style="green")
        table.add_column("Flags", style="dim")

        for name, shape in _members(declaration):
            info = _chain_info(shape)
            flags = [flag for flag in ("noWrap", "noUnwrap") if info["config"][flag]]
            chain = " <- ".join(info["chain"]) if info["chain"] else "-"
            table.add_row(
                escape(name),
                _format_depth(shape.config.wrap_depth),
                escape(chain),
                " ".join(flags),
            )

        console.print(table)
        console.print()


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
