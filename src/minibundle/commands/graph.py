"""minibundle graph command - Show the resolved module graph."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from rich.table import Table

    from minibundle.bundler import Graph
    from minibundle.cli import BundleContext


@click.command("graph")
@click.argument("entry", required=False)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (default: from config, else current directory)",
)
@click.option("--no-dedupe", is_flag=True, help="Resolve every import separately")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def graph(
    ctx: BundleContext,
    entry: str | None,
    root: Path | None,
    no_dedupe: bool,
    as_json: bool,
) -> None:
    """Show every module reachable from ENTRY, with ids and import mappings.

    \b
    Examples:
        minibundle graph                   # Graph for ./src/main.js
        minibundle graph app/index.js      # Another entry
        minibundle graph --json            # Machine-readable output
    """
    from minibundle.bundler import GraphBuilder
    from minibundle.commands._utils import apply_overrides
    from minibundle.errors import BundleError
    from minibundle.logging import console

    config = apply_overrides(
        ctx.require_config(),
        root=root,
        dedupe=False if no_dedupe else None,
    )

    try:
        module_graph = GraphBuilder.from_config(config).build(entry or config.entry)
    except BundleError as e:
        ctx.fail(e)

    if as_json:
        click.echo(json.dumps(module_graph.to_dict(), indent=2))
    else:
        console.print(_graph_table(module_graph, config.root))


def _graph_table(module_graph: Graph, root: str) -> Table:
    """Render the graph as a rich table."""
    from rich.table import Table

    from minibundle.paths import display_path

    table = Table(title=f"{len(module_graph)} module(s)")
    table.add_column("id", justify="right", style="cyan")
    table.add_column("path")
    table.add_column("imports")

    for module in module_graph:
        imports = ", ".join(
            f"{spec} -> {target}" for spec, target in module.specifier_to_id.items()
        )
        table.add_row(str(module.id), display_path(module.path, root), imports or "-")
    return table


__all__ = ["graph"]
