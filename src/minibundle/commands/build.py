"""minibundle build command - Bundle an entry module and its imports."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, get_args

import click

from minibundle.config import TargetName

if TYPE_CHECKING:
    from minibundle.cli import BundleContext


@click.command()
@click.argument("entry", required=False)
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (default: from config, else current directory)",
)
@click.option("--out-dir", "-o", help="Output directory, relative to the root")
@click.option("--filename", help="Bundle file name")
@click.option(
    "--target",
    "-t",
    type=click.Choice(get_args(TargetName)),
    default=None,
    help="Syntax of generated loader and interop code; only module syntax is lowered",
)
@click.option("--no-dedupe", is_flag=True, help="Resolve every import separately")
@click.option("--no-runtime-cache", is_flag=True, help="Re-execute modules on every require()")
@click.option("--stdout", "to_stdout", is_flag=True, help="Print the bundle instead of writing it")
@click.pass_obj
def build(
    ctx: BundleContext,
    entry: str | None,
    root: Path | None,
    out_dir: str | None,
    filename: str | None,
    target: str | None,
    no_dedupe: bool,
    no_runtime_cache: bool,
    to_stdout: bool,
) -> None:
    """Bundle ENTRY (default: ./src/main.js) into a single program.

    Follows static import and re-export declarations from the entry,
    lowers module syntax, and writes one file with a built-in loader.
    """
    from minibundle.bundler import bundle_project
    from minibundle.commands._utils import apply_overrides
    from minibundle.errors import BundleError
    from minibundle.logging import print_success

    config = apply_overrides(
        ctx.require_config(),
        root=root,
        out_dir=out_dir,
        filename=filename,
        target=target,
        dedupe=False if no_dedupe else None,
        runtime_cache=False if no_runtime_cache else None,
    )

    try:
        result = bundle_project(config, entry, write=not to_stdout)
    except BundleError as e:
        ctx.fail(e)

    if to_stdout:
        click.echo(result.output, nl=False)
    elif ctx.verbosity != "quiet":
        print_success(f"Bundled {result.module_count} module(s) into {result.output_path}")


__all__ = ["build"]
