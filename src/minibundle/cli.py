"""minibundle CLI - bundle JavaScript modules into a single program."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Literal, NoReturn

from dotenv import load_dotenv

# Load .env file before any other imports that might use env vars
load_dotenv()

import click  # noqa: E402

from minibundle import __version__  # noqa: E402
from minibundle.commands.lazy import LazyGroup  # noqa: E402

if TYPE_CHECKING:
    from minibundle.config import BundleConfig
    from minibundle.errors import BundleError

VerbosityLevel = Literal["quiet", "normal", "verbose"]


class BundleContext:
    """Shared context for CLI commands."""

    def __init__(self) -> None:
        self.config: BundleConfig | None = None
        self.config_error: str | None = None
        self.verbosity: VerbosityLevel = "normal"
        self.debug: bool = False

    def require_config(self) -> BundleConfig:
        """Configuration for a command, falling back to defaults."""
        from minibundle.config import BundleConfig
        from minibundle.errors import ConfigError

        if self.config_error is not None:
            self.fail(ConfigError(f"Failed to load configuration: {self.config_error}"))
        if self.config is None:
            self.config = BundleConfig()
        return self.config

    def fail(self, error: BundleError) -> NoReturn:
        """Report a minibundle error and exit with its code."""
        from minibundle.logging import print_error, print_info

        print_error(error.message)
        if self.debug:
            import traceback

            traceback.print_exception(error)
        elif self.verbosity != "quiet":
            print_info("Run with --debug for full traceback.")
        sys.exit(error.exit_code)


pass_context = click.make_pass_decorator(BundleContext, ensure=True)


# Define lazy subcommands: name -> (module_path, attribute_name)
LAZY_COMMANDS: dict[str, tuple[str, str]] = {
    "build": ("minibundle.commands.build", "build"),
    "graph": ("minibundle.commands.graph", "graph"),
    "init": ("minibundle.commands.init_cmd", "init"),
}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option("--debug", is_flag=True, help="Show full tracebacks on errors")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(version=__version__, prog_name="minibundle")
@pass_context
def cli(
    ctx: BundleContext,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """minibundle - bundle an ES module graph into one program.

    \b
    Commands:
      build        Bundle the entry module and its imports
      graph        Show the resolved module graph
      init         Create a .minibundlerc.toml

    Use 'minibundle <command> --help' for details.
    Use --debug to show full tracebacks on errors.
    """
    from minibundle.config import BundleConfig
    from minibundle.logging import setup_logging

    ctx.debug = debug

    if quiet:
        ctx.verbosity = "quiet"
    elif verbose:
        ctx.verbosity = "verbose"
    else:
        ctx.verbosity = "normal"

    setup_logging(ctx.verbosity)

    # Don't fail here - init doesn't need a valid config
    try:
        ctx.config = BundleConfig.load(config)
    except Exception as e:
        ctx.config_error = str(e)


def main() -> None:
    """Entry point for the CLI."""
    debug_mode = "--debug" in sys.argv

    try:
        cli()
    except click.ClickException:
        raise
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        from minibundle.logging import print_error, print_info

        print_error(f"Error: {e}")
        if debug_mode:
            print_info("")
            print_info("Full traceback (--debug mode):")
            import traceback

            traceback.print_exc()
        else:
            print_info("")
            print_info("Run with --debug for full traceback.")

        sys.exit(1)


if __name__ == "__main__":
    main()
