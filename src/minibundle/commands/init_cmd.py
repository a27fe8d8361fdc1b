"""minibundle init command - Create .minibundlerc.toml configuration."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

if TYPE_CHECKING:
    from minibundle.cli import BundleContext


@click.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing .minibundlerc.toml")
@click.pass_obj
def init(ctx: BundleContext, force: bool) -> None:
    """Initialize a new .minibundlerc.toml configuration file.

    Creates a configuration file with the default settings in the current directory.
    """
    from minibundle.config import get_default_config_toml
    from minibundle.errors import ExitCode
    from minibundle.logging import print_error, print_info, print_success, print_warning
    from minibundle.paths import CONFIG_FILE, get_config_path

    config_path = get_config_path()

    if config_path.exists() and not force:
        print_warning(f"Configuration file already exists: {config_path}")
        print_info("Use --force to overwrite")
        sys.exit(ExitCode.CONFIG_ERROR)

    try:
        config_path.write_text(get_default_config_toml())
    except OSError as e:
        print_error(f"Failed to create config file: {e}")
        sys.exit(ExitCode.CONFIG_ERROR)

    print_success(f"Created {config_path}")
    print_info("\nNext steps:")
    print_info(f"  1. Edit {CONFIG_FILE} to point at your entry module")
    print_info("  2. Run 'minibundle graph' to check the resolved modules")
    print_info("  3. Run 'minibundle build' to write the bundle")


__all__ = ["init"]
