"""
wallfetch

Fetch wallpapers from configurable image suppliers, matched against your own categories of tags and
aspect ratios, and optionally set them as your desktop background.

This module defines the entry point to the wallfetch CLI: a 'cli' command group holding global
options. Subcommands live in wallfetch/subcommands and are attached in main().
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional

import click

from wallfetch.config import init, WallfetchConfig
from wallfetch.cli_utils.console import silence
from wallfetch.cli_utils.utils import import_commands
from wallfetch.cli_utils.utils import attach_commands


@dataclass
class WallfetchContext:
    """
    Global options passed from the 'wallfetch' group to its subcommands through the click
    context object. The config is only read once a subcommand asks for it.
    """

    config_dir: Optional[Path] = None
    quiet: bool = False

    def load_config(self) -> WallfetchConfig:
        return init(self.config_dir)


@click.group()
@click.pass_context
@click.option(
    "--config-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="WALLFETCH_CONFIG_DIR",
    help="Directory holding config.json and supplier files. Default: ~/.config/wallfetch",
)
@click.option(
    "--verbose",
    "verbosity",
    flag_value="verbose",
    default=True,
    help="Print all output to stdout or the terminal.",
)
@click.option(
    "--quiet",
    "verbosity",
    flag_value="quiet",
    help="Silence all output printed to stdout. Errors are still reported on stderr.",
)
@click.version_option(package_name="wallfetch")
def cli(ctx: click.Context, config_dir, verbosity):
    """
    wallfetch

    Grab a wallpaper from one of your configured suppliers:

        $ wallfetch fetch

    Use a category from your config and add some tags of your own:

        $ wallfetch fetch --category nature --tag mountains

    Save to a specific file, pick the supplier and set it as your wallpaper:

        $ wallfetch fetch -s wallhaven -o ~/Pictures/today.png --assign

    Use in scripts, printing only the path of the image:

        $ feh --bg-fill "$(wallfetch fetch --simple)"
    """

    silence(verbosity == "quiet")
    ctx.obj = WallfetchContext(config_dir=config_dir, quiet=verbosity == "quiet")


def main():

    commands = import_commands()
    attach_commands(cli, commands)
    cli()


if __name__ == "__main__":
    main()
