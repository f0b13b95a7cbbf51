"""
wallfetch list

This module defines the 'list' subcommand, which shows the categories and suppliers in the config
file so you know what names 'fetch' accepts.
"""

import click
from rich.table import Table

from wallfetch.cli_utils.console import console, warn
from wallfetch.cli_utils.decorators import catch_errors


@click.command(name="list")
@click.pass_obj
@catch_errors
def cli(obj):
    """List configured categories and suppliers."""

    config = obj.load_config()

    if config.categories:
        categories = Table(title="Categories")
        categories.add_column("name")
        categories.add_column("tags")
        categories.add_column("aspect ratios")
        for category in config.categories:
            categories.add_row(
                category.name,
                ", ".join(category.tags),
                ", ".join(str(ratio) for ratio in category.aspect_ratios or ()),
            )
        console.print(categories)
    else:
        warn(f"no categories defined in {config.WALLFETCH_CONFIG_DIR / 'config.json'}")

    if config.suppliers:
        suppliers = Table(title="Suppliers")
        suppliers.add_column("name")
        suppliers.add_column("file")
        for supplier in config.suppliers:
            suppliers.add_row(supplier.name, str(supplier.file))
        console.print(suppliers)
    else:
        warn(f"no suppliers defined in {config.WALLFETCH_CONFIG_DIR / 'config.json'}")

    console.print(f"set_command: {config.set_command or '(not set)'}", markup=False)
