"""
wallfetch fetch

This module defines the 'fetch' subcommand, which downloads one image from a configured supplier,
saves it to the cache (or a file of your choosing) and optionally sets it as your wallpaper.
"""

from pathlib import Path

import click

from wallfetch.fetch import FetchOrchestrator, FetchRequest
from wallfetch.cli_utils.console import silence, fail
from wallfetch.cli_utils.decorators import catch_errors
from wallfetch.cli_utils.decorators import coroutine


@click.command(name="fetch")
@click.option(
    "--assign",
    "-a",
    is_flag=True,
    help="Set the image as your wallpaper using the 'set_command' config entry.",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Where to save the image. The extension picks the format. Goes into the cache if not set.",
)
@click.option("--category", "-c", help="Which predefined category name to use.")
@click.option(
    "--supplier", "-s", help="Which supplier to use, leave empty to pick randomly."
)
@click.option(
    "--tag",
    "-t",
    "tags",
    multiple=True,
    help="Additional tag to search for. Can use multiple times e.g. -t mountains -t snow",
)
@click.option(
    "--simple",
    is_flag=True,
    help="Only print the image's final path, for use in scripts.",
)
@click.pass_obj
@catch_errors
@coroutine
async def cli(obj, assign, output, category, supplier, tags, simple):
    """
    Fetch a wallpaper from one of your suppliers.
    """

    if simple:
        silence()

    config = obj.load_config()
    orchestrator = FetchOrchestrator(config)

    result = await orchestrator.run(
        FetchRequest(
            category=category,
            supplier=supplier,
            tags=tuple(tags),
            output=output,
            assign=assign,
        )
    )

    # the image is saved either way, so this is reported without failing the run
    if result.apply_error is not None:
        fail(str(result.apply_error))

    if simple:
        click.echo(str(result.path.resolve()))
