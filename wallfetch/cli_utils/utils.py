"""
wallfetch CLI Utilities

Helpers for discovering subcommands and attaching them to the 'wallfetch' group.
"""

import sys
import inspect
import importlib.util

from pathlib import Path
from typing import Optional
from collections.abc import Iterable

import click

import wallfetch

from wallfetch.cli_utils.console import warn


def import_commands(module_paths: Optional[Iterable] = None) -> list[click.Command]:
    """
    Retrieve a set of click Commands from module_paths. Default directory is the built in
    subcommands directory for commands that come pre-installed with wallfetch.

    A valid wallfetch command module defines a "cli" function that is wrapped as a click Command
    object. Set the 'name' keyword argument in the @click.command decorator to set the name of the
    command intended for the end user.
    """

    if module_paths is None:
        module_paths = sorted(Path(wallfetch.__file__).parent.glob("subcommands/*.py"))

    commands = []

    for path in module_paths:
        name = inspect.getmodulename(path)
        if name is None or name == "__init__":
            continue

        # Recipe for loading and executing modules from given filepath comes from importlib docs:
        # https://docs.python.org/3/library/importlib.html#importing-a-source-file-directly
        module_name = f"wallfetch.subcommands.{name}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)

        try:
            commands.append(getattr(module, "cli"))

        except AttributeError:
            warn(f"Cannot add command {name}: no 'cli' function found.")

    return commands


def attach_commands(group: click.Group, commands: list[click.Command]):
    """
    Attach each command in a list of click Command objects to a provided group.
    """

    for command in commands:
        group.add_command(command)
