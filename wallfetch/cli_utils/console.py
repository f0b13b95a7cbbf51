"""
wallfetch console utilities

This module provides application-wide access to Rich Console objects for writing to stdout and
stderr. Human readable progress goes through 'console', which --quiet and --simple silence.
Failures always go to 'error_console'.
"""

from io import StringIO

from rich.console import Console
from rich.theme import Theme

wallfetch_theme = Theme(
    {"warning": "orange_red1", "fail": "bold red", "confirm": "green", "describe": ""}
)

console = Console(theme=wallfetch_theme)
error_console = Console(theme=wallfetch_theme, stderr=True)


"""
Formatting helpers
"""


def silence(quiet: bool = True):
    """
    Send everything printed to 'console' into a throwaway buffer, or back to stdout when quiet
    is False.
    """

    console.file = StringIO() if quiet else None


def warn(msg: str):
    """
    Format msg and print to stderr.
    """

    error_console.print(
        f":exclamation_mark-emoji: [bold]warning: [/] {msg}", style="warning"
    )


def describe(msg: str, **kwargs):
    """
    Format descriptive msg and print to stdout.
    """

    console.print(f"{msg}", style="describe", **kwargs)


def confirm_success(msg: str, **kwargs):
    """
    Format confirmation msg and print to stdout. Accept any additional kwargs that console.print from
    rich module exposes.
    """

    console.print(f"{msg}", style="confirm", **kwargs)


def fail(msg: str):
    """
    Format failure msg and print to stderr.
    """

    error_console.print(f":x-emoji: failed. {msg}", style="fail", markup=False)


def status(msg: str):
    """
    Spinner shown while msg is in progress. Use as a context manager.
    """

    return console.status(msg, spinner="dots")
