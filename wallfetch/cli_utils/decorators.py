"""
wallfetch Decorators

Decorators shared by wallfetch subcommands. Stack them under the click decorators, e.g.

    @click.command(name="fetch")
    @click.option(...)
    @catch_errors
    @coroutine
    async def cli(...):
        ...
"""

import asyncio
from sys import exit
from functools import wraps

from wallfetch.cli_utils.console import fail


def coroutine(func):
    """
    Run an async command function to completion with asyncio.run so click can call it like any
    other function.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))

    return wrapper


def catch_errors(func):
    """
    Catch and format errors with the "fail" console template and gracefully
    exit the application with an error code.
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception as error:
            fail(str(error))
            exit(1)

    return wrapper
