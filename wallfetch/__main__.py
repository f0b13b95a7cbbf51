"""
__main__.py

This file adds support for running wallfetch as a python module instead of invoking the "wallfetch"
command line entrypoint:

    $ python -m wallfetch fetch --simple
"""

from wallfetch.cli import main


if __name__ == "__main__":
    main()
