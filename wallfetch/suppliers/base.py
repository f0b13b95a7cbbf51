"""
Supplier base types

A supplier is anything that can turn SearchParameters into a single image. Concrete suppliers are
built from a JSON definition file and implement one coroutine, fetch_one(). Fetching is the only
step of a run that waits on I/O, so it is the only async method in wallfetch.

Failures are split into two families:

- SupplierDefinitionError: the definition file could not be read or makes no sense. Raised while
  loading, before anything is fetched.
- FetchFailed: the supplier was loaded but could not produce an image. Subclasses tell a network
  problem apart from an empty result set and from a response that could not be understood.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from wallfetch.models import SearchParameters
from wallfetch.image_handler import ImageHandle

Chooser = Callable[[Sequence], Any]


class SupplierError(Exception):
    """Base class for supplier related errors."""

    pass


class SupplierDefinitionError(SupplierError):
    pass


class SupplierDefinitionUnreadable(SupplierDefinitionError):
    """Raised when a supplier definition file is missing or can't be read."""

    pass


class SupplierDefinitionMalformed(SupplierDefinitionError):
    """Raised when a supplier definition file can't be parsed or is missing settings."""

    pass


class FetchFailed(SupplierError):
    """Raised when a supplier could not produce an image."""

    pass


class SupplierNetworkError(FetchFailed):
    pass


class NoResultsError(FetchFailed):
    pass


class MalformedResponseError(FetchFailed):
    pass


class Supplier(ABC):
    """
    Interface every image source implements. 'chooser' picks one item out of a sequence of
    results and defaults to random.choice; tests pass a deterministic one.
    """

    type: str = ""

    def __init__(self, name: str, chooser: Chooser = random.choice):
        self.name = name
        self.chooser = chooser

    @classmethod
    @abstractmethod
    def from_definition(cls, name: str, definition: dict, chooser: Chooser = random.choice):
        """Build the supplier from its parsed definition file."""

    @abstractmethod
    async def fetch_one(self, params: SearchParameters) -> ImageHandle:
        """Fetch a single image matching params."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


def require(definition: dict, key: str, kind, default=None, name: str = ""):
    """
    Read key from a definition dict, checking its type. kind is a type or a tuple of types as
    accepted by isinstance. A default of None makes the key mandatory.
    """

    if key not in definition:
        if default is None:
            raise SupplierDefinitionMalformed(
                f"Supplier '{name}' is missing the '{key}' setting."
            )
        return default

    value = definition[key]
    kinds = kind if isinstance(kind, tuple) else (kind,)

    # bool is an int subclass, but 'timeout = true' is still a mistake
    if not isinstance(value, kinds) or (isinstance(value, bool) and bool not in kinds):
        expected = " or ".join(k.__name__ for k in kinds)
        raise SupplierDefinitionMalformed(
            f"Supplier '{name}' setting '{key}' should be of type {expected}, got {type(value).__name__}."
        )
    return value
