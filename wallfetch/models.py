"""
wallfetch models

Value types shared by the resolver, the suppliers and the fetch orchestrator. Categories and
suppliers are loaded from the config file and never modified afterwards, so every type here is
frozen and sequences are stored as tuples.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple, Optional, Union
from collections.abc import Iterable


class AspectRatio(NamedTuple):
    width: int
    height: int

    @classmethod
    def parse(cls, value: Union[str, list, tuple]) -> "AspectRatio":
        """
        Build an AspectRatio from config input. Accepts "16:9", "16x9" or a pair like [16, 9].
        Raise ValueError for anything else.
        """

        if isinstance(value, str):
            for separator in (":", "x"):
                if separator in value:
                    parts = value.split(separator)
                    break
            else:
                raise ValueError(f"'{value}' is not an aspect ratio, expected e.g. '16:9'.")

        elif isinstance(value, (list, tuple)):
            parts = list(value)

        else:
            raise ValueError(f"'{value}' is not an aspect ratio, expected e.g. '16:9'.")

        if len(parts) != 2:
            raise ValueError(f"'{value}' is not an aspect ratio, expected e.g. '16:9'.")

        try:
            width, height = (int(part) for part in parts)
        except (TypeError, ValueError):
            raise ValueError(f"'{value}' is not an aspect ratio, expected e.g. '16:9'.")

        if width <= 0 or height <= 0:
            raise ValueError(f"aspect ratio '{value}' must be positive.")

        return cls(width, height)

    def __str__(self) -> str:
        return f"{self.width}:{self.height}"


@dataclass(frozen=True)
class Category:
    """
    Named preset of tags and, optionally, allowed aspect ratios.
    """

    name: str
    tags: tuple[str, ...] = ()
    aspect_ratios: Optional[tuple[AspectRatio, ...]] = None


@dataclass(frozen=True)
class SupplierRef:
    """
    Named pointer to a supplier definition file. The file is only read once the supplier is
    actually selected for a fetch.
    """

    name: str
    file: Path


@dataclass(frozen=True)
class SearchParameters:
    tags: tuple[str, ...] = ()
    aspect_ratios: tuple[AspectRatio, ...] = ()


def compose_parameters(
    category: Optional[Category], tags: Iterable[str] = ()
) -> SearchParameters:
    """
    Merge ad-hoc tags with a category's tags and aspect ratios. Ad-hoc tags always come first and
    duplicates are kept; suppliers decide what to do with them.
    """

    tags = tuple(tags)

    if category is None:
        return SearchParameters(tags=tags, aspect_ratios=())

    return SearchParameters(
        tags=tags + tuple(category.tags),
        aspect_ratios=tuple(category.aspect_ratios or ()),
    )
