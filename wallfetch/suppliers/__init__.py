"""
wallfetch suppliers

Registry of supplier implementations and the loader that turns a configured SupplierRef into a
ready to use Supplier. Each definition file is a JSON object with a "type" key naming one of the
registered implementations, e.g.

    {
        "type": "url",
        "url": "https://wallhaven.cc/api/v1/search?q={tags}&ratios={ratios}&sorting=random",
        "tag_separator": " ",
        "results_path": "data",
        "image_key": "path"
    }

Definition files are read only when their supplier is chosen for a fetch.
"""

import json
import random
from pathlib import Path
from typing import Union

from wallfetch.models import SupplierRef
from wallfetch.suppliers.base import (
    Chooser,
    Supplier,
    SupplierError,
    SupplierDefinitionError,
    SupplierDefinitionUnreadable,
    SupplierDefinitionMalformed,
    FetchFailed,
    SupplierNetworkError,
    NoResultsError,
    MalformedResponseError,
)

SUPPLIERS: dict[str, type[Supplier]] = {}


def register_supplier(cls: type[Supplier]) -> type[Supplier]:
    """
    Class decorator that makes a supplier implementation available under its 'type' name.
    """

    SUPPLIERS[cls.type] = cls
    return cls


def supplier_file(ref: SupplierRef, config_dir: Union[str, Path]) -> Path:
    """
    Location of a supplier's definition file. Relative paths are relative to the config
    directory.
    """

    file = Path(ref.file).expanduser()
    if not file.is_absolute():
        file = Path(config_dir).expanduser() / file
    return file


def load_supplier(
    ref: SupplierRef, config_dir: Union[str, Path], chooser: Chooser = random.choice
) -> Supplier:
    """
    Read and parse the definition file for ref and build the matching supplier. Raise
    SupplierDefinitionUnreadable or SupplierDefinitionMalformed when that is not possible.
    """

    file_path = supplier_file(ref, config_dir)

    try:
        with file_path.open("r") as file:
            definition = json.loads(file.read())

    except json.JSONDecodeError as error:
        raise SupplierDefinitionMalformed(
            f"Failed to parse supplier file: {file_path}, reason: {error}"
        )

    except (OSError, UnicodeDecodeError) as error:
        raise SupplierDefinitionUnreadable(
            f"Failed to read supplier file: {file_path}, reason: {error}"
        )

    if not isinstance(definition, dict):
        raise SupplierDefinitionMalformed(
            f"Supplier file {file_path} should contain a JSON object."
        )

    kind = definition.get("type")
    if kind not in SUPPLIERS:
        available = ", ".join(sorted(SUPPLIERS))
        raise SupplierDefinitionMalformed(
            f"Supplier file {file_path} has unknown type '{kind}'. Available: {available}"
        )

    return SUPPLIERS[kind].from_definition(ref.name, definition, chooser=chooser)


# Import implementations to register them. They import register_supplier from here.
from wallfetch.suppliers import url, local  # noqa: E402, F401
