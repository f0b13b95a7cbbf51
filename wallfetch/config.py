"""
wallfetch Configuration Management

This file handles loading and generating the wallfetch configuration file. Raise a
WallfetchConfigError for any issues that arise in processing or retrieving configuration values.

The configuration file is "config.json", saved at ~/.config/wallfetch/config.json by default. Set
the WALLFETCH_CONFIG_DIR environment variable (or pass --config-dir) to use another directory.
Supplier definition files and a relative WALLFETCH_CACHE_DIR are resolved against that directory:

    {
        "WALLFETCH_CACHE_DIR": "~/.cache/wallfetch",
        "categories": [
            {"name": "nature", "tags": ["landscape", "forest"], "aspect_ratios": ["16:9", "21:9"]}
        ],
        "suppliers": [
            {"name": "wallhaven", "file": "suppliers/wallhaven.json"}
        ],
        "set_command": "swww img {path}"
    }
"""

import json
import os
from dataclasses import dataclass
from dataclasses import field
from pathlib import Path, PurePath
from typing import Optional, Union

from wallfetch.models import AspectRatio, Category, SupplierRef

DEFAULT_CONFIG_DIR = Path("~/.config/wallfetch")
DEFAULT_CACHE_DIR = Path("~/.cache/wallfetch")


class WallfetchConfigError(Exception):
    """Raise when an issue occurs with handling wallfetch configuration."""

    pass


class PathEncoder(json.JSONEncoder):
    """
    custom encoder adds support for serializing pathlib objects as strings
    """

    def default(self, o):
        if isinstance(o, PurePath):
            return str(o)

        else:
            return json.JSONEncoder.default(self, o)


@dataclass
class WallfetchConfig:
    """
    Configuration for wallfetch: where the config and cache live, the categories and suppliers a
    user can pick from, and the command used to apply a wallpaper.
    """

    WALLFETCH_CONFIG_DIR: Path = DEFAULT_CONFIG_DIR
    WALLFETCH_CACHE_DIR: Path = DEFAULT_CACHE_DIR
    categories: list[Category] = field(default_factory=list)
    suppliers: list[SupplierRef] = field(default_factory=list)
    set_command: Optional[str] = None

    def __post_init__(self):
        """
        JSON can't deserialize a str into a Path, so convert the directory values here. A relative
        cache dir is relative to the config dir, like supplier files.
        """

        self.WALLFETCH_CONFIG_DIR = Path(self.WALLFETCH_CONFIG_DIR).expanduser().resolve()
        self.WALLFETCH_CACHE_DIR = (
            self.WALLFETCH_CONFIG_DIR / Path(self.WALLFETCH_CACHE_DIR).expanduser()
        ).resolve()

    def to_json(self) -> dict:
        return {
            "WALLFETCH_CACHE_DIR": self.WALLFETCH_CACHE_DIR,
            "categories": [
                {
                    "name": category.name,
                    "tags": list(category.tags),
                    **(
                        {"aspect_ratios": [str(ratio) for ratio in category.aspect_ratios]}
                        if category.aspect_ratios is not None
                        else {}
                    ),
                }
                for category in self.categories
            ],
            "suppliers": [
                {"name": supplier.name, "file": supplier.file} for supplier in self.suppliers
            ],
            "set_command": self.set_command,
        }

    def generate_config_json(self) -> Path:
        """
        Write the WallfetchConfig to file, serializing to JSON. Returns filepath of written
        config.json file located at WALLFETCH_CONFIG_DIR.

        Warning: will overwrite any existing config file for wallfetch.
        """

        try:
            to_json = json.dumps(self.to_json(), indent=4, cls=PathEncoder)

        except TypeError as error:
            raise WallfetchConfigError(
                f"There was an error trying to serialize config data to JSON: {error}"
            )

        try:
            self.WALLFETCH_CONFIG_DIR.mkdir(parents=True, exist_ok=True)

            dest_file = self.WALLFETCH_CONFIG_DIR / "config.json"
            with open(dest_file, "w") as file:
                file.write(to_json)

        except OSError as error:
            raise WallfetchConfigError(
                f"There was an error saving the configuration file: {error}."
            )

        return dest_file


def config_dir_from_env(config_dir: Union[str, Path, None] = None) -> Path:
    """
    Pick the config directory: explicit argument first, then WALLFETCH_CONFIG_DIR, then the
    default ~/.config/wallfetch.
    """

    if config_dir is None:
        config_dir = os.environ.get("WALLFETCH_CONFIG_DIR", DEFAULT_CONFIG_DIR)

    return Path(config_dir).expanduser().resolve()


def parse_category(entry) -> Category:
    if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
        raise WallfetchConfigError(f"Category entry {entry!r} needs a 'name'.")

    name = entry["name"]
    tags = entry.get("tags", [])
    if not isinstance(tags, list) or not all(isinstance(tag, str) for tag in tags):
        raise WallfetchConfigError(f"Tags for category '{name}' should be a list of strings.")

    aspect_ratios = entry.get("aspect_ratios")
    if aspect_ratios is not None:
        if not isinstance(aspect_ratios, list):
            raise WallfetchConfigError(
                f"Aspect ratios for category '{name}' should be a list, e.g. [\"16:9\"]."
            )
        try:
            aspect_ratios = tuple(AspectRatio.parse(ratio) for ratio in aspect_ratios)
        except ValueError as error:
            raise WallfetchConfigError(f"Category '{name}': {error}")

    return Category(name=name, tags=tuple(tags), aspect_ratios=aspect_ratios)


def parse_supplier(entry) -> SupplierRef:
    if (
        not isinstance(entry, dict)
        or not isinstance(entry.get("name"), str)
        or not isinstance(entry.get("file"), str)
    ):
        raise WallfetchConfigError(
            f"Supplier entry {entry!r} needs a 'name' and a 'file'."
        )

    return SupplierRef(name=entry["name"], file=Path(entry["file"]))


def load_config(config_dir: Union[str, Path, None] = None) -> WallfetchConfig:
    """
    Load config.json from config_dir (see config_dir_from_env) and instantiate a WallfetchConfig.
    Raise WallfetchConfigError if the file can't be found or doesn't make sense.
    """

    config_dir = config_dir_from_env(config_dir)
    config_src = config_dir / "config.json"

    try:
        with config_src.open("r") as file:
            from_json = json.loads(file.read())

    except json.JSONDecodeError as error:
        raise WallfetchConfigError(f"There was an issue reading the config: {error}")

    except FileNotFoundError as error:
        raise WallfetchConfigError(f"There was an issue opening the config: {error}")

    except OSError as error:
        raise WallfetchConfigError(f"There was an issue opening the config: {error}")

    if not isinstance(from_json, dict):
        raise WallfetchConfigError(f"{config_src} should contain a JSON object.")

    categories = from_json.get("categories") or []
    suppliers = from_json.get("suppliers") or []
    if not isinstance(categories, list) or not isinstance(suppliers, list):
        raise WallfetchConfigError("'categories' and 'suppliers' should be lists.")

    set_command = from_json.get("set_command")
    if set_command is not None and not isinstance(set_command, str):
        raise WallfetchConfigError("'set_command' should be a string.")

    cache_dir = from_json.get("WALLFETCH_CACHE_DIR", str(DEFAULT_CACHE_DIR))
    if not isinstance(cache_dir, str):
        raise WallfetchConfigError("'WALLFETCH_CACHE_DIR' should be a path string.")

    return WallfetchConfig(
        WALLFETCH_CONFIG_DIR=config_dir,
        WALLFETCH_CACHE_DIR=cache_dir,
        categories=[parse_category(entry) for entry in categories],
        suppliers=[parse_supplier(entry) for entry in suppliers],
        set_command=set_command,
    )


def init(config_dir: Union[str, Path, None] = None) -> WallfetchConfig:
    """
    Load the wallfetch config, writing a default one first if there is no config file yet.
    """

    config_dir = config_dir_from_env(config_dir)

    if not (config_dir / "config.json").exists():
        WallfetchConfig(WALLFETCH_CONFIG_DIR=config_dir).generate_config_json()

    return load_config(config_dir)
