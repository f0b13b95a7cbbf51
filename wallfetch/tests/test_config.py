"""
Tests for config.py

Validate loading, generating and rejecting wallfetch configuration files.
"""

import json
from pathlib import Path

import pytest

from wallfetch.models import AspectRatio, Category, SupplierRef

# following entities are tested in this module:
from wallfetch.config import WallfetchConfig
from wallfetch.config import WallfetchConfigError
from wallfetch.config import load_config
from wallfetch.config import init


def write_config(directory, config) -> None:
    directory.mkdir(parents=True, exist_ok=True)
    (directory / "config.json").write_text(
        config if isinstance(config, str) else json.dumps(config)
    )


def test_load_config(config_dir, tmp_path):
    config = load_config(config_dir)

    assert config.WALLFETCH_CONFIG_DIR == config_dir.resolve()
    assert config.WALLFETCH_CACHE_DIR == (tmp_path / "cache").resolve()
    assert config.categories[0] == Category(
        "nature", tags=("landscape",), aspect_ratios=(AspectRatio(16, 9),)
    )
    assert config.categories[1].aspect_ratios is None
    assert config.suppliers[0] == SupplierRef("local", Path("suppliers/local.json"))
    assert config.set_command is None


def test_load_config_from_environment(config_dir):
    assert load_config().WALLFETCH_CONFIG_DIR == config_dir.resolve()


def test_load_config_relative_cache_dir(tmp_path, monkeypatch):
    write_config(tmp_path / "config", {"WALLFETCH_CACHE_DIR": "cache"})
    monkeypatch.chdir(tmp_path)

    config = load_config(tmp_path / "config")

    assert config.WALLFETCH_CACHE_DIR == (tmp_path / "config" / "cache").resolve()


def test_load_config_missing(tmp_path):
    with pytest.raises(WallfetchConfigError):
        load_config(tmp_path)


@pytest.mark.parametrize(
    "config",
    [
        "{not json",
        "[]",
        {"categories": {"name": "nature"}},
        {"categories": [{"tags": ["x"]}]},
        {"categories": [{"name": "nature", "tags": "landscape"}]},
        {"categories": [{"name": "nature", "aspect_ratios": ["wide"]}]},
        {"categories": [{"name": "nature", "aspect_ratios": "16:9"}]},
        {"suppliers": [{"name": "wallhaven"}]},
        {"set_command": ["swww", "img"]},
        {"WALLFETCH_CACHE_DIR": 42},
    ],
)
def test_load_config_malformed(tmp_path, config):
    write_config(tmp_path, config)

    with pytest.raises(WallfetchConfigError):
        load_config(tmp_path)


def test_init_generates_default(tmp_path):
    config = init(tmp_path / "new")

    assert (tmp_path / "new" / "config.json").is_file()
    assert config.categories == []
    assert config.suppliers == []
    assert config.set_command is None


def test_init_keeps_existing(config_dir):
    before = (config_dir / "config.json").read_text()

    config = init(config_dir)

    assert (config_dir / "config.json").read_text() == before
    assert len(config.categories) == 2


def test_generate_config_round_trip(tmp_path):
    config = WallfetchConfig(
        WALLFETCH_CONFIG_DIR=tmp_path,
        WALLFETCH_CACHE_DIR=tmp_path / "cache",
        categories=[Category("space", tags=("galaxy",), aspect_ratios=(AspectRatio(21, 9),))],
        suppliers=[SupplierRef("wallhaven", Path("suppliers/wallhaven.json"))],
        set_command="swww img {path}",
    )

    config.generate_config_json()

    assert load_config(tmp_path) == config
