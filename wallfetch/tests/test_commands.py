"""
Test the CLI driver for wallfetch

cli.py is the entry point for the wallfetch program. Verify that invocations return the correct exit
code on success or failure and print what scripts rely on. The config_dir fixture (conftest.py)
points WALLFETCH_CONFIG_DIR at a temporary config using the local directory supplier, so no network
access is needed.
"""

import sys
import json
from pathlib import Path
from subprocess import run

import pytest
from click.testing import CliRunner

from wallfetch.cli import cli
from wallfetch.cli_utils.utils import import_commands
from wallfetch.cli_utils.utils import attach_commands

runner = CliRunner()


@pytest.fixture(scope="module")
def subcommands():
    """
    Import all of the commands found in the subcommands folder *without* invoking the entrypoint.
    """

    return import_commands()


@pytest.fixture(autouse=True)
def setup(subcommands):
    attach_commands(cli, subcommands)
    yield
    cli.commands = {}


def update_config(config_dir: Path, **changes):
    file = config_dir / "config.json"
    config = json.loads(file.read_text())
    config.update(changes)
    file.write_text(json.dumps(config))


def cached_files(config_dir: Path) -> list[Path]:
    cache_dir = Path(json.loads((config_dir / "config.json").read_text())["WALLFETCH_CACHE_DIR"])
    return list(cache_dir.iterdir()) if cache_dir.exists() else []


def test_commands_attached():
    assert {"fetch", "list"} <= set(cli.commands)


def test_invocation_help():
    result = runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "fetch" in result.output


def test_invocation_failure_invalid_args():
    result = runner.invoke(cli, ["--thiswillneverbeanoption"])

    assert result.exception is not None
    assert result.exit_code != 0


def test_fetch_success(config_dir):
    result = runner.invoke(cli, ["fetch", "--supplier", "local", "--category", "nature"])

    assert result.exit_code == 0, result.output
    assert len(cached_files(config_dir)) == 1


def test_fetch_simple_prints_path(config_dir, image_dir):
    result = runner.invoke(cli, ["fetch", "-s", "local", "-t", "landscape", "--simple"])

    assert result.exit_code == 0, result.output

    path = Path(result.output.strip())
    assert path.is_absolute()
    assert path.read_bytes() == (image_dir / "forest-landscape.jpg").read_bytes()


def test_fetch_output(config_dir, tmp_path):
    output = tmp_path / "today.png"

    result = runner.invoke(cli, ["fetch", "-s", "local", "-c", "city", "-o", str(output), "--simple"])

    assert result.exit_code == 0, result.output
    assert result.output.strip() == str(output.resolve())
    assert output.is_file()
    assert cached_files(config_dir) == []


def test_fetch_unknown_category(config_dir):
    result = runner.invoke(cli, ["fetch", "-s", "local", "-c", "zzzzzzzz"])

    assert result.exit_code == 1
    assert "did you mean" in result.output
    assert cached_files(config_dir) == []


def test_fetch_ambiguous_supplier(config_dir):
    result = runner.invoke(cli, ["fetch", "-s", "locax"])

    assert result.exit_code == 1
    assert "local?" in result.output


def test_fetch_no_suppliers(config_dir):
    update_config(config_dir, suppliers=[])

    result = runner.invoke(cli, ["fetch"])

    assert result.exit_code == 1
    assert "No suppliers defined" in result.output


def test_fetch_no_results(config_dir):
    result = runner.invoke(cli, ["fetch", "-s", "local", "-t", "underwater"])

    assert result.exit_code == 1
    assert cached_files(config_dir) == []


def test_fetch_assign_without_command(config_dir):
    result = runner.invoke(cli, ["fetch", "-s", "local", "--assign"])

    assert result.exit_code == 1
    assert "set_command" in result.output
    assert len(cached_files(config_dir)) == 1


def test_fetch_assign_command_fails(config_dir, tmp_path):
    """
    A failing wallpaper command is reported but the fetch itself still succeeds.
    """

    script = tmp_path / "fail.py"
    script.write_text("import sys\nsys.stderr.write('no display')\nsys.exit(3)\n")
    update_config(config_dir, set_command=f"{sys.executable} {script} {{path}}")

    result = runner.invoke(cli, ["fetch", "-s", "local", "--assign"])

    assert result.exit_code == 0, result.output
    assert "no display" in result.output
    assert len(cached_files(config_dir)) == 1


def test_fetch_assign_command_succeeds(config_dir, tmp_path):
    record = tmp_path / "record.txt"
    script = tmp_path / "record.py"
    script.write_text(f"import sys\nopen({str(record)!r}, 'w').write(sys.argv[1])\n")
    update_config(config_dir, set_command=f"{sys.executable} {script} {{path}}")

    result = runner.invoke(cli, ["fetch", "-s", "local", "--assign", "--simple"])

    assert result.exit_code == 0, result.output
    assert record.read_text() == result.output.strip()


def test_option_quiet(config_dir):
    result = runner.invoke(cli, ["--quiet", "fetch", "-s", "local"])

    assert result.exit_code == 0
    assert result.output == ""


def test_list(config_dir):
    result = runner.invoke(cli, ["list"])

    assert result.exit_code == 0, result.output
    assert "nature" in result.output
    assert "suppliers/web.json" in result.output


def test_default_config_generated(tmp_path, monkeypatch):
    monkeypatch.delenv("WALLFETCH_CONFIG_DIR", raising=False)
    config_dir = tmp_path / "fresh"

    result = runner.invoke(cli, ["--config-dir", str(config_dir), "list"])

    assert result.exit_code == 0, result.output
    assert (config_dir / "config.json").is_file()
    assert "no categories defined" in result.output


def test_invalid_config(tmp_path):
    (tmp_path / "config.json").write_text("{broken")

    result = runner.invoke(cli, ["--config-dir", str(tmp_path), "fetch"])

    assert result.exit_code == 1
    assert "config" in result.output


def test_launch_as_module_success():
    result = run([sys.executable, "-m", "wallfetch", "--help"], capture_output=True, text=True)

    assert result.returncode == 0
    assert "fetch" in result.stdout
