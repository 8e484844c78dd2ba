from __future__ import annotations

import shutil
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest
from rich.console import Console
from typer.testing import CliRunner

from app import cli
from tests.helpers.architecture_fixtures import repo_root

runner = CliRunner()
app = cli.app


@pytest.fixture(autouse=True)
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "console", Console(width=240))


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    path = tmp_path / "app.yaml"
    path.write_text(
        "generator:\n"
        f"  input_dir: {tmp_path / 'architecture'}\n"
        f"  output_dir: {tmp_path / 'drawio_out'}\n"
        "  log_level: WARNING\n",
        encoding="utf-8",
    )
    return path


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    target = tmp_path / "architecture"
    shutil.copytree(repo_root() / "examples" / "architecture", target)
    return target


def test_generate_writes_one_file_per_architecture(
    tmp_path: Path, config_path: Path, input_dir: Path
) -> None:
    result = runner.invoke(app, ["--config", str(config_path), "generate"])

    assert result.exit_code == 0, result.output
    written = sorted(path.name for path in (tmp_path / "drawio_out").glob("*.drawio"))
    assert written == sorted(f"{path.stem}.drawio" for path in input_dir.glob("*.json"))
    for path in (tmp_path / "drawio_out").glob("*.drawio"):
        assert ET.fromstring(path.read_text(encoding="utf-8")).tag == "mxfile"


def test_generate_with_empty_directory(tmp_path: Path, config_path: Path) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()
    result = runner.invoke(app, ["--config", str(config_path), "generate", "--input-dir", str(empty)])
    assert result.exit_code == 0
    assert "No architecture files found" in result.output


def test_generate_reports_write_failures(
    tmp_path: Path, config_path: Path, input_dir: Path
) -> None:
    blocked = tmp_path / "blocked"
    blocked.write_text("not a directory", encoding="utf-8")
    result = runner.invoke(
        app, ["--config", str(config_path), "generate", "--output-dir", str(blocked)]
    )
    assert result.exit_code == 1
    assert "Failed to render" in result.output
    assert result.exception is None or isinstance(result.exception, SystemExit)


def test_render_single_file(tmp_path: Path, config_path: Path, input_dir: Path) -> None:
    output = tmp_path / "custom" / "hub.drawio"
    result = runner.invoke(
        app,
        ["--config", str(config_path), "render", str(input_dir / "hub_spoke.json"), "--output", str(output)],
    )
    assert result.exit_code == 0, result.output
    assert "1 page(s)" in result.output
    root = ET.fromstring(output.read_text(encoding="utf-8"))
    assert root.find("diagram").get("name") == "Hub-Spoke with APIM"  # type: ignore[union-attr]


def test_render_reports_invalid_input(tmp_path: Path, config_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text('{"subscription": {}, "regions": [{"name": "x"}]}', encoding="utf-8")
    result = runner.invoke(app, ["--config", str(config_path), "render", str(path)])
    assert result.exit_code == 1
    assert "Render failed" in result.output


def test_validate_accepts_example(input_dir: Path) -> None:
    result = runner.invoke(app, ["validate", str(input_dir / "three_tier.json")])
    assert result.exit_code == 0
    assert "Valid architecture file" in result.output


def test_validate_rejects_missing_file(tmp_path: Path) -> None:
    result = runner.invoke(app, ["validate", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_validate_rejects_bad_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["validate", str(path)])
    assert result.exit_code == 1
    assert "Validation failed" in result.output


def test_missing_config_file_exits(tmp_path: Path) -> None:
    result = runner.invoke(app, ["--config", str(tmp_path / "absent.yaml"), "resources"])
    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_resources_table_lists_catalog() -> None:
    result = runner.invoke(app, ["resources"])
    assert result.exit_code == 0
    assert "apiManagement" in result.output
    assert "Virtual Machine" in result.output
