"""Root-level test configuration and fixtures."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.fieldguide and FIELDGUIDE_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("FIELDGUIDE_CATALOG_PATH", raising=False)
    monkeypatch.delenv("FIELDGUIDE_OUTPUT_FORMAT", raising=False)
    return home


@pytest.fixture
def write_yaml(tmp_path: Path):
    """Write text to a YAML file under tmp_path and return its path."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
