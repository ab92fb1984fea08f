"""Tests for the project metadata."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

ROOT = Path(__file__).resolve().parents[1]


def test_readme_is_user_documentation() -> None:
    with (ROOT / "pyproject.toml").open("rb") as fh:
        project = tomllib.load(fh)["project"]

    readme = ROOT / project["readme"]
    assert readme.name == "README.md"
    assert readme.exists()
    assert "sstmaps" in readme.read_text(encoding="utf-8")
