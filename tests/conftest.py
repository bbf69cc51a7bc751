"""Shared fixtures for the usenest test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from usenest.lib.models import AppConfig


FIXTURES_DIR = Path(__file__).parent / "fixtures"
UNSORTED_DIR = FIXTURES_DIR / "unsorted"
NESTED_DIR = FIXTURES_DIR / "nested"
EDGE_CASES_DIR = FIXTURES_DIR / "edge_cases"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run every test in an empty working directory with no $USENEST_CONFIG."""
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.delenv("USENEST_CONFIG", raising=False)
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture()
def write_config(tmp_path: Path):
    """Return a helper that writes a YAML app config and returns its path."""

    def _write(data, name: str = "usenest.yaml") -> Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            if isinstance(data, str):
                fh.write(data)
            else:
                yaml.dump(data, fh, default_flow_style=False)
        return path

    return _write


@pytest.fixture()
def settings() -> AppConfig:
    """Return the default layout settings."""
    return AppConfig()


@pytest.fixture()
def duplicated_source() -> str:
    """Return unsorted source with repeated and scattered use declarations."""
    return (UNSORTED_DIR / "duplicated.rs").read_text(encoding="utf-8")


@pytest.fixture()
def flat_source() -> str:
    """Return source whose use declarations are sorted but not nested."""
    return (UNSORTED_DIR / "flat.rs").read_text(encoding="utf-8")


@pytest.fixture()
def nested_expected() -> str:
    """Return the expected nested form of duplicated.rs."""
    return (NESTED_DIR / "duplicated.rs").read_text(encoding="utf-8")


@pytest.fixture()
def scoped_source() -> str:
    """Return source mixing pub use, attributes, nested modules and aliases."""
    return (EDGE_CASES_DIR / "scoped.rs").read_text(encoding="utf-8")
