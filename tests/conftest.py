"""Shared pytest fixtures for vcardctl tests."""

from __future__ import annotations

import json
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from vcardctl.config.settings import VcardSettings
from vcardctl.services.telemetry import disable_telemetry


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _reset_telemetry() -> Generator[None]:
    """Keep a verbose CLI invocation from leaking telemetry into later tests."""
    yield
    disable_telemetry()


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run in an empty temp directory with no config env vars leaking in.

    Use via ``@pytest.mark.usefixtures("_isolated_cwd")``.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VCARDCTL_CONFIG", raising=False)
    monkeypatch.delenv("VCARDCTL_CARD__DEFAULT_VERSION", raising=False)


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> VcardSettings:
    """Default settings, isolated from any real config file."""
    monkeypatch.delenv("VCARDCTL_CONFIG", raising=False)
    return VcardSettings.from_cli(start_dir=tmp_path)


@pytest.fixture
def gump_definition() -> dict[str, Any]:
    """A valid 4.0 card definition."""
    return {
        "version": "4.0",
        "fields": [
            {"kind": "name", "family_name": "Gump", "given_name": "Forrest"},
            {"kind": "formatted_name", "text": "Forrest Gump"},
            {"kind": "organization", "name": "Bubba Gump Shrimp Co."},
            {"kind": "telephone", "number": "+1-111-555-1212", "types": ["work", "voice"]},
            {"kind": "email", "address": "forrest@example.com"},
        ],
    }


@pytest.fixture
def write_definition(tmp_path: Path) -> Callable[..., Path]:
    """Write a definition mapping to a JSON file under tmp_path and return its path."""

    def _write(definition: dict[str, Any], name: str = "card.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(definition), encoding="utf-8")
        return path

    return _write
