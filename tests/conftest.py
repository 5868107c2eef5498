"""Shared pytest fixtures for the roll-up setup test suite.

Provides reusable fixtures for:
- Temporary JavaScript projects with and without a ``package.json``
- Frozen ``SetupConfig`` instances pointed at those projects
- A stubbed git user-name lookup
- Stub package-manager executables on ``PATH``
"""

from __future__ import annotations

import json
import stat
import textwrap
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock

import pytest

from rollup_setup.config import SetupConfig


# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_manifest() -> dict[str, Any]:
    """A typical ``npm init -y`` manifest."""
    return {
        "name": "my-lib",
        "version": "1.0.0",
        "description": "",
        "main": "index.js",
        "scripts": {
            "test": 'echo "Error: no test specified" && exit 1',
        },
        "keywords": [],
        "author": "",
        "license": "ISC",
    }


@pytest.fixture
def sample_manifest_text(sample_manifest: dict[str, Any]) -> str:
    """The sample manifest as npm would write it."""
    return json.dumps(sample_manifest, indent=2) + "\n"


# ---------------------------------------------------------------------------
# Paths & Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def empty_project(tmp_path: Path) -> Path:
    """A directory with no ``package.json``."""
    project_dir = tmp_path / "empty-project"
    project_dir.mkdir()
    return project_dir


@pytest.fixture
def js_project(tmp_path: Path, sample_manifest_text: str) -> Path:
    """A directory holding only the sample ``package.json``."""
    project_dir = tmp_path / "js-project"
    project_dir.mkdir()
    (project_dir / "package.json").write_text(sample_manifest_text, encoding="utf-8")
    return project_dir


@pytest.fixture
def make_config(js_project: Path) -> Callable[..., SetupConfig]:
    """Factory for configs rooted at ``js_project`` unless overridden."""

    def _make(**kwargs: Any) -> SetupConfig:
        kwargs.setdefault("project_dir", js_project)
        kwargs.setdefault("skip_install", True)
        return SetupConfig(**kwargs)

    return _make


# ---------------------------------------------------------------------------
# Subprocess stubs
# ---------------------------------------------------------------------------

@pytest.fixture
def git_lookup() -> AsyncMock:
    """Git user-name lookup that answers ``"Git User"`` without spawning git."""
    return AsyncMock(return_value="Git User")


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the caller's environment from leaking into config defaults."""
    monkeypatch.delenv("ROLLUP_SETUP_PKG", raising=False)


@pytest.fixture
def stub_bin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Callable[..., Path]:
    """Install stub executables in a directory that shadows ``PATH``.

    ``stub_bin("yarn", exit_code=1)`` writes a shell script that records its
    argv to ``<bin>/yarn.args`` and exits with *exit_code*.  ``PATH`` is
    replaced entirely, so no real package manager or git can be reached.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))

    def _install(name: str, exit_code: int = 0) -> Path:
        script = bin_dir / name
        script.write_text(
            textwrap.dedent(f"""\
                #!/bin/sh
                echo "$@" > "{bin_dir / (name + '.args')}"
                exit {exit_code}
                """),
            encoding="utf-8",
        )
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return script

    return _install

