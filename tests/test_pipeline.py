"""Tests for the setup orchestrator (rollup_setup.pipeline).

Covers:
- Stage order: manifest merge, file writes, install
- SetupResult contents
- Missing manifest stops before any write
- Installer failure propagates after files are written
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable
from unittest.mock import AsyncMock, patch

import pytest

from rollup_setup.config import SetupConfig
from rollup_setup.installer import InstallError
from rollup_setup.manifest import ManifestNotFoundError
from rollup_setup.pipeline import SetupPipeline, SetupResult
from rollup_setup.writer import TemplateWriter, WriteStatus

pytestmark = pytest.mark.unit


class TestSetupPipeline:
    async def test_run_without_install(
        self, make_config: Callable[..., SetupConfig], js_project: Path, git_lookup: AsyncMock
    ):
        config = make_config(skip_install=True)
        pipeline = SetupPipeline(config, writer=TemplateWriter(config, git_lookup=git_lookup))
        with patch("rollup_setup.installer.run_command", new=AsyncMock()) as mock_run:
            result = await pipeline.run()

        assert isinstance(result, SetupResult)
        assert result.installed is False
        assert result.manifest["type"] == "module"
        assert len(result.files) == 7
        assert all(f.status is WriteStatus.WRITTEN for f in result.files)
        mock_run.assert_not_called()

    async def test_missing_manifest_writes_nothing(self, empty_project: Path):
        pipeline = SetupPipeline(SetupConfig(project_dir=empty_project, skip_install=True))
        with pytest.raises(ManifestNotFoundError):
            await pipeline.run()
        assert list(empty_project.iterdir()) == []

    async def test_install_failure_after_writes(
        self, make_config: Callable[..., SetupConfig], js_project: Path, git_lookup: AsyncMock
    ):
        config = make_config(skip_install=False, package_manager="pnpm")
        pipeline = SetupPipeline(config, writer=TemplateWriter(config, git_lookup=git_lookup))
        with patch(
            "rollup_setup.installer.run_command",
            new=AsyncMock(return_value=(127, "", "")),
        ):
            with pytest.raises(InstallError) as exc_info:
                await pipeline.run()

        assert exc_info.value.command.startswith("pnpm add -D ")
        assert (js_project / "rollup.config.js").is_file()
        assert (js_project / "LICENSE").is_file()

    async def test_summary_table_printed(
        self,
        make_config: Callable[..., SetupConfig],
        git_lookup: AsyncMock,
        capsys: pytest.CaptureFixture[str],
    ):
        config = make_config()
        pipeline = SetupPipeline(config, writer=TemplateWriter(config, git_lookup=git_lookup))
        await pipeline.run()
        out = capsys.readouterr().out
        assert "Generated files" in out
        assert "rollup.config.js" in out
