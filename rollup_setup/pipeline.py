"""roll-up setup orchestrator.

Runs the setup stages strictly in order:

1. MERGE    -- back up and merge ``package.json``.
2. WRITE    -- stub ``src/index.js``, template set, ``LICENSE``.
3. INSTALL  -- install devDependencies (unless ``--no-install``).

No stage is re-entered.  Expected failures surface as ``SetupError``
subclasses carrying the exit code the CLI terminates with.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from .config import SetupConfig
from .installer import DependencyInstaller
from .manifest import ManifestMerger
from .templates import TemplateRenderer
from .utils import print_summary_table
from .writer import TemplateWriter, WriteResult


class SetupResult(BaseModel):
    """What a completed run did."""

    manifest: dict[str, Any] = Field(default_factory=dict)
    files: list[WriteResult] = Field(default_factory=list)
    installed: bool = Field(default=False, description="Whether the package manager ran")


class SetupPipeline:
    """Drives one setup run against ``config.project_dir``.

    Attributes:
        config: Frozen options for this run.
        merger: Manifest merger stage.
        writer: Generated-file writer stage.
        installer: Dependency installer stage.
    """

    def __init__(
        self,
        config: SetupConfig,
        renderer: TemplateRenderer | None = None,
        writer: TemplateWriter | None = None,
    ) -> None:
        self.config = config
        self.merger = ManifestMerger(config)
        self.writer = writer or TemplateWriter(config, renderer=renderer)
        self.installer = DependencyInstaller(config)

    async def run(self) -> SetupResult:
        """Execute every stage in order.

        Raises:
            ManifestNotFoundError: Before any write if ``package.json`` is missing.
            InstallError: If the package manager fails.
        """
        manifest = await self.merger.run()
        files = await self.writer.write_all(manifest)
        print_summary_table(
            {_relative(r.path, self.config): r.status.value for r in files},
            title="Generated files",
        )
        installed = await self.installer.run()
        return SetupResult(manifest=manifest, files=files, installed=installed)


def _relative(path: Path, config: SetupConfig) -> str:
    try:
        return path.relative_to(config.project_dir).as_posix()
    except ValueError:
        return str(path)
