"""Writes the generated project files.

Covers the stub ``src/index.js``, the fixed template set (Rollup config,
type-emission tsconfig, ignore files, README) and the MIT ``LICENSE``.  An
existing file is left untouched unless ``force`` is set.
"""

from __future__ import annotations

import asyncio
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable, Mapping, Optional

from pydantic import BaseModel, Field

from .config import SetupConfig
from .templates import LICENSE_TEMPLATE, SOURCE_STUB_TEMPLATE, TEMPLATE_FILES, TemplateRenderer
from .utils import print_info, run_command

PLACEHOLDER_AUTHOR = "Your Name"


class WriteStatus(str, Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"


class WriteResult(BaseModel):
    """Outcome of writing one generated file."""

    path: Path = Field(..., description="Absolute path of the target file")
    status: WriteStatus


# ---------------------------------------------------------------------------
# Author resolution
# ---------------------------------------------------------------------------


async def git_user_name(cwd: Path | None = None) -> Optional[str]:
    """Return ``git config --get user.name``, or ``None`` on any failure."""
    try:
        returncode, stdout, _ = await run_command(
            ["git", "config", "--get", "user.name"],
            cwd=cwd,
            stdin=asyncio.subprocess.DEVNULL,
        )
    except OSError:
        return None
    if returncode != 0:
        return None
    return stdout.strip() or None


def manifest_author(manifest: Mapping[str, Any]) -> Optional[str]:
    """Extract the author name from a manifest.

    ``author`` may be a plain string or a ``{"name": ..., "email": ...}``
    object.
    """
    author = manifest.get("author")
    if isinstance(author, Mapping):
        author = author.get("name")
    if isinstance(author, str) and author.strip():
        return author.strip()
    return None


async def resolve_author_name(
    explicit: Optional[str],
    manifest: Mapping[str, Any],
    git_lookup: Callable[[], Awaitable[Optional[str]]],
) -> str:
    """Pick the LICENSE author: flag, manifest, git config, then placeholder.

    Each source is tried in order and the first non-empty answer wins.
    *git_lookup* is only awaited when the earlier sources come up empty.
    """
    if explicit and explicit.strip():
        return explicit.strip()
    from_manifest = manifest_author(manifest)
    if from_manifest:
        return from_manifest
    from_git = await git_lookup()
    if from_git:
        return from_git
    return PLACEHOLDER_AUTHOR


# ---------------------------------------------------------------------------
# TemplateWriter
# ---------------------------------------------------------------------------


class TemplateWriter:
    """Writes the stub source, template set and LICENSE into the project."""

    def __init__(
        self,
        config: SetupConfig,
        renderer: TemplateRenderer | None = None,
        git_lookup: Callable[[], Awaitable[Optional[str]]] | None = None,
    ) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()
        self.git_lookup = git_lookup or (lambda: git_user_name(config.project_dir))

    async def write_all(self, manifest: Mapping[str, Any]) -> list[WriteResult]:
        """Write every generated file in order: stub, templates, LICENSE."""
        results = [await self.write_source_stub()]
        results.extend(await self.write_templates())
        results.append(await self.write_license(manifest))
        return results

    async def write_source_stub(self) -> WriteResult:
        content = self.renderer.render(SOURCE_STUB_TEMPLATE)
        return await self.write_file(self.config.source_index_path, content)

    async def write_templates(self) -> list[WriteResult]:
        """Write each entry of the fixed template set independently."""
        results: list[WriteResult] = []
        for relative, template_name in TEMPLATE_FILES:
            target = self.config.project_dir / relative
            if self._should_skip(target):
                results.append(self._skip(target))
                continue
            content = self.renderer.render(template_name)
            results.append(await self.write_file(target, content))
        return results

    async def write_license(
        self, manifest: Mapping[str, Any], year: int | None = None
    ) -> WriteResult:
        """Write the MIT LICENSE with the current year and resolved author."""
        target = self.config.license_path
        if self._should_skip(target):
            return self._skip(target)
        author = await resolve_author_name(
            self.config.author_name, manifest, self.git_lookup
        )
        content = self.renderer.render(
            LICENSE_TEMPLATE,
            {"year": year or date.today().year, "author": author},
        )
        return await self.write_file(target, content)

    async def write_file(self, target: Path, content: str) -> WriteResult:
        """Write *content* to *target* unless it exists and ``force`` is off."""
        if self._should_skip(target):
            return self._skip(target)
        await asyncio.to_thread(_write_file, target, content)
        print_info(f"Wrote {self._display(target)}")
        return WriteResult(path=target, status=WriteStatus.WRITTEN)

    # -- Internal helpers --------------------------------------------------

    def _should_skip(self, target: Path) -> bool:
        return target.exists() and not self.config.force

    def _skip(self, target: Path) -> WriteResult:
        print_info(f"Skipping {self._display(target)} (exists). Use --force to overwrite.")
        return WriteResult(path=target, status=WriteStatus.SKIPPED)

    def _display(self, target: Path) -> str:
        try:
            return target.relative_to(self.config.project_dir).as_posix()
        except ValueError:
            return str(target)


def _write_file(path: Path, content: str) -> None:
    """Synchronous helper: create parent dirs and write content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
