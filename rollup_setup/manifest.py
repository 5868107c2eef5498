"""Manifest merging for ``package.json``.

Reads the project's manifest, writes a byte-for-byte backup next to it, and
fills in the build/publish fields the Rollup + JSDoc setup relies on.  A key
that is already present in the manifest is never replaced, whatever its
value; only missing keys gain defaults.
"""

from __future__ import annotations

import asyncio
import copy
import json
import time
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .config import MANIFEST_NAME, SetupConfig
from .errors import EXIT_USAGE, SetupError
from .utils import print_info, print_success, print_warning

# ---------------------------------------------------------------------------
# Default fields
# ---------------------------------------------------------------------------

TOP_LEVEL_DEFAULTS: Mapping[str, Any] = MappingProxyType({
    "type": "module",
    "main": "dist/cjs/index.cjs",
    "module": "dist/esm/index.js",
    "types": "dist/types/index.d.ts",
    "files": ("dist/",),
})

EXPORTS_DEFAULT: Mapping[str, Any] = MappingProxyType({
    ".": MappingProxyType({
        "import": "./dist/esm/index.js",
        "require": "./dist/cjs/index.cjs",
        "types": "./dist/types/index.d.ts",
    }),
})

SCRIPT_DEFAULTS: Mapping[str, str] = MappingProxyType({
    "build:js": "rollup -c",
    "build:types": "tsc -p tsconfig.types.json",
    "build": "npm run build:js && npm run build:types",
    "prepublishOnly": "npm run build",
})


class ManifestNotFoundError(SetupError):
    """Raised when the working directory has no ``package.json``."""

    exit_code = EXIT_USAGE


class ManifestError(ValueError):
    """Raised when ``package.json`` is not a standard JSON object."""


# ---------------------------------------------------------------------------
# Pure merge
# ---------------------------------------------------------------------------


def merge_defaults(manifest: Mapping[str, Any]) -> tuple[dict[str, Any], list[str]]:
    """Merge the default fields into a copy of *manifest*.

    Returns:
        ``(merged, added)`` where *added* lists the keys that gained a
        default, with script entries reported as ``scripts.<name>``.
    """
    merged = dict(manifest)
    added: list[str] = []

    for key, value in TOP_LEVEL_DEFAULTS.items():
        if key not in merged:
            merged[key] = _plain(value)
            added.append(key)

    if "exports" not in merged:
        merged["exports"] = _plain(EXPORTS_DEFAULT)
        added.append("exports")

    if "scripts" not in merged:
        merged["scripts"] = {}
    scripts = merged["scripts"]
    # A non-object "scripts" value belongs to the user; leave it as is.
    if isinstance(scripts, dict):
        scripts = dict(scripts)
        for name, command in SCRIPT_DEFAULTS.items():
            if name not in scripts:
                scripts[name] = command
                added.append(f"scripts.{name}")
        merged["scripts"] = scripts

    return merged, added


def dump_manifest(manifest: Mapping[str, Any]) -> str:
    """Serialise a manifest as 2-space JSON with a trailing newline."""
    return json.dumps(manifest, indent=2, ensure_ascii=False) + "\n"


def _reject_constant(name: str) -> Any:
    raise ManifestError(f"{MANIFEST_NAME} contains non-standard JSON constant {name}")


def _plain(value: Any) -> Any:
    """Deep-copy a constant into plain JSON containers."""
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return copy.deepcopy(value)


# ---------------------------------------------------------------------------
# ManifestMerger
# ---------------------------------------------------------------------------


class ManifestMerger:
    """Backs up and rewrites the project's ``package.json``."""

    def __init__(self, config: SetupConfig) -> None:
        self.config = config

    async def run(self, timestamp_ms: int | None = None) -> dict[str, Any]:
        """Back up, merge, and write the manifest.

        Args:
            timestamp_ms: Epoch milliseconds used in the backup filename.
                Defaults to the current time.

        Returns:
            The merged manifest as written to disk.

        Raises:
            ManifestNotFoundError: If ``package.json`` does not exist.
            json.JSONDecodeError: If the manifest is not valid JSON.
            ManifestError: If the manifest is not a JSON object or
                uses ``NaN``/``Infinity``.
            OSError: If the backup or the rewrite cannot be written.
        """
        raw, manifest = await self.load()

        if timestamp_ms is None:
            timestamp_ms = time.time_ns() // 1_000_000
        backup = await self.backup(raw, timestamp_ms)
        print_info(f"Backed up {MANIFEST_NAME} -> {backup.name}")

        merged, added = merge_defaults(manifest)
        if not isinstance(merged["scripts"], dict):
            print_warning(f"\"scripts\" in {MANIFEST_NAME} is not an object; leaving it unchanged.")
        await asyncio.to_thread(
            self.config.manifest_path.write_text, dump_manifest(merged), "utf-8"
        )
        if added:
            print_success(f"Updated {MANIFEST_NAME} (merged fields: {', '.join(added)}).")
        else:
            print_success(f"Updated {MANIFEST_NAME} (no missing fields).")
        return merged

    async def load(self) -> tuple[bytes, dict[str, Any]]:
        """Read the manifest, returning its raw bytes and parsed object."""
        path = self.config.manifest_path
        if not path.is_file():
            raise ManifestNotFoundError(
                f"No {MANIFEST_NAME} found in {self.config.project_dir}. "
                'Run "npm init" first or run this in a project root.'
            )
        raw = await asyncio.to_thread(path.read_bytes)
        data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
        if not isinstance(data, dict):
            raise ManifestError(
                f"{path} must contain a JSON object, got {type(data).__name__}"
            )
        return raw, data

    async def backup(self, raw: bytes, timestamp_ms: int) -> Path:
        """Write *raw* unchanged to the timestamped backup path."""
        target = self.config.backup_path(timestamp_ms)
        await asyncio.to_thread(target.write_bytes, raw)
        return target
