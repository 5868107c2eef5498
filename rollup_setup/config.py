"""roll-up setup configuration.

The configuration record is built once from the command line (optionally
overlaid on environment defaults) and is frozen afterwards.  Derived paths
live here as read-only properties so the rest of the tool never joins paths
against the working directory by hand.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

PACKAGE_MANAGER_ENV = "ROLLUP_SETUP_PKG"

MANIFEST_NAME = "package.json"


class PackageManager(str, Enum):
    """Supported package managers and their install-dev-dependency syntax."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"

    @property
    def install_args(self) -> tuple[str, ...]:
        """Arguments placed between the executable and the dependency list."""
        return _INSTALL_ARGS[self]

    @classmethod
    def parse(cls, value: str) -> "PackageManager":
        """Case-insensitive lookup.

        Raises:
            ValueError: If *value* is not a supported manager.
        """
        return cls(value.strip().lower())


_INSTALL_ARGS: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.NPM: ("install", "--save-dev"),
    PackageManager.PNPM: ("add", "-D"),
    PackageManager.YARN: ("add", "--dev"),
}


class SetupConfig(BaseModel):
    """Options for a single setup run."""

    model_config = ConfigDict(frozen=True)

    package_manager: PackageManager = Field(default=PackageManager.NPM)
    skip_install: bool = Field(default=False, description="Do not install devDependencies")
    force: bool = Field(default=False, description="Overwrite existing generated files")
    author_name: str | None = Field(default=None, description="Author name used in LICENSE")
    project_dir: Path = Field(default_factory=Path.cwd)

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def manifest_path(self) -> Path:
        """Path to the project's ``package.json``."""
        return self.project_dir / MANIFEST_NAME

    @property
    def license_path(self) -> Path:
        return self.project_dir / "LICENSE"

    @property
    def source_index_path(self) -> Path:
        """Path to the stub entry point ``src/index.js``."""
        return self.project_dir / "src" / "index.js"

    def backup_path(self, timestamp_ms: int) -> Path:
        """Path of the manifest backup taken at *timestamp_ms* (epoch millis)."""
        return self.project_dir / f"{MANIFEST_NAME}.setup-backup.{timestamp_ms}.json"

    # ------------------------------------------------------------------
    # Environment overlay
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls, **overrides: object) -> "SetupConfig":
        """Build a ``SetupConfig`` from environment defaults plus *overrides*.

        Recognised variables (all optional):
            ROLLUP_SETUP_PKG -- package manager used when none is given.

        The environment is not consulted for a field whose override is set.

        Raises:
            ValueError: If ``ROLLUP_SETUP_PKG`` is consulted and names an
                unsupported manager.
        """
        kwargs: dict[str, object] = {k: v for k, v in overrides.items() if v is not None}
        raw_pkg = os.environ.get(PACKAGE_MANAGER_ENV, "").strip()
        if raw_pkg and "package_manager" not in kwargs:
            try:
                kwargs["package_manager"] = PackageManager.parse(raw_pkg)
            except ValueError:
                raise ValueError(
                    f"Unsupported package manager: {raw_pkg} (from {PACKAGE_MANAGER_ENV})"
                ) from None
        return cls(**kwargs)
