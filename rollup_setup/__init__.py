"""roll-up setup -- prepares a JavaScript project for Rollup + JSDoc types.

Merges build/publish fields into ``package.json``, writes the Rollup and
type-emission configs, ignore files, README, stub source and LICENSE, then
optionally installs the dev dependencies with npm, pnpm or yarn.

Quick usage::

    from rollup_setup import SetupConfig, SetupPipeline

    config = SetupConfig(package_manager="pnpm", skip_install=True)
    result = await SetupPipeline(config).run()
"""

from rollup_setup.config import PackageManager, SetupConfig
from rollup_setup.errors import SetupError
from rollup_setup.installer import DEV_DEPENDENCIES, DependencyInstaller, InstallError
from rollup_setup.manifest import ManifestMerger, ManifestNotFoundError, merge_defaults
from rollup_setup.pipeline import SetupPipeline, SetupResult
from rollup_setup.templates import TemplateRenderer
from rollup_setup.writer import TemplateWriter, WriteResult, WriteStatus

__all__ = [
    "DEV_DEPENDENCIES",
    "DependencyInstaller",
    "InstallError",
    "ManifestMerger",
    "ManifestNotFoundError",
    "PackageManager",
    "SetupConfig",
    "SetupError",
    "SetupPipeline",
    "SetupResult",
    "TemplateRenderer",
    "TemplateWriter",
    "WriteResult",
    "WriteStatus",
    "merge_defaults",
]
