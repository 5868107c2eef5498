"""Dependency installation through the selected package manager.

A single pass-through subprocess call: the package manager inherits the
terminal's stdio, the tool waits for it to exit, and a non-zero status is
reported with the equivalent command the user can run by hand.  There is no
retry and no timeout.
"""

from __future__ import annotations

from .config import PackageManager, SetupConfig
from .errors import EXIT_INSTALL_FAILED, SetupError
from .utils import print_command, print_info, print_success, run_command

DEV_DEPENDENCIES: tuple[str, ...] = (
    "@rollup/plugin-commonjs@^29.0.0",
    "@rollup/plugin-node-resolve@^16.0.3",
    "rollup@^2.79.2",
    "rollup-plugin-terser@^7.0.2",
    "typescript@^5.9.3",
    "@types/node@^24.10.1",
)


class InstallError(SetupError):
    """Raised when the package manager exits non-zero or cannot be started."""

    exit_code = EXIT_INSTALL_FAILED

    def __init__(
        self,
        package_manager: PackageManager,
        command: str,
        returncode: int | None = None,
        reason: str = "",
    ) -> None:
        self.package_manager = package_manager
        self.command = command
        self.returncode = returncode
        if not reason:
            reason = f"{package_manager.value} exited {returncode}"
        super().__init__(f"{package_manager.value} install failed: {reason}")


def install_command(
    package_manager: PackageManager,
    dependencies: tuple[str, ...] = DEV_DEPENDENCIES,
) -> list[str]:
    """Return the argument vector that installs *dependencies* as dev deps."""
    return [package_manager.value, *package_manager.install_args, *dependencies]


class DependencyInstaller:
    """Installs :data:`DEV_DEPENDENCIES` with the configured package manager."""

    def __init__(self, config: SetupConfig) -> None:
        self.config = config

    @property
    def command(self) -> list[str]:
        return install_command(self.config.package_manager)

    @property
    def manual_command(self) -> str:
        """The command line a user can paste to retry the install by hand."""
        return " ".join(self.command)

    async def run(self) -> bool:
        """Install the dev dependencies unless installation is skipped.

        Returns:
            ``True`` if the package manager ran, ``False`` if skipped.

        Raises:
            InstallError: If the package manager fails or cannot be spawned.
        """
        if self.config.skip_install:
            print_info("Skipping install (--no-install)")
            print_success("Done. Review and commit the changes if OK.")
            return False

        print_command("Installing devDependencies: ", " ".join(DEV_DEPENDENCIES))
        manager = self.config.package_manager
        try:
            returncode, _, _ = await run_command(
                self.command, cwd=self.config.project_dir, capture=False
            )
        except OSError as exc:
            raise InstallError(
                manager, self.manual_command, reason=f"could not run {manager.value}: {exc}"
            ) from exc
        if returncode != 0:
            raise InstallError(manager, self.manual_command, returncode=returncode)

        print_success("Installed devDependencies.")
        print_success("All done. Run `npm run build` to verify the build works.")
        return True
