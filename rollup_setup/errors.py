"""Exception base shared by the setup stages."""

from __future__ import annotations

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_INSTALL_FAILED = 2


class SetupError(Exception):
    """Raised when a setup stage fails in an expected, user-facing way.

    ``exit_code`` is the process status the CLI terminates with.
    """

    exit_code: int = EXIT_USAGE

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(message)
