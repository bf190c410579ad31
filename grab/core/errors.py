"""Exit codes for the grab CLI.

The numeric values are process exit codes and should remain stable:
- 0: Success
- 1: User error (bad manifest, bad template, malformed version)
- 2: Environment error (invalid settings)
- 3: Archive error (decompression failed, binary missing from archive)
- 4: Network error (download failed, release index unreachable or refused)
- 5: I/O error (destination not writable)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    ARCHIVE_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
