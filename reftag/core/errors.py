"""Process exit codes.

The values are what the runner sees as the step's exit status and should
remain stable:
- 0: Success (including events reftag deliberately ignores, unless --strict)
- 1: User error (event not applicable, ref is not semver, stale ref)
- 2: Environment error (missing token, repository or event payload)
- 4: Network error (ref store request failed)
- 5: I/O error (step output file could not be written)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for reftag commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5
