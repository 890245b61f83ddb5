"""Error taxonomy for version resolution and launching.

Every failure that stops a run derives from NodeClerkError and carries the
process exit code the CLI entry points should use for it.
"""

from __future__ import annotations

from typing import Optional

from constants import ExitCodes


class NodeClerkError(Exception):
    """Base class for fatal, user-visible failures."""

    kind = "error"
    exit_code = ExitCodes.RESOLUTION_ERROR.value

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path

    def describe(self) -> str:
        """One-line diagnostic naming the failure kind."""
        return f"{self.kind}: {self}"


class StoreUnresolvable(NodeClerkError):
    """The version store root does not canonicalize to an existing path."""

    kind = "store unresolvable"


class StoreUnreadable(NodeClerkError):
    """The version store exists but its versions directory cannot be listed."""

    kind = "store unreadable"


class NoLocalVersionsFound(NodeClerkError):
    """The store is readable but holds no parseable version directories."""

    kind = "no local versions found"


class NoMatchingVersion(NodeClerkError):
    """Versions are installed, but none satisfies the discovered range."""

    kind = "no matching version"


class ExecutableNotFound(NodeClerkError):
    """The selected version has no executable at the expected path."""

    kind = "executable not found"
    exit_code = ExitCodes.EXECUTABLE_NOT_FOUND.value


class SpawnFailed(NodeClerkError):
    """The operating system refused to start the executable."""

    kind = "spawn failed"
    exit_code = ExitCodes.SPAWN_FAILED.value
