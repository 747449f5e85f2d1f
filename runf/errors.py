"""Error taxonomy shared by runf components."""

from __future__ import annotations


class RunfError(RuntimeError):
    """Base class for failures that abort a runf invocation."""


class ResolutionError(RunfError):
    """Raised when the build target cannot be derived from the runtime description."""


class EnumerationError(RunfError):
    """Raised when the source root is unusable or contains no files."""


class WorkspaceIOError(RunfError):
    """Raised when a source file cannot be read or a workspace file cannot be written."""


class SpawnError(RunfError):
    """Raised when the toolchain executable cannot be started."""


class ConfigError(RunfError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "ConfigError",
    "EnumerationError",
    "ResolutionError",
    "RunfError",
    "SpawnError",
    "WorkspaceIOError",
]
