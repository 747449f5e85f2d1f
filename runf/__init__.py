"""Run a directory of loose C# files as an ad-hoc dotnet project."""

from .directives import scan_directives
from .errors import (
    ConfigError,
    EnumerationError,
    ResolutionError,
    RunfError,
    SpawnError,
    WorkspaceIOError,
)
from .models import ProjectInfo, Reference, ReferenceMap, ScanResult, Workspace
from .orchestrator import Orchestrator
from .runtime import resolve_target_framework

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "EnumerationError",
    "Orchestrator",
    "ProjectInfo",
    "Reference",
    "ReferenceMap",
    "ResolutionError",
    "RunfError",
    "ScanResult",
    "SpawnError",
    "Workspace",
    "WorkspaceIOError",
    "resolve_target_framework",
    "scan_directives",
]
