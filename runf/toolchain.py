"""Locating and launching the dotnet toolchain."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Sequence, TextIO

from .errors import SpawnError
from .logging import get_logger

DEFAULT_TOOLCHAIN = "dotnet"
DEFAULT_ARGUMENTS = ("run",)

_LOGGER = get_logger("toolchain")


@dataclass
class ToolchainResult:
    """Captured output of a toolchain invocation."""

    returncode: int
    stdout: str
    stderr: str


ToolchainRunner = Callable[[Sequence[str], Path], ToolchainResult]


def executable_filename(name: str = DEFAULT_TOOLCHAIN, *, platform: str | None = None) -> str:
    """Return the platform-specific executable filename for ``name``."""
    platform = platform or sys.platform
    if platform.startswith("win") and not name.lower().endswith(".exe"):
        return f"{name}.exe"
    return name


def is_searchable(directory: str) -> bool:
    """Return True when ``directory`` can be listed for executables."""
    return os.path.isdir(directory) and os.access(directory, os.R_OK | os.X_OK)


def find_toolchain(
    name: str = DEFAULT_TOOLCHAIN,
    *,
    environ: Mapping[str, str] | None = None,
    platform: str | None = None,
    searchable: Callable[[str], bool] = is_searchable,
) -> str:
    """Return the first ``name`` found on PATH, or the bare filename.

    Directories rejected by ``searchable`` are skipped. Names containing a path
    separator are returned untouched.
    """
    platform = platform or sys.platform
    filename = executable_filename(name, platform=platform)
    if os.path.dirname(filename):
        return filename

    env = os.environ if environ is None else environ
    separator = ";" if platform.startswith("win") else ":"
    for directory in env.get("PATH", "").split(separator):
        if not directory:
            continue
        if not searchable(directory):
            _LOGGER.debug("Skipping unreadable PATH entry %s", directory)
            continue
        candidate = os.path.join(directory, filename)
        if os.path.isfile(candidate):
            _LOGGER.debug("Found %s at %s", filename, candidate)
            return candidate

    _LOGGER.debug("%s not found on PATH; deferring lookup to the OS", filename)
    return filename


def exit_status(returncode: int) -> int:
    """Map Popen's negative signal codes to the shell convention 128 + signal."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class ToolchainInvoker:
    """Runs the toolchain inside a workspace and relays its output."""

    def __init__(self, runner: ToolchainRunner | None = None) -> None:
        self._runner = runner or self._default_runner

    def run(
        self,
        workspace: Path | str,
        executable: str,
        arguments: Sequence[str] = DEFAULT_ARGUMENTS,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> int:
        """Run ``executable arguments`` in ``workspace`` and return its exit code."""
        args = [executable, *arguments]
        _LOGGER.debug("Running %s in %s", " ".join(args), workspace)
        result = self._runner(args, Path(workspace))

        out = stdout or sys.stdout
        err = stderr or sys.stderr
        out.write(result.stdout + "\n")
        out.flush()
        err.write(result.stderr + "\n")
        err.flush()
        return result.returncode

    @staticmethod
    def _default_runner(args: Sequence[str], cwd: Path) -> ToolchainResult:
        try:
            process = subprocess.Popen(
                list(args),
                cwd=str(cwd),
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                errors="replace",
            )
        except OSError as exc:
            raise SpawnError(f"Unable to start '{args[0]}': {exc}") from exc

        with process:
            captured_out, captured_err = process.communicate()
        return ToolchainResult(
            returncode=exit_status(process.returncode),
            stdout=captured_out,
            stderr=captured_err,
        )


__all__ = [
    "DEFAULT_ARGUMENTS",
    "DEFAULT_TOOLCHAIN",
    "ToolchainInvoker",
    "ToolchainResult",
    "executable_filename",
    "exit_status",
    "find_toolchain",
    "is_searchable",
]
