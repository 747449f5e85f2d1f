"""Derives the target framework moniker from a .NET runtime description."""

from __future__ import annotations

import os
import re
import subprocess
from typing import Callable, Mapping, Optional, Sequence

from .errors import ResolutionError
from .logging import get_logger

ENV_DESCRIPTION_KEY = "RUNF_RUNTIME_DESCRIPTION"

_MAJOR_VERSION_PATTERN = re.compile(r"\.NET (\d+)")
_RUNTIME_LISTING_PATTERN = re.compile(r"^Microsoft\.NETCore\.App\s+(\d+(?:\.\d+)*)\S*", re.MULTILINE)

_LOGGER = get_logger("runtime")

QueryRunner = Callable[[Sequence[str]], str]


def resolve_target_framework(description: str) -> str:
    """Return the ``netN.0`` moniker for the major version named in ``description``."""
    match = _MAJOR_VERSION_PATTERN.search(description)
    if match is None:
        raise ResolutionError(f"Cannot determine runtime version: {description}")
    major = int(match.group(1))
    return f"net{major}.0"


def describe_runtime(
    toolchain: str,
    *,
    explicit: Optional[str] = None,
    environ: Mapping[str, str] | None = None,
    runner: QueryRunner | None = None,
) -> str:
    """Return a runtime description string such as ``".NET 8.0.3"``.

    An explicit value wins, then the ``RUNF_RUNTIME_DESCRIPTION`` environment
    variable, then the newest ``Microsoft.NETCore.App`` reported by
    ``<toolchain> --list-runtimes``.
    """
    if explicit:
        return explicit

    env = os.environ if environ is None else environ
    from_env = env.get(ENV_DESCRIPTION_KEY)
    if from_env:
        _LOGGER.debug("Using runtime description from %s", ENV_DESCRIPTION_KEY)
        return from_env

    query = runner or _default_runner
    try:
        listing = query([toolchain, "--list-runtimes"])
    except (OSError, subprocess.CalledProcessError) as exc:
        raise ResolutionError(f"Cannot determine runtime version: {exc}") from exc

    versions = _RUNTIME_LISTING_PATTERN.findall(listing)
    if not versions:
        raise ResolutionError("Cannot determine runtime version: no .NET runtime reported")

    newest = max(versions, key=_version_key)
    _LOGGER.debug("Detected .NET runtime %s", newest)
    return f".NET {newest}"


def _version_key(version: str) -> tuple[int, ...]:
    return tuple(int(part) for part in version.split("."))


def _default_runner(args: Sequence[str]) -> str:
    completed = subprocess.run(
        list(args),
        check=True,
        text=True,
        capture_output=True,
    )
    return completed.stdout


__all__ = ["ENV_DESCRIPTION_KEY", "describe_runtime", "resolve_target_framework"]
