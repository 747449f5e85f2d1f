"""Source enumeration and scratch workspace materialization."""

from __future__ import annotations

import codecs
import os
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Collection, Iterator, List, Sequence, Set

from .directives import DIRECTIVE_MARKER, scan_directives
from .errors import EnumerationError, WorkspaceIOError
from .logging import get_logger
from .models import ProjectInfo

DEFAULT_SOURCE_EXTENSIONS = frozenset({".cs"})
SCRATCH_DIRNAME = "runf"

_LOGGER = get_logger("workspace")


@dataclass
class ExcludeRule:
    """Represents a path exclusion parsed from .runf.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            return fnmatchcase(rel_path, self.pattern)

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_exclude_rule(pattern: str) -> ExcludeRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return ExcludeRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


def _is_excluded(rel_path: str, is_dir: bool, rules: Sequence[ExcludeRule]) -> bool:
    return any(rule.matches(rel_path, is_dir) for rule in rules)


def _raise_enumeration_error(exc: OSError) -> None:
    raise EnumerationError(f"Cannot read source directory: {exc}") from exc


def _iter_files(root: Path, rules: Sequence[ExcludeRule]) -> Iterator[Path]:
    visited: Set[str] = set()
    for dirpath, dirnames, filenames in os.walk(
        root, onerror=_raise_enumeration_error, followlinks=True
    ):
        # Symlinked directories are followed; a directory reached twice is not re-walked.
        real_dir = os.path.realpath(dirpath)
        if real_dir in visited:
            dirnames[:] = []
            continue
        visited.add(real_dir)

        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, False, rules):
                continue
            yield current_dir / filename


def enumerate_source_files(
    root: Path | str,
    *,
    mode: str = "all",
    extensions: Collection[str] = DEFAULT_SOURCE_EXTENSIONS,
    exclude_paths: Sequence[str] = (),
) -> List[Path]:
    """Return every file under ``root`` in a stable order.

    With ``mode="source-only"`` only files carrying one of ``extensions`` are
    returned; ``mode="all"`` returns everything.
    """
    root_path = Path(root)
    if not root_path.exists():
        raise EnumerationError(f"Source directory not found: {root}")
    if not root_path.is_dir():
        raise EnumerationError(f"Source path is not a directory: {root}")

    rules = [rule for rule in map(build_exclude_rule, exclude_paths) if rule is not None]
    files = list(_iter_files(root_path, rules))
    if mode == "source-only":
        files = [path for path in files if path.suffix in extensions]
    _LOGGER.debug("Enumerated %d file(s) under %s", len(files), root_path)
    return files


def create_scratch_directory(base: Path | None = None) -> Path:
    """Create a fresh, uniquely named scratch directory and return it."""
    parent = Path(base) if base is not None else Path(tempfile.gettempdir()) / SCRATCH_DIRNAME
    destination = parent / str(uuid.uuid4())
    try:
        destination.mkdir(parents=True)
    except OSError as exc:
        raise WorkspaceIOError(f"Cannot create scratch directory {destination}: {exc}") from exc
    return destination


def relative_source_path(source_file: Path | str, source_root: Path | str) -> Path:
    """Return ``source_file`` relative to ``source_root``, trailing separators tolerated."""
    try:
        return Path(source_file).relative_to(Path(source_root))
    except ValueError:
        return Path(os.path.relpath(source_file, source_root))


def materialize(
    project: ProjectInfo,
    source_root: Path | str,
    destination: Path | str,
    *,
    extensions: Collection[str] = DEFAULT_SOURCE_EXTENSIONS,
) -> None:
    """Copy ``project.source_files`` into ``destination``, stripping directives.

    References found in eligible files are accumulated on ``project.references``.
    """
    destination_root = Path(destination)
    for source_file in project.source_files:
        target = destination_root / relative_source_path(source_file, source_root)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            if Path(source_file).suffix in extensions:
                _copy_scanned(project, Path(source_file), target)
            else:
                shutil.copyfile(source_file, target)
        except OSError as exc:
            raise WorkspaceIOError(f"Cannot copy {source_file} to {target}: {exc}") from exc
    _LOGGER.debug(
        "Materialized %d file(s) into %s with %d reference(s)",
        len(project.source_files),
        destination_root,
        len(project.references),
    )


def _copy_scanned(project: ProjectInfo, source_file: Path, target: Path) -> None:
    raw = source_file.read_bytes()
    if DIRECTIVE_MARKER.encode("ascii") not in raw:
        target.write_bytes(raw)
        return

    # surrogateescape lets non-UTF-8 sources round-trip through the rewrite.
    text = raw.decode("utf-8", errors="surrogateescape")
    if text.startswith(codecs.BOM_UTF8.decode("utf-8")):
        text = text[1:]

    result = scan_directives(text)
    if not result.changed:
        target.write_bytes(raw)
        return

    for reference in result.references:
        _LOGGER.debug("%s references %s %s", source_file.name, reference.name, reference.version or "")
    project.references.extend(result.references)
    with target.open("w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
        handle.write(result.text)


__all__ = [
    "DEFAULT_SOURCE_EXTENSIONS",
    "ExcludeRule",
    "build_exclude_rule",
    "create_scratch_directory",
    "enumerate_source_files",
    "materialize",
    "relative_source_path",
]
