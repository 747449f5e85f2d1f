"""Helper utilities for constructing throwaway source directories in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from runf.models import ProjectInfo
from runf.workspace import enumerate_source_files


class SourceTreeBuilder:
    """Utility for writing files into a temporary source directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "src"
        self.root.mkdir()

    def write(self, files: Mapping[str, str], *, dedent: bool = True) -> None:
        """Write `path -> contents` entries into the source directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if dedent:
                content = textwrap.dedent(content).lstrip("\n")
            path.write_bytes(content.encode("utf-8"))

    def project(self, target_framework: str = "net8.0", **kwargs) -> ProjectInfo:
        """Return a project listing every file currently in the tree."""
        return ProjectInfo(
            target_framework=target_framework,
            source_files=enumerate_source_files(self.root, **kwargs),
        )

    def path(self) -> Path:
        """Return the source directory path."""
        return self.root


__all__ = ["SourceTreeBuilder"]
