"""Core data models shared across runf components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional


@dataclass(frozen=True)
class Reference:
    """External package reference declared by a `#r` directive."""

    name: str
    version: Optional[str] = None


class ReferenceMap:
    """Accumulates references by name; later declarations replace the version."""

    def __init__(self, references: Iterable[Reference] = ()) -> None:
        self._versions: Dict[str, Optional[str]] = {}
        self.extend(references)

    def add(self, reference: Reference) -> None:
        self._versions[reference.name] = reference.version

    def extend(self, references: Iterable[Reference]) -> None:
        for reference in references:
            self.add(reference)

    def get(self, name: str) -> Optional[str]:
        return self._versions.get(name)

    def sorted(self) -> List[Reference]:
        """Return the references ordered by name."""
        return [Reference(name, self._versions[name]) for name in sorted(self._versions)]

    def __contains__(self, name: object) -> bool:
        return name in self._versions

    def __iter__(self) -> Iterator[Reference]:
        return iter(self.sorted())

    def __len__(self) -> int:
        return len(self._versions)


@dataclass
class ScanResult:
    """Rewritten source text plus the references extracted from it."""

    text: str
    references: List[Reference] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.references)


@dataclass
class ProjectInfo:
    """Per-run aggregate consumed by the descriptor generator."""

    target_framework: str
    source_files: List[Path] = field(default_factory=list)
    references: ReferenceMap = field(default_factory=ReferenceMap)


@dataclass
class Workspace:
    """A materialized scratch directory ready for the toolchain."""

    source_root: Path
    path: Path
    descriptor_path: Path
    project: ProjectInfo
