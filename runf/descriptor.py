"""Renders the app.csproj descriptor for a materialized workspace."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader

from .errors import WorkspaceIOError
from .logging import get_logger
from .models import ProjectInfo, Reference

DESCRIPTOR_FILENAME = "app.csproj"
TEMPLATE_NAME = "app.csproj.j2"

_LOGGER = get_logger("descriptor")


def _create_env(templates_dir: Path | None) -> Environment:
    directories: List[str] = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


def render_descriptor(
    target_framework: str,
    references: Iterable[Reference],
    *,
    templates_dir: Path | None = None,
) -> str:
    """Render the project descriptor; references are emitted in the given order."""
    template = _create_env(templates_dir).get_template(TEMPLATE_NAME)
    return template.render(
        target_framework=target_framework,
        references=list(references),
    )


def write_descriptor(
    project: ProjectInfo,
    destination: Path | str,
    *,
    templates_dir: Path | None = None,
) -> Path:
    """Write ``app.csproj`` into ``destination`` and return its path."""
    content = render_descriptor(
        project.target_framework,
        project.references.sorted(),
        templates_dir=templates_dir,
    )
    descriptor_path = Path(destination) / DESCRIPTOR_FILENAME
    try:
        descriptor_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise WorkspaceIOError(f"Cannot write {descriptor_path}: {exc}") from exc
    _LOGGER.debug("Wrote %s targeting %s", descriptor_path, project.target_framework)
    return descriptor_path


__all__ = ["DESCRIPTOR_FILENAME", "render_descriptor", "write_descriptor"]
