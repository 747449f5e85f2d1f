from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.source_tree import SourceTreeBuilder


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a reusable source tree rooted at the pytest tmp_path."""
    return SourceTreeBuilder(tmp_path)


@pytest.fixture
def scratch_root(tmp_path: Path) -> Path:
    """Directory that scratch workspaces are created under during a test."""
    path = tmp_path / "scratch"
    path.mkdir()
    return path


@pytest.fixture(autouse=True)
def _reset_runf_logger():
    """Drop handlers installed by configure_logging so streams don't leak between tests."""
    yield
    logger = logging.getLogger("runf")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
