"""Extraction of `#r` reference directives from C# sources."""

from __future__ import annotations

import re
from typing import List

from .logging import get_logger
from .models import Reference, ScanResult

DIRECTIVE_MARKER = "#r"

# Only CR, LF and CRLF end a line.
_LINE_BREAK = re.compile(r"(?<=\n)|(?<=\r)(?!\n)")

_LOGGER = get_logger("directives")


def is_directive(line: str) -> bool:
    """Return True when ``line`` is a `#r` directive (and not e.g. ``#region``)."""
    if not line.startswith(DIRECTIVE_MARKER):
        return False
    rest = line[len(DIRECTIVE_MARKER):]
    return not rest or rest[0].isspace()


def parse_directive(line: str) -> Reference:
    """Parse ``#r <name> [<version>]`` into a reference."""
    tokens = line[len(DIRECTIVE_MARKER):].split()
    name = tokens[0] if tokens else ""
    version = tokens[1] if len(tokens) > 1 else None
    if not name:
        _LOGGER.warning("Directive without a package name: %r", line.rstrip("\r\n"))
    return Reference(name=name, version=version)


def split_lines(text: str) -> List[str]:
    """Split ``text`` after each CR, LF or CRLF, keeping the terminators."""
    return [line for line in _LINE_BREAK.split(text) if line]


def scan_directives(text: str) -> ScanResult:
    """Strip directive lines from ``text`` and return them as references.

    Lines keep their own terminators, so the output uses the input's line-ending
    convention. When nothing is stripped the input object is returned as is.
    """
    if DIRECTIVE_MARKER not in text:
        return ScanResult(text=text)

    kept: List[str] = []
    references: List[Reference] = []
    for line in split_lines(text):
        if is_directive(line):
            references.append(parse_directive(line))
        else:
            kept.append(line)

    if not references:
        return ScanResult(text=text)
    return ScanResult(text="".join(kept), references=references)


__all__ = ["DIRECTIVE_MARKER", "is_directive", "parse_directive", "scan_directives", "split_lines"]
