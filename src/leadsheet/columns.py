"""Two-column split by line count.

The split point is ``ceil(n / 2)`` lines, not rendered height, section
boundaries or visual weight, so columns can come out uneven when one half is
denser than the other.  Each half is rendered and auto-fit on its own; there
is no balancing pass across columns.

A section cut in two ends up unterminated in the first half (the renderer
closes it) and headless in the second (its lines sit at the top level).
"""

import math
from typing import Sequence, TypeVar

from .models import Line
from .parser import parse_line

T = TypeVar("T")


def split_point(count: int) -> int:
    return math.ceil(count / 2)


def _halve(items: Sequence[T]) -> tuple[list[T], list[T]]:
    mid = split_point(len(items))
    return list(items[:mid]), list(items[mid:])


class ColumnSplitter:
    def split(self, lines: Sequence[Line]) -> tuple[list[Line], list[Line]]:
        return _halve(lines)


def split(lines: Sequence[Line]) -> tuple[list[Line], list[Line]]:
    """Split parsed *lines* into a first and second column."""
    return _halve(lines)


def split_for_two_columns(content: str) -> tuple[str, str]:
    """Split raw markup into two sub-documents that each render on their own.

    The cut falls where :func:`split` cuts the parsed lines.  Directives the
    parser drops (``{title:}``, ``{key:}`` and the rest of the metadata) do
    not count towards the split; they are repeated at the head of both halves
    so each one still knows its title and key.
    """
    header: list[str] = []
    body: list[str] = []
    for raw in (content or "").splitlines():
        (header if parse_line(raw) is None else body).append(raw)
    first, second = _halve(body)
    return "\n".join(header + first), "\n".join(header + second)
