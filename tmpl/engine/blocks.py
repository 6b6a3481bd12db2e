"""Brace-depth block handling over a line buffer.

Only a line that is exactly ``{`` or ``}`` once trimmed opens or closes a
block. Braces anywhere else on a line are content and do not change depth.
"""
from typing import Optional, Sequence

OPEN = "{"
CLOSE = "}"


def is_filler(line: str) -> bool:
    """Blank and comment lines allowed between a header and its ``{``."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#") or stripped.startswith("//")


def find_opening_brace(lines: Sequence[str], header_index: int, stop: Optional[int] = None) -> Optional[int]:
    """Locate the ``{`` that opens the block belonging to ``lines[header_index]``.

    Returns ``header_index`` itself when the header ends with ``{``, the index
    of a following ``{`` line when only filler lines sit in between, and
    ``None`` otherwise.
    """
    stop = len(lines) if stop is None else stop
    if lines[header_index].rstrip().endswith(OPEN):
        return header_index

    index = header_index + 1
    while index < stop:
        stripped = lines[index].strip()
        if stripped == OPEN:
            return index
        if not is_filler(stripped):
            return None
        index += 1
    return None


def find_block_end(lines: Sequence[str], open_index: int, stop: Optional[int] = None) -> Optional[int]:
    """Return the index of the ``}`` matching the block opened at ``open_index``.

    Depth starts at 1 on the line after ``open_index``. Returns ``None`` when
    ``stop`` is reached first.
    """
    stop = len(lines) if stop is None else stop
    depth = 1
    for index in range(open_index + 1, stop):
        stripped = lines[index].strip()
        if stripped == OPEN:
            depth += 1
        elif stripped == CLOSE:
            depth -= 1
            if depth == 0:
                return index
    return None


def skip_block(lines: Sequence[str], open_index: int, stop: Optional[int] = None) -> int:
    """Number of lines to advance from ``open_index`` to land after its ``}``.

    An unbalanced block is skipped up to ``stop``.
    """
    stop = len(lines) if stop is None else stop
    end = find_block_end(lines, open_index, stop)
    if end is None:
        return max(stop - open_index, 0)
    return end - open_index + 1
