"""
Block Segmenter

Splits document lines into the regions that each describe one transaction.
"""
import re
from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

Pattern = Union[str, re.Pattern]


@dataclass(frozen=True)
class Block:
    """A contiguous, read-only span of document lines [start_line, end_line)."""
    lines: Tuple[str, ...]
    start_line: int
    end_line: int

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def _compile(pattern: Optional[Pattern]) -> Optional[re.Pattern]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


class BlockSequence:
    """
    Lazy, restartable sequence of blocks.

    A block starts at a line matching `start` and runs up to, but not
    including, the next start line or the first line matching `end`,
    whichever comes first. Without an end match it runs to the next start
    or the end of the document. `max_lines` caps the size of a block.
    """

    def __init__(self, lines: Sequence[str], start: Pattern, end: Optional[Pattern] = None,
                 max_lines: Optional[int] = None):
        if max_lines is not None and max_lines < 1:
            raise ValueError("max_lines must be at least 1")
        self._lines = tuple(lines)
        self._start = _compile(start)
        self._end = _compile(end)
        self._max_lines = max_lines

    def __iter__(self) -> Iterator[Block]:
        lines = self._lines
        i = 0
        while i < len(lines):
            if not self._start.search(lines[i]):
                i += 1
                continue

            j = i + 1
            while j < len(lines):
                if self._max_lines is not None and j - i >= self._max_lines:
                    break
                if self._start.search(lines[j]):
                    break
                if self._end is not None and self._end.search(lines[j]):
                    break
                j += 1

            yield Block(lines=lines[i:j], start_line=i, end_line=j)
            i = j
