"""Handwritten notebook page accumulating the lyric characters sung so far."""
from __future__ import annotations

import dataclasses
from typing import Optional, Sequence

from .config import MAX_CHARS_PER_LINE, MAX_LINES
from .timeline import TimelineIndex, TimelineUnit


class Notebook:
    """Paged text of every character up to the active one.

    The sorted character list is built on the first ``update`` rather than at
    load time; a song that never shows the notebook never pays for it.
    """

    def __init__(
        self,
        chars: Sequence[TimelineUnit],
        chars_per_line: int = MAX_CHARS_PER_LINE,
        max_lines: int = MAX_LINES,
    ):
        if chars_per_line < 1 or max_lines < 1:
            raise ValueError("notebook page needs at least one line and one column")
        self._chars = tuple(chars)
        self.chars_per_line = chars_per_line
        self.max_lines = max_lines
        self._index: Optional[TimelineIndex] = None
        self.text = ""

    @property
    def page_size(self) -> int:
        return self.chars_per_line * self.max_lines

    @property
    def built(self) -> bool:
        return self._index is not None

    def _build(self) -> TimelineIndex:
        ordered = sorted(self._chars, key=lambda u: u.start_time)
        return TimelineIndex([dataclasses.replace(u, index=i) for i, u in enumerate(ordered)])

    def update(self, position: float) -> str:
        if self._index is None:
            self._index = self._build()
        last = self._index.find_active_index(position)
        units = self._index.units
        start = max(0, (last // self.page_size) * self.page_size) if last >= 0 else 0

        pieces = []
        for cnt, i in enumerate(range(start, last + 1)):
            pieces.append(units[i].text)
            if cnt % self.chars_per_line == self.chars_per_line - 1:
                pieces.append("\n")
        self.text = "".join(pieces)
        return self.text
