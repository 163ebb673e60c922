"""Rotating polaroid slots trailing the active lyric unit."""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .config import FILL_DECAY, OUTLINE_DECAY, POLAROID_COUNT
from .timeline import TimelineUnit


@dataclass
class Slot:
    assigned_index: Optional[int] = None
    text: str = ""
    fill_opacity: float = 1.0
    outline_opacity: float = 0.0


@dataclass(frozen=True)
class SlotView:
    slot: int
    text: str
    fill_opacity: float
    outline_opacity: float
    assigned_index: Optional[int]
    active: bool


def decay_opacity(base: float, age: float) -> float:
    """``base ** age`` clamped to ``[0, 1]``; negative ages count as fresh."""
    if not math.isfinite(age):
        return 0.0 if age > 0 else 1.0
    if age <= 0:
        return 1.0
    return max(0.0, min(1.0, base ** age))


class SlotAllocator:
    """Assign ``count`` fixed slots to the most recent units.

    The active unit sits in slot ``active_index % count``; every other slot
    shows the unit that many steps behind it.  Slots with no valid unit keep
    whatever they showed last, so after a backward seek they may still hold
    units ahead of the new active index until the caller calls
    :meth:`clear`.
    """

    def __init__(
        self,
        count: int = POLAROID_COUNT,
        fill_decay: float = FILL_DECAY,
        outline_decay: float = OUTLINE_DECAY,
    ):
        if count < 1:
            raise ValueError("slot count must be >= 1")
        self.count = count
        self.fill_decay = fill_decay
        self.outline_decay = outline_decay
        self.slots = [Slot() for _ in range(count)]
        self.active_slot: Optional[int] = None

    def clear(self) -> None:
        for slot in self.slots:
            slot.assigned_index = None
            slot.text = ""
            slot.fill_opacity = 1.0
            slot.outline_opacity = 0.0
        self.active_slot = None

    def update(
        self,
        active_index: int,
        position: float,
        units: Sequence[TimelineUnit],
    ) -> List[SlotView]:
        n = self.count
        if active_index < 0 or active_index >= len(units):
            for slot in self.slots:
                slot.text = ""
            self.active_slot = None
            return self.views()

        head = active_index % n
        self.active_slot = head
        for s, slot in enumerate(self.slots):
            if s == head:
                unit = units[active_index]
                slot.assigned_index = active_index
                slot.text = unit.text
                slot.fill_opacity = 1.0
                slot.outline_opacity = decay_opacity(self.outline_decay, position - unit.start_time)
                continue
            offset = (head - s) % n
            index = active_index - offset
            if index < 0:
                continue
            unit = units[index]
            slot.assigned_index = index
            slot.text = unit.text
            slot.fill_opacity = decay_opacity(self.fill_decay, position - unit.end_time)
            slot.outline_opacity = 0.0
        return self.views()

    def views(self) -> List[SlotView]:
        return [
            SlotView(
                slot=s,
                text=slot.text,
                fill_opacity=slot.fill_opacity,
                outline_opacity=slot.outline_opacity,
                assigned_index=slot.assigned_index,
                active=s == self.active_slot,
            )
            for s, slot in enumerate(self.slots)
        ]

    @property
    def assigned(self) -> List[Optional[int]]:
        return [slot.assigned_index for slot in self.slots]
