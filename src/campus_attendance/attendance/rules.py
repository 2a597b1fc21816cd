from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import DEFAULT_PRESENT_SLOT_THRESHOLD
from ..core.enums import SLOT_ORDER, MarkStatus, Slot
from .model import EMPTY_SLOTS, AttendanceMark, MarkKey, SlotFlags


@dataclass(frozen=True)
class MarkUpdateRule:
    """Overwrite one slot flag and recompute the period status.

    A period is present once at least ``threshold`` of its four slots are
    individually present. Applying the same slot/value twice gives the same mark.
    """

    threshold: int = DEFAULT_PRESENT_SLOT_THRESHOLD

    def __post_init__(self):
        if not 1 <= self.threshold <= len(SLOT_ORDER):
            raise ValueError(f"threshold must be between 1 and {len(SLOT_ORDER)}")

    def status_for(self, slots: SlotFlags) -> MarkStatus:
        present = sum(1 for flag in slots if flag is True)
        return MarkStatus.PRESENT if present >= self.threshold else MarkStatus.ABSENT

    def new_mark(self, key: MarkKey) -> AttendanceMark:
        return AttendanceMark(
            student_id=key.student_id,
            work_date=key.work_date,
            period_number=key.period_number,
            slots=EMPTY_SLOTS,
            status=self.status_for(EMPTY_SLOTS),
        )

    def apply(self, mark: Optional[AttendanceMark], key: MarkKey, slot: Slot, present: bool) -> AttendanceMark:
        current = mark or self.new_mark(key)
        if current.key != key:
            raise ValueError(f"Mark {current.key} does not belong to {key}")

        flags = list(current.slots)
        flags[SLOT_ORDER.index(slot)] = bool(present)
        slots: SlotFlags = tuple(flags)  # type: ignore[assignment]

        return AttendanceMark(
            student_id=current.student_id,
            work_date=current.work_date,
            period_number=current.period_number,
            slots=slots,
            status=self.status_for(slots),
            mark_id=current.mark_id,
        )
