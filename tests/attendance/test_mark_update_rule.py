from __future__ import annotations

from datetime import date

import pytest

from campus_attendance.attendance.model import EMPTY_SLOTS, MarkKey
from campus_attendance.attendance.rules import MarkUpdateRule
from campus_attendance.core.enums import MarkStatus, Slot

KEY = MarkKey(student_id=1, work_date=date(2026, 3, 2), period_number=1)


def apply_all(rule, flags):
    mark = None
    for slot, present in flags:
        mark = rule.apply(mark, KEY, slot, present)
    return mark


def test_new_mark_starts_empty_and_absent():
    mark = MarkUpdateRule().new_mark(KEY)
    assert mark.slots == EMPTY_SLOTS
    assert mark.status == MarkStatus.ABSENT
    assert mark.key == KEY


def test_three_of_four_present_marks_period_present():
    mark = apply_all(
        MarkUpdateRule(),
        [(Slot.START, True), (Slot.AFTER_START_15, True), (Slot.BEFORE_END_10, False), (Slot.END, True)],
    )
    assert mark.present_count == 3
    assert mark.status == MarkStatus.PRESENT


def test_two_of_four_present_stays_absent():
    mark = apply_all(
        MarkUpdateRule(),
        [(Slot.START, False), (Slot.AFTER_START_15, True), (Slot.BEFORE_END_10, True), (Slot.END, False)],
    )
    assert mark.status == MarkStatus.ABSENT


def test_applying_same_ping_twice_is_idempotent():
    rule = MarkUpdateRule()
    once = rule.apply(None, KEY, Slot.START, True)
    twice = rule.apply(once, KEY, Slot.START, True)
    assert once == twice


def test_later_ping_for_same_slot_overwrites_flag():
    rule = MarkUpdateRule()
    mark = apply_all(
        rule,
        [(Slot.START, True), (Slot.AFTER_START_15, True), (Slot.BEFORE_END_10, True)],
    )
    assert mark.status == MarkStatus.PRESENT

    mark = rule.apply(mark, KEY, Slot.AFTER_START_15, False)
    assert mark.slot(Slot.AFTER_START_15) is False
    assert mark.status == MarkStatus.ABSENT


def test_mark_id_is_preserved():
    rule = MarkUpdateRule()
    mark = rule.apply(None, KEY, Slot.START, True)
    from dataclasses import replace

    stored = replace(mark, mark_id=7)
    assert rule.apply(stored, KEY, Slot.END, True).mark_id == 7


@pytest.mark.parametrize("threshold,present,expected", [(1, 1, MarkStatus.PRESENT), (4, 3, MarkStatus.ABSENT)])
def test_configurable_threshold(threshold, present, expected):
    rule = MarkUpdateRule(threshold=threshold)
    slots = [Slot.START, Slot.AFTER_START_15, Slot.BEFORE_END_10, Slot.END]
    mark = apply_all(rule, [(s, True) for s in slots[:present]])
    assert mark.status == expected


@pytest.mark.parametrize("threshold", [0, 5])
def test_threshold_out_of_range(threshold):
    with pytest.raises(ValueError):
        MarkUpdateRule(threshold=threshold)


def test_mark_for_other_key_is_rejected():
    rule = MarkUpdateRule()
    other = rule.new_mark(MarkKey(student_id=2, work_date=KEY.work_date, period_number=1))
    with pytest.raises(ValueError):
        rule.apply(other, KEY, Slot.START, True)
