# bookcal/scheduling/conflicts.py
"""
Staff-scoped overlap detection.

Intervals are half-open ``[start, end)``: back-to-back bookings
(``a.end == b.start``) do not conflict, and an empty interval
(``start >= end``) overlaps nothing.

``has_conflict`` is the reference check: a linear scan over whatever snapshot
the caller supplies. ``StaffIntervalIndex`` answers the same question in
O(log n + k) for large snapshots.
"""
from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Iterable, Optional


def intervals_overlap(start_a: datetime, end_a: datetime,
                      start_b: datetime, end_b: datetime) -> bool:
    if start_a >= end_a or start_b >= end_b:
        return False
    return start_a < end_b and end_a > start_b


def _is_checkable(candidate: Any) -> bool:
    return bool(
        getattr(candidate, "start", None)
        and getattr(candidate, "end", None)
        and getattr(candidate, "staff_id", None)
    )


def _same_staff_others(candidate: Any, existing_appointments: Iterable[Any]):
    for existing in existing_appointments:
        if existing.staff_id == candidate.staff_id and existing.id != getattr(candidate, "id", None):
            yield existing


def has_conflict(candidate: Any, existing_appointments: Iterable[Any]) -> bool:
    """
    True if ``candidate`` overlaps another booking of the same staff member.

    A candidate missing start, end or staff_id cannot be judged and returns
    False. The candidate's own stored copy (same id) is ignored, so an edit
    never conflicts with its previous version.
    """
    if not _is_checkable(candidate):
        return False

    for existing in _same_staff_others(candidate, existing_appointments):
        if intervals_overlap(candidate.start, candidate.end, existing.start, existing.end):
            return True
    return False


def find_conflicts(candidate: Any, existing_appointments: Iterable[Any]) -> list:
    """Every same-staff booking that overlaps ``candidate``, ordered by start."""
    if not _is_checkable(candidate):
        return []

    hits = [
        existing
        for existing in _same_staff_others(candidate, existing_appointments)
        if intervals_overlap(candidate.start, candidate.end, existing.start, existing.end)
    ]
    return sorted(hits, key=lambda a: (a.start, a.end, a.id))


class StaffIntervalIndex:
    """
    Appointments bucketed by staff_id into start-sorted lists.

    A query bisects for the entries starting before the query end, and uses the
    longest stored duration of that staff member to skip entries that must
    have ended before the query start.
    """

    def __init__(self, appointments: Optional[Iterable[Any]] = None):
        self._starts: dict[str, list[datetime]] = defaultdict(list)
        self._entries: dict[str, list[tuple]] = defaultdict(list)
        self._max_duration: dict[str, timedelta] = defaultdict(timedelta)
        self._size = 0
        for appt in appointments or ():
            self.add(appt)

    def __len__(self) -> int:
        return self._size

    def add(self, appointment: Any) -> None:
        if appointment.start >= appointment.end:
            # empty intervals can never overlap; keep them out of the index
            return
        staff_id = appointment.staff_id
        entry = (appointment.start, appointment.end, appointment.id, appointment)
        pos = bisect_right(self._starts[staff_id], appointment.start)
        self._entries[staff_id].insert(pos, entry)
        self._starts[staff_id].insert(pos, appointment.start)
        duration = appointment.end - appointment.start
        if duration > self._max_duration[staff_id]:
            self._max_duration[staff_id] = duration
        self._size += 1

    def remove(self, appointment_id: str) -> bool:
        for staff_id, entries in self._entries.items():
            for pos, entry in enumerate(entries):
                if entry[2] == appointment_id:
                    del entries[pos]
                    del self._starts[staff_id][pos]
                    self._size -= 1
                    return True
        return False

    def _window(self, candidate: Any):
        staff_id = candidate.staff_id
        starts = self._starts.get(staff_id)
        if not starts:
            return
        entries = self._entries[staff_id]
        hi = bisect_left(starts, candidate.end)
        lo = bisect_right(starts, candidate.start - self._max_duration[staff_id])
        candidate_id = getattr(candidate, "id", None)
        for start, end, appt_id, appt in entries[lo:hi]:
            if appt_id != candidate_id and intervals_overlap(candidate.start, candidate.end, start, end):
                yield appt

    def has_conflict(self, candidate: Any) -> bool:
        if not _is_checkable(candidate):
            return False
        return next(self._window(candidate), None) is not None

    def find_conflicts(self, candidate: Any) -> list:
        if not _is_checkable(candidate):
            return []
        return list(self._window(candidate))
