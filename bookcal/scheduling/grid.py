# bookcal/scheduling/grid.py
"""
Calendar grid geometry for the day/week/month/agenda views.

Every function here is pure: the reference date, view and week-start day come
in as arguments. Week-start days and month-grid weekdays follow the
0=Sunday .. 6=Saturday numbering; months passed to ``month_grid_days`` and
``days_in_month`` are zero-based (0=January).
"""
from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Optional, Union

from bookcal.core.errors import InvalidViewError
from bookcal.scheduling.models import (
    WEEK_START_DAYS,
    CalendarView,
    DraggedAppointment,
    NavigateAction,
    RetimeResult,
    SlotPlacement,
)

DateLike = Union[date, datetime]

MONTH_GRID_SHORT = 35
MONTH_GRID_LONG = 42


def coerce_view(view: Any) -> CalendarView:
    """Turn a view name into ``CalendarView``; anything else is a programmer error."""
    if isinstance(view, CalendarView):
        return view
    try:
        return CalendarView(view)
    except ValueError:
        raise InvalidViewError(view) from None


def _check_week_start(week_start_day: int) -> None:
    if week_start_day not in WEEK_START_DAYS:
        raise ValueError(f"week_start_day must be 0 (Sunday) or 1 (Monday), got {week_start_day!r}")


def as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def day_of_week(value: DateLike) -> int:
    """0=Sunday .. 6=Saturday."""
    return (value.weekday() + 1) % 7


def add_days(value: DateLike, days: int) -> DateLike:
    return value + timedelta(days=days)


def add_minutes(value: datetime, minutes: float) -> datetime:
    return value + timedelta(minutes=minutes)


def add_months(value: DateLike, months: int) -> DateLike:
    """Shift by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def is_same_day(a: DateLike, b: DateLike) -> bool:
    return as_date(a) == as_date(b)


def days_in_month(year: int, month: int) -> list[date]:
    if not 0 <= month <= 11:
        raise ValueError(f"month must be 0-11, got {month!r}")
    count = calendar.monthrange(year, month + 1)[1]
    return [date(year, month + 1, d) for d in range(1, count + 1)]


def month_grid_days(year: int, month: int, week_start_day: int = 1) -> list[Optional[date]]:
    """
    Cells of a month view: whole weeks, 35 cells when the padded month fits in
    five weeks and 42 otherwise.

    Cells before the 1st and after the last day hold real dates from the
    neighbouring months; callers tell them apart by comparing the month.
    A padding cell that falls outside ``date.min``..``date.max`` is ``None``.
    """
    _check_week_start(week_start_day)
    days = days_in_month(year, month)
    first = days[0]

    lead_in = (day_of_week(first) - week_start_day + 7) % 7
    total = MONTH_GRID_SHORT if lead_in + len(days) <= MONTH_GRID_SHORT else MONTH_GRID_LONG

    cells: list[Optional[date]] = []
    for i in range(total):
        try:
            cells.append(first + timedelta(days=i - lead_in))
        except OverflowError:
            cells.append(None)
    return cells


def start_of_week(reference: DateLike, week_start_day: int = 1) -> date:
    _check_week_start(week_start_day)
    offset = (day_of_week(reference) - week_start_day + 7) % 7
    return as_date(reference) - timedelta(days=offset)


def week_dates(reference: DateLike, week_start_day: int = 1) -> list[date]:
    first = start_of_week(reference, week_start_day)
    return [first + timedelta(days=i) for i in range(7)]


def time_slots(start_hour: int = 0, end_hour: int = 24, interval_minutes: int = 60) -> list[str]:
    """``"HH:MM"`` row labels for every interval inside ``[start_hour, end_hour)``."""
    if interval_minutes <= 0:
        raise ValueError(f"interval_minutes must be positive, got {interval_minutes!r}")
    slots = []
    for hour in range(start_hour, end_hour):
        for minute in range(0, 60, interval_minutes):
            slots.append(f"{hour:02d}:{minute:02d}")
    return slots


def minutes_since_midnight(value: datetime) -> float:
    return value.hour * 60 + value.minute + value.second / 60


def appointment_placement(start: datetime, end: datetime,
                          hour_height: float = 60, min_height: float = 15) -> SlotPlacement:
    """
    Pixel box of an appointment inside a day column.

    ``min_height`` keeps very short bookings clickable; it does not change the
    stored duration.
    """
    duration_minutes = (end - start).total_seconds() / 60
    top = (minutes_since_midnight(start) / 60) * hour_height
    height = max(min_height, (duration_minutes / 60) * hour_height)
    return SlotPlacement(top=top, height=height)


def retime_on_drop(dragged: DraggedAppointment, new_start: datetime,
                   target_staff_id: Optional[str] = None) -> RetimeResult:
    """Move to ``new_start`` keeping the original duration exactly."""
    duration = dragged.original_end - dragged.original_start
    return RetimeResult(
        appointment_id=dragged.appointment_id,
        start=new_start,
        end=new_start + duration,
        staff_id=target_staff_id,
    )


def slot_start(day: date, hour: int, minute: int = 0) -> datetime:
    """Datetime a day/week grid row stands for; used as a drop target."""
    return datetime.combine(day, time(hour, minute))


def navigate(current: DateLike, view: Any, action: Any,
             today: Optional[DateLike] = None) -> DateLike:
    view = coerce_view(view)
    action = NavigateAction(action)

    if action is NavigateAction.TODAY:
        return today if today is not None else date.today()

    step = 1 if action is NavigateAction.NEXT else -1
    if view is CalendarView.DAY:
        return add_days(current, step)
    if view is CalendarView.WEEK:
        return add_days(current, step * 7)
    # month and agenda both page by month
    return add_months(current, step)


def visible_range(reference: DateLike, view: Any, week_start_day: int = 1) -> tuple[datetime, datetime]:
    """Half-open ``[start, end)`` datetime range a view displays."""
    view = coerce_view(view)
    ref = as_date(reference)

    if view is CalendarView.DAY:
        first, last = ref, ref
    elif view is CalendarView.WEEK:
        days = week_dates(ref, week_start_day)
        first, last = days[0], days[-1]
    elif view is CalendarView.MONTH:
        cells = [d for d in month_grid_days(ref.year, ref.month - 1, week_start_day) if d is not None]
        first, last = cells[0], cells[-1]
    else:
        days = days_in_month(ref.year, ref.month - 1)
        first, last = days[0], days[-1]

    start = datetime.combine(first, time.min)
    if last == date.max:
        return start, datetime.max
    return start, datetime.combine(last + timedelta(days=1), time.min)


def appointments_on_day(appointments: Iterable[Any], day: DateLike) -> list:
    return sorted(
        (a for a in appointments if is_same_day(a.start, day)),
        key=lambda a: a.start,
    )


def appointments_in_range(appointments: Iterable[Any], start: datetime, end: datetime) -> list:
    """Appointments starting inside ``[start, end)``, ordered by start."""
    return sorted(
        (a for a in appointments if start <= a.start < end),
        key=lambda a: a.start,
    )


def group_for_agenda(appointments: Iterable[Any]) -> dict[date, list]:
    groups: dict[date, list] = {}
    for appt in sorted(appointments, key=lambda a: a.start):
        groups.setdefault(as_date(appt.start), []).append(appt)
    return groups


def round_up_to_quarter_hour(value: datetime) -> datetime:
    """Default start for a new booking: minutes rounded up to a multiple of 15, seconds dropped."""
    base = value.replace(minute=0, second=0, microsecond=0)
    quarters = -(-value.minute // 15)
    return base + timedelta(minutes=quarters * 15)
