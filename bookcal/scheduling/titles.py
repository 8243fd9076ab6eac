# bookcal/scheduling/titles.py
"""
Human-readable header titles for each calendar view.

Month and weekday names come from Babel's CLDR data for the requested locale;
an unknown locale falls back to English rather than failing the render.
"""
from __future__ import annotations

from typing import Any, Optional

from babel import Locale, UnknownLocaleError
from babel.dates import format_date, get_day_names, get_month_names

from bookcal.scheduling.grid import DateLike, as_date, coerce_view, week_dates
from bookcal.scheduling.models import CalendarSettings, CalendarView

DEFAULT_LOCALE = "en"
RANGE_SEPARATOR = " – "  # en dash


def resolve_locale(locale: Optional[str]) -> Locale:
    try:
        return Locale.parse((locale or DEFAULT_LOCALE).replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        return Locale.parse(DEFAULT_LOCALE)


def month_name(value: DateLike, locale: Optional[str] = None, width: str = "wide") -> str:
    return get_month_names(width, context="format", locale=resolve_locale(locale))[value.month]


def day_title(value: DateLike, locale: Optional[str] = None) -> str:
    # e.g. "Thursday, February 1, 2024"
    return format_date(as_date(value), format="full", locale=resolve_locale(locale))


def month_title(value: DateLike, locale: Optional[str] = None) -> str:
    # e.g. "February 2024"
    return format_date(as_date(value), "LLLL y", locale=resolve_locale(locale))


def week_range_title(start: DateLike, end: DateLike, locale: Optional[str] = None) -> str:
    """
    Compact week range.

    different years   -> "Dec 30, 2024 – Jan 5, 2025"
    different months  -> "Jan 27 – Feb 2, 2025"
    same month        -> "3 – 9 February, 2025"
    """
    start_month = month_name(start, locale, "abbreviated")
    end_month = month_name(end, locale, "abbreviated")

    if start.year != end.year:
        return (
            f"{start_month} {start.day}, {start.year}"
            f"{RANGE_SEPARATOR}{end_month} {end.day}, {end.year}"
        )
    if start.month != end.month:
        return f"{start_month} {start.day}{RANGE_SEPARATOR}{end_month} {end.day}, {end.year}"
    return f"{start.day}{RANGE_SEPARATOR}{end.day} {month_name(end, locale)}, {end.year}"


def agenda_title(value: DateLike, locale: Optional[str] = None, label: str = "Agenda") -> str:
    return f"{label} - {month_title(value, locale)}"


def title_for_view(reference: DateLike, view: Any,
                   settings: Optional[CalendarSettings] = None) -> str:
    settings = settings or CalendarSettings()
    view = coerce_view(view)

    if view is CalendarView.DAY:
        return day_title(reference, settings.locale)
    if view is CalendarView.WEEK:
        days = week_dates(reference, settings.week_start_day)
        return week_range_title(days[0], days[-1], settings.locale)
    if view is CalendarView.MONTH:
        return month_title(reference, settings.locale)
    return agenda_title(reference, settings.locale, settings.agenda_label)


def weekday_names(locale: Optional[str] = None, width: str = "abbreviated",
                  week_start_day: int = 1) -> list[str]:
    """Column headers for a week row, starting at ``week_start_day`` (0=Sunday)."""
    # Babel keys weekdays 0=Monday .. 6=Sunday
    names = get_day_names(width, context="format", locale=resolve_locale(locale))
    return [names[((i + week_start_day) % 7 + 6) % 7] for i in range(7)]
