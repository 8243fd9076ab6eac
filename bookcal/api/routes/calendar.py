# bookcal/api/routes/calendar.py
"""Read-only grid endpoints: month cells, week days, slot labels, titles, whole views."""

from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.core.config import settings
from bookcal.crud.appointment import list_appointments
from bookcal.db.session import get_session
from bookcal.scheduling import grid, titles
from bookcal.scheduling.models import CalendarSettings, CalendarView, NavigateAction
from bookcal.schemas.appointment import (
    AgendaDay,
    AppointmentOut,
    CalendarViewOut,
    MonthCell,
    MonthGridOut,
    SlotPlacementOut,
)

router = APIRouter(prefix="/calendar", tags=["calendar"])

WeekStartQuery = Query(None, ge=0, le=1, description="0=Sunday, 1=Monday; defaults to settings")


def calendar_settings(
    locale: Optional[str] = Query(None, description="Locale for titles, e.g. en, tr, de"),
    week_start_day: Optional[int] = WeekStartQuery,
) -> CalendarSettings:
    base = settings.calendar
    return CalendarSettings(
        locale=locale or base.locale,
        week_start_day=base.week_start_day if week_start_day is None else week_start_day,
        hour_height=base.hour_height,
        min_height=base.min_height,
        day_start_hour=base.day_start_hour,
        day_end_hour=base.day_end_hour,
        slot_interval_minutes=base.slot_interval_minutes,
        agenda_label=base.agenda_label,
    )


def _placement_out(appt, cal: CalendarSettings) -> SlotPlacementOut:
    box = grid.appointment_placement(appt.start, appt.end, cal.hour_height, cal.min_height)
    return SlotPlacementOut(appointment_id=appt.id, top=box.top, height=box.height)


@router.get("/month", response_model=MonthGridOut)
async def month_grid_ep(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=0, le=11, description="Zero-based month (0=January)"),
    cal: CalendarSettings = Depends(calendar_settings),
):
    cells = grid.month_grid_days(year, month, cal.week_start_day)
    return MonthGridOut(
        year=year,
        month=month,
        week_start_day=cal.week_start_day,
        weekday_names=titles.weekday_names(cal.locale, "abbreviated", cal.week_start_day),
        cells=[
            MonthCell(
                day=d,
                in_current_month=(d is not None and d.year == year and d.month == month + 1),
            )
            for d in cells
        ],
    )


@router.get("/week", response_model=list[date])
async def week_ep(date_: date = Query(..., alias="date"),
                  cal: CalendarSettings = Depends(calendar_settings)):
    return grid.week_dates(date_, cal.week_start_day)


@router.get("/slots", response_model=list[str])
async def slots_ep(
    start_hour: Optional[int] = Query(None, ge=0, le=24),
    end_hour: Optional[int] = Query(None, ge=0, le=24),
    interval_minutes: Optional[int] = Query(None, ge=1, le=60),
):
    cal = settings.calendar
    return grid.time_slots(
        cal.day_start_hour if start_hour is None else start_hour,
        cal.day_end_hour if end_hour is None else end_hour,
        interval_minutes or cal.slot_interval_minutes,
    )


@router.get("/title")
async def title_ep(date_: date = Query(..., alias="date"),
                   view: CalendarView = Query(CalendarView.WEEK),
                   cal: CalendarSettings = Depends(calendar_settings)):
    return {"title": titles.title_for_view(date_, view, cal)}


@router.get("/navigate")
async def navigate_ep(date_: date = Query(..., alias="date"),
                      view: CalendarView = Query(CalendarView.WEEK),
                      action: NavigateAction = Query(...)):
    return {"date": grid.navigate(date_, view, action)}


@router.get("/view", response_model=CalendarViewOut)
async def view_ep(
    date_: date = Query(..., alias="date"),
    view: CalendarView = Query(CalendarView.WEEK),
    staff_id: Optional[str] = Query(None),
    service_id: Optional[str] = Query(None),
    cal: CalendarSettings = Depends(calendar_settings),
    db: AsyncSession = Depends(get_session),
):
    """Everything a client needs to draw one view: range, title, appointments and layout."""
    range_start, range_end = grid.visible_range(date_, view, cal.week_start_day)
    rows = await list_appointments(
        db, staff_id=staff_id, service_id=service_id, start=range_start, end=range_end,
    )

    placements = []
    if view in (CalendarView.DAY, CalendarView.WEEK):
        placements = [_placement_out(a, cal) for a in rows]

    agenda = []
    if view is CalendarView.AGENDA:
        agenda = [
            AgendaDay(
                day=day,
                title=titles.day_title(day, cal.locale),
                appointments=[AppointmentOut.model_validate(a) for a in appts],
            )
            for day, appts in grid.group_for_agenda(rows).items()
        ]

    return CalendarViewOut(
        view=view.value,
        title=titles.title_for_view(date_, view, cal),
        range_start=range_start,
        range_end=range_end,
        appointments=[AppointmentOut.model_validate(a) for a in rows],
        placements=placements,
        agenda=agenda,
    )
