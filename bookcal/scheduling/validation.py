# bookcal/scheduling/validation.py
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

from bookcal.scheduling.conflicts import has_conflict
from bookcal.scheduling.grid import round_up_to_quarter_hour
from bookcal.scheduling.models import (
    AppointmentDraft,
    AppointmentStatus,
    Customer,
    Service,
    Staff,
    ValidationResult,
    temporary_id,
)

DEFAULT_DURATION_MINUTES = 30

MSG_TITLE_OR_SERVICE = "Title or Service is required"
MSG_START_REQUIRED = "Start time is required"
MSG_END_REQUIRED = "End time is required"
MSG_END_BEFORE_START = "End time cannot be before start time"
MSG_END_EQUALS_START = "End time must be after start time"
MSG_STAFF_REQUIRED = "Staff is required"
MSG_SERVICE_REQUIRED = "Service is required"
MSG_CONFLICT = "This time slot conflicts with another appointment for this staff member."


def default_end(start: datetime, service: Optional[Service] = None) -> datetime:
    minutes = service.duration if service else DEFAULT_DURATION_MINUTES
    return start + timedelta(minutes=minutes)


def new_draft(
    *,
    now: Optional[datetime] = None,
    staff: Sequence[Staff] = (),
    services: Sequence[Service] = (),
    customers: Sequence[Customer] = (),
    staff_id: Optional[str] = None,
    tenant_id: Optional[str] = None,
) -> AppointmentDraft:
    """
    Form defaults for a new booking.

    Start is ``now`` rounded up to the quarter hour, end follows the first
    service's duration, and staff/service/customer default to the first entry
    of each directory list. ``staff_id`` pre-selects the staff column a slot
    was clicked in.
    """
    start = round_up_to_quarter_hour(now or datetime.now())
    service = services[0] if services else None
    return AppointmentDraft(
        id=temporary_id(),
        title="",
        start=start,
        end=default_end(start, service),
        staff_id=staff_id or (staff[0].id if staff else None),
        service_id=service.id if service else None,
        customer_id=customers[0].id if customers else None,
        status=AppointmentStatus.PENDING,
        notes="",
        tenant_id=tenant_id,
    )


def apply_service(draft: AppointmentDraft, service: Service) -> AppointmentDraft:
    """Selecting a service re-derives the end time from its duration."""
    draft.service_id = service.id
    if draft.start:
        draft.end = default_end(draft.start, service)
    return draft


def validate_draft(draft: AppointmentDraft, existing_appointments: Iterable = ()) -> ValidationResult:
    """
    Field-level validation of a draft, including the staff conflict check.

    Problems come back as ``field -> message``; the non-field ``conflict`` key
    carries the overlap message. Nothing here raises for bad input.
    """
    errors: dict[str, str] = {}

    if not (draft.title or "").strip() and not draft.service_id:
        errors["title"] = MSG_TITLE_OR_SERVICE
    if not draft.start:
        errors["start"] = MSG_START_REQUIRED
    if not draft.end:
        errors["end"] = MSG_END_REQUIRED
    if draft.start and draft.end:
        if draft.end < draft.start:
            errors["end"] = MSG_END_BEFORE_START
        elif draft.end == draft.start:
            errors["end"] = MSG_END_EQUALS_START
    if not draft.staff_id:
        errors["staff_id"] = MSG_STAFF_REQUIRED
    if not draft.service_id:
        errors["service_id"] = MSG_SERVICE_REQUIRED

    if draft.start and draft.end and draft.staff_id:
        candidate = AppointmentDraft(
            id=draft.id or temporary_id(),
            start=draft.start,
            end=draft.end,
            staff_id=draft.staff_id,
        )
        if has_conflict(candidate, existing_appointments):
            errors["conflict"] = MSG_CONFLICT

    return ValidationResult(errors=errors)
