# bookcal/services/booking.py
from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from bookcal.core.logging import get_logger
from bookcal.crud.appointment import AppointmentRepository
from bookcal.scheduling.conflicts import find_conflicts
from bookcal.scheduling.grid import retime_on_drop
from bookcal.scheduling.models import AppointmentDraft, DraggedAppointment
from bookcal.scheduling.validation import MSG_CONFLICT, validate_draft

logger = get_logger(__name__)


# ---------- Public contract returned to the route ----------

class SaveResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    saved: bool = Field(..., description="Whether the appointment was written")
    appointment: Optional[Any] = Field(None, description="Stored appointment when saved")
    errors: dict[str, str] = Field(default_factory=dict, description="field -> message")
    conflicting_ids: list[str] = Field(default_factory=list)

    @property
    def is_conflict(self) -> bool:
        return "conflict" in self.errors


# ---------- Core orchestration ----------

async def save_appointment(
    repo: AppointmentRepository,
    draft: AppointmentDraft,
    *,
    allow_conflict: bool = False,
    default_tenant_id: Optional[str] = None,
) -> SaveResult:
    """
    Validate a draft against the store's current bookings, then create or update.

    1) load the staff member's appointments (latest snapshot)
    2) field validation + staff-scoped conflict check
    3) create (new draft) or update (existing id)

    A conflict is advisory: ``allow_conflict=True`` saves anyway.
    Unknown ids on update surface as ``NotFoundError`` from the repository.
    """
    existing = await repo.list(staff_id=draft.staff_id) if draft.staff_id else []
    result = validate_draft(draft, existing)

    errors = dict(result.errors)
    conflicting: list[str] = []
    if "conflict" in errors:
        conflicting = [a.id for a in find_conflicts(_candidate(draft), existing)]
        if allow_conflict:
            logger.warning("appointment_conflict_overridden", appointment_id=draft.id,
                           staff_id=draft.staff_id, conflicting_ids=conflicting)
            errors.pop("conflict")

    if errors:
        event = "appointment_conflict" if "conflict" in errors else "appointment_invalid"
        logger.info(event, appointment_id=draft.id, staff_id=draft.staff_id,
                    fields=sorted(errors), conflicting_ids=conflicting)
        return SaveResult(saved=False, errors=errors, conflicting_ids=conflicting)

    values = draft.field_values()
    if not values.get("tenant_id"):
        # updates keep the stored tenant
        values.pop("tenant_id", None)
        if draft.is_new:
            values["tenant_id"] = default_tenant_id or ""

    if draft.is_new:
        appt = await repo.create(values)
    else:
        appt = await repo.update(draft.id, values)

    logger.info("appointment_saved", appointment_id=appt.id, staff_id=appt.staff_id,
                created=draft.is_new)
    return SaveResult(saved=True, appointment=appt, conflicting_ids=conflicting)


async def move_appointment(
    repo: AppointmentRepository,
    dragged: DraggedAppointment,
    new_start: datetime,
    *,
    target_staff_id: Optional[str] = None,
    allow_conflict: bool = False,
) -> SaveResult:
    """Drag-and-drop: keep the duration, move the start, optionally switch staff."""
    retimed = retime_on_drop(dragged, new_start, target_staff_id)

    staff_id = retimed.staff_id
    if staff_id is None:
        current = await repo.get(dragged.appointment_id)
        staff_id = current.staff_id if current is not None else None

    changes: dict[str, Any] = {"start": retimed.start, "end": retimed.end}
    if retimed.staff_id is not None:
        changes["staff_id"] = retimed.staff_id

    if staff_id is not None:
        candidate = AppointmentDraft(id=retimed.appointment_id, start=retimed.start,
                                     end=retimed.end, staff_id=staff_id)
        conflicts = find_conflicts(candidate, await repo.list(staff_id=staff_id))
        if conflicts and not allow_conflict:
            conflicting = [a.id for a in conflicts]
            logger.info("appointment_move_conflict", appointment_id=dragged.appointment_id,
                        staff_id=staff_id, conflicting_ids=conflicting)
            return SaveResult(saved=False, errors={"conflict": MSG_CONFLICT},
                              conflicting_ids=conflicting)

    appt = await repo.update(retimed.appointment_id, changes)
    logger.info("appointment_moved", appointment_id=appt.id, staff_id=appt.staff_id,
                start=appt.start.isoformat(), end=appt.end.isoformat())
    return SaveResult(saved=True, appointment=appt)


async def check_conflict(repo: AppointmentRepository, candidate: AppointmentDraft) -> list:
    """Appointments the candidate would collide with; empty when it cannot be judged."""
    if not candidate.staff_id:
        return []
    return find_conflicts(candidate, await repo.list(staff_id=candidate.staff_id))


async def delete_appointment(repo: AppointmentRepository, appointment_id: str) -> None:
    await repo.delete(appointment_id)


def _candidate(draft: AppointmentDraft) -> AppointmentDraft:
    return AppointmentDraft(id=draft.id, start=draft.start, end=draft.end, staff_id=draft.staff_id)
