# bookcal/api/routes/appointments.py

from __future__ import annotations
from datetime import date, datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.core.config import settings
from bookcal.core.errors import NotFoundError
from bookcal.crud.appointment import SqlAppointmentRepository
from bookcal.db.session import get_session
from bookcal.scheduling.models import AppointmentDraft, AppointmentStatus, DraggedAppointment
from bookcal.schemas.appointment import (
    AppointmentIn,
    AppointmentOut,
    AppointmentPatch,
    ConflictCheckOut,
    ConflictCheckRequest,
    MoveRequest,
    ensure_local_time,
)
from bookcal.services.booking import (
    SaveResult,
    check_conflict,
    delete_appointment,
    move_appointment,
    save_appointment,
)

router = APIRouter(prefix="/appointments", tags=["appointments"])


def get_repo(db: AsyncSession = Depends(get_session)) -> SqlAppointmentRepository:
    return SqlAppointmentRepository(db)


def _unwrap(result: SaveResult):
    """Stored appointment, or the HTTP error that matches why it was not saved."""
    if result.saved:
        return result.appointment
    if result.is_conflict and len(result.errors) == 1:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"message": result.errors["conflict"], "conflicting_ids": result.conflicting_ids},
        )
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail={"errors": result.errors, "conflicting_ids": result.conflicting_ids},
    )


@router.get("", response_model=List[AppointmentOut])
async def list_appointments_ep(
    repo: SqlAppointmentRepository = Depends(get_repo),
    staff_id: Optional[str] = Query(None),
    service_id: Optional[str] = Query(None),
    status_: Optional[AppointmentStatus] = Query(None, alias="status"),
    day: Optional[date] = Query(None, description="Only appointments starting on this day"),
    start: Optional[datetime] = Query(None, description="Starts at or after (local)"),
    end: Optional[datetime] = Query(None, description="Starts before (local)"),
    limit: int = 500,
):
    for name, value in (("start", start), ("end", end)):
        try:
            ensure_local_time(value)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                                detail=f"{name} {e}")
    return await repo.list(
        staff_id=staff_id,
        service_id=service_id,
        status=status_,
        day=day,
        start=start,
        end=end,
        limit=limit,
    )


@router.post("", response_model=AppointmentOut, status_code=status.HTTP_201_CREATED)
async def create_appointment_ep(payload: AppointmentIn,
                                repo: SqlAppointmentRepository = Depends(get_repo)):
    result = await save_appointment(
        repo,
        payload.to_draft(),
        allow_conflict=payload.allow_conflict,
        default_tenant_id=settings.DEFAULT_TENANT_ID,
    )
    return _unwrap(result)


# keep static route above the param routes
@router.post("/check-conflict", response_model=ConflictCheckOut)
async def check_conflict_ep(payload: ConflictCheckRequest,
                            repo: SqlAppointmentRepository = Depends(get_repo)):
    candidate = AppointmentDraft(**payload.model_dump())
    conflicts = await check_conflict(repo, candidate)
    return ConflictCheckOut(has_conflict=bool(conflicts), conflicting_ids=[a.id for a in conflicts])


@router.get("/{appointment_id}", response_model=AppointmentOut)
async def get_appointment_ep(appointment_id: str,
                             repo: SqlAppointmentRepository = Depends(get_repo)):
    obj = await repo.get(appointment_id)
    if not obj:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return obj


@router.patch("/{appointment_id}", response_model=AppointmentOut)
async def update_appointment_ep(appointment_id: str, payload: AppointmentPatch,
                                repo: SqlAppointmentRepository = Depends(get_repo)):
    current = await repo.get(appointment_id)
    if not current:
        raise HTTPException(status_code=404, detail="Appointment not found")

    changes = payload.model_dump(exclude_unset=True, exclude={"allow_conflict"})
    draft = AppointmentDraft(
        id=current.id,
        start=current.start,
        end=current.end,
        staff_id=current.staff_id,
        service_id=current.service_id,
        customer_id=current.customer_id,
        status=current.status,
        title=current.title,
        notes=current.notes,
        tenant_id=current.tenant_id,
    )
    for k, v in changes.items():
        if k == "status" and v is None:
            continue
        setattr(draft, k, v)

    try:
        result = await save_appointment(repo, draft, allow_conflict=payload.allow_conflict)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return _unwrap(result)


@router.post("/{appointment_id}/move", response_model=AppointmentOut)
async def move_appointment_ep(appointment_id: str, payload: MoveRequest,
                              repo: SqlAppointmentRepository = Depends(get_repo)):
    dragged = DraggedAppointment(
        appointment_id=appointment_id,
        original_start=payload.original_start,
        original_end=payload.original_end,
    )
    try:
        result = await move_appointment(
            repo,
            dragged,
            payload.new_start,
            target_staff_id=payload.staff_id,
            allow_conflict=payload.allow_conflict,
        )
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return _unwrap(result)


@router.delete("/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment_ep(appointment_id: str,
                                repo: SqlAppointmentRepository = Depends(get_repo)):
    try:
        await delete_appointment(repo, appointment_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Appointment not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
