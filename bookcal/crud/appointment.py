# bookcal/crud/appointment.py

from __future__ import annotations
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional, Protocol, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.core.errors import NotFoundError
from bookcal.core.logging import get_logger
from bookcal.db.models.appointment import Appointment
from bookcal.scheduling.models import AppointmentStatus, new_appointment_id

logger = get_logger(__name__)

MUTABLE_FIELDS = (
    "start", "end", "staff_id", "service_id", "customer_id",
    "status", "title", "notes", "tenant_id",
)


async def get_appointment(db: AsyncSession, appointment_id: str) -> Optional[Appointment]:
    return await db.get(Appointment, appointment_id)


async def list_appointments(
    db: AsyncSession,
    *,
    staff_id: Optional[str] = None,
    service_id: Optional[str] = None,
    status: Optional[AppointmentStatus] = None,
    day: Optional[date] = None,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    tenant_id: Optional[str] = None,
    limit: Optional[int] = None,
) -> Sequence[Appointment]:
    """Filters combine with AND; ``day``/``start``/``end`` match on the start time."""
    q = sa.select(Appointment)
    if staff_id is not None:
        q = q.where(Appointment.staff_id == staff_id)
    if service_id is not None:
        q = q.where(Appointment.service_id == service_id)
    if status is not None:
        q = q.where(Appointment.status == AppointmentStatus(status))
    if tenant_id is not None:
        q = q.where(Appointment.tenant_id == tenant_id)
    if day is not None:
        day_start = datetime.combine(day, time.min)
        q = q.where(Appointment.start >= day_start, Appointment.start < day_start + timedelta(days=1))
    if start is not None:
        q = q.where(Appointment.start >= start)
    if end is not None:
        q = q.where(Appointment.start < end)
    q = q.order_by(Appointment.start.asc(), Appointment.id.asc())
    if limit is not None:
        q = q.limit(limit)
    res = await db.execute(q)
    return res.scalars().all()


async def create_appointment(db: AsyncSession, data: Mapping[str, Any]) -> Appointment:
    """Insert a new appointment; the id is assigned here and never changes."""
    fields = {k: v for k, v in data.items() if k in MUTABLE_FIELDS and v is not None}
    appt = Appointment(id=new_appointment_id(), **fields)
    db.add(appt)
    await db.commit()
    await db.refresh(appt)
    logger.info("appointment_created", appointment_id=appt.id, staff_id=appt.staff_id)
    return appt


async def update_appointment(db: AsyncSession, appointment_id: str,
                             changes: Mapping[str, Any]) -> Appointment:
    appt = await db.get(Appointment, appointment_id)
    if not appt:
        raise NotFoundError("Appointment", appointment_id)

    for k, v in changes.items():
        if k in MUTABLE_FIELDS:
            setattr(appt, k, v)

    await db.commit()
    await db.refresh(appt)
    logger.info("appointment_updated", appointment_id=appt.id, fields=sorted(changes))
    return appt


async def delete_appointment(db: AsyncSession, appointment_id: str) -> None:
    appt = await db.get(Appointment, appointment_id)
    if not appt:
        raise NotFoundError("Appointment", appointment_id)
    await db.delete(appt)
    await db.commit()
    logger.info("appointment_deleted", appointment_id=appointment_id)


class AppointmentRepository(Protocol):
    """What the booking service needs from a store."""

    async def get(self, appointment_id: str) -> Optional[Any]: ...

    async def list(self, **filters: Any) -> Sequence[Any]: ...

    async def create(self, data: Mapping[str, Any]) -> Any: ...

    async def update(self, appointment_id: str, changes: Mapping[str, Any]) -> Any: ...

    async def delete(self, appointment_id: str) -> None: ...


class SqlAppointmentRepository:
    """``AppointmentRepository`` over one async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, appointment_id: str) -> Optional[Appointment]:
        return await get_appointment(self.db, appointment_id)

    async def list(self, **filters: Any) -> Sequence[Appointment]:
        return await list_appointments(self.db, **filters)

    async def create(self, data: Mapping[str, Any]) -> Appointment:
        return await create_appointment(self.db, data)

    async def update(self, appointment_id: str, changes: Mapping[str, Any]) -> Appointment:
        return await update_appointment(self.db, appointment_id, changes)

    async def delete(self, appointment_id: str) -> None:
        await delete_appointment(self.db, appointment_id)
