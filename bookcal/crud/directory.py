# bookcal/crud/directory.py
from typing import Optional, Sequence

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.core.logging import get_logger
from bookcal.db.models.directory import Customer, Service, Staff

logger = get_logger(__name__)

DEMO_STAFF = [
    {"id": "staff-1", "name": "Dr. Emily Carter", "color": "indigo"},
    {"id": "staff-2", "name": "John Davis", "color": "emerald"},
    {"id": "staff-3", "name": "Sarah Miller", "color": "violet"},
]

DEMO_SERVICES = [
    {"id": "service-1", "name": "Consultation", "duration": 30, "color": "indigo"},
    {"id": "service-2", "name": "Check-up", "duration": 60, "color": "pink"},
    {"id": "service-3", "name": "Therapy Session", "duration": 90, "color": "yellow"},
]

DEMO_CUSTOMERS = [
    {"id": "cust-1", "name": "Alice Wonderland"},
    {"id": "cust-2", "name": "Bob The Builder"},
]


async def list_staff(db: AsyncSession) -> Sequence[Staff]:
    res = await db.execute(sa.select(Staff).order_by(Staff.id))
    return res.scalars().all()


async def list_services(db: AsyncSession) -> Sequence[Service]:
    res = await db.execute(sa.select(Service).order_by(Service.id))
    return res.scalars().all()


async def list_customers(db: AsyncSession) -> Sequence[Customer]:
    res = await db.execute(sa.select(Customer).order_by(Customer.id))
    return res.scalars().all()


async def get_service(db: AsyncSession, service_id: str) -> Optional[Service]:
    return await db.get(Service, service_id)


async def seed_directory(db: AsyncSession) -> int:
    """Insert the demo staff, services and customers that are missing. Returns rows added."""
    added = 0
    for model, rows in ((Staff, DEMO_STAFF), (Service, DEMO_SERVICES), (Customer, DEMO_CUSTOMERS)):
        for row in rows:
            if await db.get(model, row["id"]) is None:
                db.add(model(**row))
                added += 1
    if added:
        await db.commit()
        logger.info("directory_seeded", rows=added)
    return added
