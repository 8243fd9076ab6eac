# bookcal/db/base.py

"""
Imports all ORM models so ``Base.metadata`` knows every table.
Whenever you add a new model, import it here.
"""
from bookcal.db.models.appointment import Appointment
from bookcal.db.models.directory import Customer, Service, Staff
from bookcal.db.session import engine, Base

__all__ = ["Appointment", "Customer", "Service", "Staff", "Base", "init_db"]


async def init_db(bind=None):
    """Initialize database by creating all tables"""
    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)