# bookcal/api/routes/directory.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.crud.directory import list_customers, list_services, list_staff
from bookcal.db.session import get_session
from bookcal.schemas.directory import CustomerOut, ServiceOut, StaffOut

router = APIRouter(prefix="/directory", tags=["directory"])


@router.get("/staff", response_model=List[StaffOut])
async def staff_ep(db: AsyncSession = Depends(get_session)):
    return await list_staff(db)


@router.get("/services", response_model=List[ServiceOut])
async def services_ep(db: AsyncSession = Depends(get_session)):
    return await list_services(db)


@router.get("/customers", response_model=List[CustomerOut])
async def customers_ep(db: AsyncSession = Depends(get_session)):
    return await list_customers(db)
