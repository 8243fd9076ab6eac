# bookcal/schemas/directory.py
from typing import Optional
from pydantic import BaseModel, ConfigDict


class StaffOut(BaseModel):
    id: str
    name: str
    color: str = ""
    model_config = ConfigDict(from_attributes=True)


class ServiceOut(BaseModel):
    id: str
    name: str
    duration: int
    color: str = ""
    model_config = ConfigDict(from_attributes=True)


class CustomerOut(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    model_config = ConfigDict(from_attributes=True)
