# bookcal/schemas/appointment.py

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict

from bookcal.scheduling.models import AppointmentDraft, AppointmentStatus

LOCAL_TIME_MESSAGE = "must be a local wall-clock time without a UTC offset"


def ensure_local_time(v: Optional[datetime]) -> Optional[datetime]:
    # stored times are naive; an offset-aware value cannot be compared with them
    if v is not None and v.tzinfo is not None:
        raise ValueError(LOCAL_TIME_MESSAGE)
    return v


class AppointmentIn(BaseModel):
    """Create/replace payload. Fields are optional so validation can report every missing one."""
    title: Optional[str] = Field(None, examples=["Consultation with Alice"])
    start: Optional[datetime] = Field(None, description="Local wall-clock time, e.g. 2025-03-04T09:00")
    end: Optional[datetime] = None
    staff_id: Optional[str] = Field(None, examples=["staff-1"])
    service_id: Optional[str] = Field(None, examples=["service-1"])
    customer_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    notes: Optional[str] = None
    tenant_id: Optional[str] = None
    allow_conflict: bool = False

    @field_validator("start", "end")
    @classmethod
    def _local_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_local_time(v)

    def to_draft(self, appointment_id: Optional[str] = None) -> AppointmentDraft:
        return AppointmentDraft(
            id=appointment_id,
            **self.model_dump(exclude={"allow_conflict"}),
        )


class AppointmentPatch(BaseModel):
    title: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    staff_id: Optional[str] = None
    service_id: Optional[str] = None
    customer_id: Optional[str] = None
    status: Optional[AppointmentStatus] = None
    notes: Optional[str] = None
    allow_conflict: bool = False

    @field_validator("start", "end")
    @classmethod
    def _local_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_local_time(v)


class AppointmentOut(BaseModel):
    id: str
    title: Optional[str] = None
    start: datetime
    end: datetime
    staff_id: str
    service_id: str
    customer_id: Optional[str] = None
    status: AppointmentStatus
    notes: Optional[str] = None
    tenant_id: str
    model_config = ConfigDict(from_attributes=True)


class MoveRequest(BaseModel):
    """Drop of a dragged appointment onto a new slot."""
    original_start: datetime
    original_end: datetime
    new_start: datetime
    staff_id: Optional[str] = Field(None, description="Staff of the drop zone, if staff-scoped")
    allow_conflict: bool = False

    @field_validator("original_start", "original_end", "new_start")
    @classmethod
    def _local_times(cls, v: datetime) -> datetime:
        return ensure_local_time(v)


class ConflictCheckRequest(BaseModel):
    id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    staff_id: Optional[str] = None

    @field_validator("start", "end")
    @classmethod
    def _local_times(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_local_time(v)


class ConflictCheckOut(BaseModel):
    has_conflict: bool
    conflicting_ids: list[str] = Field(default_factory=list)


class SlotPlacementOut(BaseModel):
    appointment_id: str
    top: float
    height: float


class MonthCell(BaseModel):
    day: Optional[date] = Field(..., description="None where the date is outside the representable range")
    in_current_month: bool


class MonthGridOut(BaseModel):
    year: int
    month: int = Field(..., description="Zero-based month (0=January)")
    week_start_day: int
    weekday_names: list[str]
    cells: list[MonthCell]


class AgendaDay(BaseModel):
    day: date
    title: str
    appointments: list[AppointmentOut]


class CalendarViewOut(BaseModel):
    view: str
    title: str
    range_start: datetime
    range_end: datetime
    appointments: list[AppointmentOut]
    placements: list[SlotPlacementOut] = Field(default_factory=list)
    agenda: list[AgendaDay] = Field(default_factory=list)
