# bookcal/scheduling/models.py
"""
Value types shared by the conflict detector and the grid engine.

The engine only reads attributes, so ORM rows from ``bookcal.db.models`` can be
passed anywhere an ``Appointment`` is expected.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

TEMP_ID_PREFIX = "temp-"
PERSISTED_ID_PREFIX = "appt-"


class AppointmentStatus(str, Enum):
    CONFIRMED = "confirmed"
    PENDING = "pending"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


class CalendarView(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    AGENDA = "agenda"


class NavigateAction(str, Enum):
    PREV = "prev"
    NEXT = "next"
    TODAY = "today"


SUNDAY = 0
MONDAY = 1
WEEK_START_DAYS = (SUNDAY, MONDAY)


def new_appointment_id() -> str:
    return f"{PERSISTED_ID_PREFIX}{uuid.uuid4().hex[:16]}"


def temporary_id() -> str:
    """Id for an unsaved draft; never collides with a persisted ``appt-`` id."""
    return f"{TEMP_ID_PREFIX}{uuid.uuid4().hex}"


@dataclass
class Staff:
    id: str
    name: str
    color: str = ""


@dataclass
class Service:
    id: str
    name: str
    duration: int = 30  # minutes
    color: str = ""


@dataclass
class Customer:
    id: str
    name: str
    email: Optional[str] = None


@dataclass
class Appointment:
    id: str
    start: datetime
    end: datetime
    staff_id: str
    service_id: str
    status: AppointmentStatus = AppointmentStatus.PENDING
    tenant_id: str = ""
    customer_id: Optional[str] = None
    title: Optional[str] = None
    notes: Optional[str] = None

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60


@dataclass
class AppointmentDraft:
    """Editable form state; every field may still be missing."""
    id: Optional[str] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    staff_id: Optional[str] = None
    service_id: Optional[str] = None
    customer_id: Optional[str] = None
    status: AppointmentStatus = AppointmentStatus.PENDING
    title: Optional[str] = None
    notes: Optional[str] = None
    tenant_id: Optional[str] = None

    @property
    def is_new(self) -> bool:
        return not self.id or self.id.startswith(TEMP_ID_PREFIX)

    def field_values(self) -> dict:
        """Persistable fields (everything but the id)."""
        return {
            "start": self.start,
            "end": self.end,
            "staff_id": self.staff_id,
            "service_id": self.service_id,
            "customer_id": self.customer_id,
            "status": self.status,
            "title": self.title,
            "notes": self.notes,
            "tenant_id": self.tenant_id,
        }


@dataclass(frozen=True)
class DraggedAppointment:
    appointment_id: str
    original_start: datetime
    original_end: datetime


@dataclass(frozen=True)
class RetimeResult:
    appointment_id: str
    start: datetime
    end: datetime
    staff_id: Optional[str] = None


@dataclass(frozen=True)
class SlotPlacement:
    top: float
    height: float


@dataclass(frozen=True)
class CalendarSettings:
    """Locale and geometry knobs threaded into the grid and title functions."""
    locale: str = "en"
    week_start_day: int = MONDAY
    hour_height: int = 60
    min_height: int = 15
    day_start_hour: int = 0
    day_end_hour: int = 24
    slot_interval_minutes: int = 60
    agenda_label: str = "Agenda"


@dataclass
class ValidationResult:
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def has_conflict(self) -> bool:
        return "conflict" in self.errors
