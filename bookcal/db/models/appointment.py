# bookcal/db/models/appointment.py

from __future__ import annotations
from datetime import datetime
import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from bookcal.db.session import Base
from bookcal.scheduling.models import AppointmentStatus, new_appointment_id


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # conflict lookups are per staff member, ordered by start
        sa.Index("ix_appointments_staff_id_starts_at", "staff_id", "starts_at"),
        sa.Index("ix_appointments_service_id", "service_id"),
        sa.Index("ix_appointments_tenant_id", "tenant_id"),
    )

    id: Mapped[str] = mapped_column(sa.String(40), primary_key=True, default=new_appointment_id)

    # Naive local wall-clock times; no timezone conversion happens anywhere
    start: Mapped[datetime] = mapped_column("starts_at", sa.DateTime(timezone=False), nullable=False)
    end: Mapped[datetime] = mapped_column("ends_at", sa.DateTime(timezone=False), nullable=False)

    # References into the directory, not ownership
    staff_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    service_id: Mapped[str] = mapped_column(sa.String(64), nullable=False)
    customer_id: Mapped[str | None] = mapped_column(sa.String(64))

    status: Mapped[AppointmentStatus] = mapped_column(
        sa.Enum(
            AppointmentStatus,
            name="appointment_status",
            native_enum=False,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=AppointmentStatus.PENDING,
    )
    title: Mapped[str | None] = mapped_column(sa.String(200))
    notes: Mapped[str | None] = mapped_column(sa.Text)
    tenant_id: Mapped[str] = mapped_column(sa.String(64), nullable=False, server_default="")

    created_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=False),
        nullable=False,
        default=datetime.now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        sa.DateTime(timezone=False),
        nullable=False,
        default=datetime.now,
        onupdate=datetime.now,
    )

    def __repr__(self) -> str:
        return f"<Appointment {self.id} staff={self.staff_id} {self.start:%Y-%m-%d %H:%M}-{self.end:%H:%M}>"
