# bookcal/db/models/directory.py

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from bookcal.db.session import Base


class Staff(Base):
    __tablename__ = "staff"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    name: Mapped[str] = mapped_column(sa.String(120), nullable=False)
    color: Mapped[str] = mapped_column(sa.String(32), nullable=False, server_default="")


class Service(Base):
    __tablename__ = "services"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    name: Mapped[str] = mapped_column(sa.String(120), nullable=False)
    # Default appointment length in minutes
    duration: Mapped[int] = mapped_column(sa.Integer, nullable=False, server_default="30")
    color: Mapped[str] = mapped_column(sa.String(32), nullable=False, server_default="")


class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(sa.String(64), primary_key=True)
    name: Mapped[str] = mapped_column(sa.String(120), nullable=False)
    email: Mapped[str | None] = mapped_column(sa.String(254))
