#!/usr/bin/env python3
"""
Tests for the booking service: save, move, delete and conflict checks
against a real in-memory SQLite store.
"""

import pytest
import sys
import os
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock

# Add app to Python path for testing
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from bookcal.core.errors import NotFoundError
from bookcal.crud.appointment import SqlAppointmentRepository, list_appointments
from bookcal.scheduling.models import AppointmentDraft, AppointmentStatus, DraggedAppointment
from bookcal.scheduling.validation import MSG_CONFLICT, MSG_STAFF_REQUIRED
from bookcal.services.booking import (
    check_conflict,
    delete_appointment,
    move_appointment,
    save_appointment,
)


def at(hour, minute=0, day=4):
    return datetime(2025, 3, day, hour, minute)


def booking(start, end, staff_id="staff-1", **kw):
    return AppointmentDraft(
        title=kw.pop("title", "Consultation"),
        start=start,
        end=end,
        staff_id=staff_id,
        service_id=kw.pop("service_id", "service-1"),
        customer_id=kw.pop("customer_id", "cust-1"),
        status=kw.pop("status", AppointmentStatus.CONFIRMED),
        **kw,
    )


@pytest.fixture
def repo(db_session):
    return SqlAppointmentRepository(db_session)


@pytest.mark.integration
class TestSaveAppointment:

    @pytest.mark.asyncio
    async def test_create_assigns_id_and_tenant(self, repo):
        result = await save_appointment(repo, booking(at(9), at(9, 30)), default_tenant_id="tenant-123")

        assert result.saved
        appt = result.appointment
        assert appt.id.startswith("appt-")
        assert appt.tenant_id == "tenant-123"
        assert appt.start == at(9)
        assert appt.end == at(9, 30)
        assert appt.status is AppointmentStatus.CONFIRMED

    @pytest.mark.asyncio
    async def test_temporary_id_is_replaced(self, repo):
        result = await save_appointment(repo, booking(at(9), at(9, 30), id="temp-abc"))
        assert result.saved
        assert result.appointment.id.startswith("appt-")

    @pytest.mark.asyncio
    async def test_scenario_same_staff_and_other_staff(self, repo):
        """S1 09:00-09:30 booked; S1 09:15 conflicts, S1 09:30 and S2 09:15 do not"""
        first = await save_appointment(repo, booking(at(9), at(9, 30)))
        assert first.saved

        overlapping = await save_appointment(repo, booking(at(9, 15), at(9, 45)))
        assert not overlapping.saved
        assert overlapping.is_conflict
        assert overlapping.errors == {"conflict": MSG_CONFLICT}
        assert overlapping.conflicting_ids == [first.appointment.id]

        adjacent = await save_appointment(repo, booking(at(9, 30), at(10)))
        assert adjacent.saved

        other_staff = await save_appointment(repo, booking(at(9, 15), at(9, 45), staff_id="staff-2"))
        assert other_staff.saved

    @pytest.mark.asyncio
    async def test_allow_conflict_overrides(self, repo):
        await save_appointment(repo, booking(at(9), at(10)))
        result = await save_appointment(repo, booking(at(9, 30), at(10, 30)), allow_conflict=True)

        assert result.saved
        assert len(result.conflicting_ids) == 1

    @pytest.mark.asyncio
    async def test_invalid_draft_is_not_written(self, repo, db_session):
        result = await save_appointment(repo, booking(at(9), at(9, 30), staff_id=None))

        assert not result.saved
        assert result.errors == {"staff_id": MSG_STAFF_REQUIRED}
        assert await list_appointments(db_session) == []

    @pytest.mark.asyncio
    async def test_update_does_not_conflict_with_itself(self, repo):
        created = (await save_appointment(repo, booking(at(9), at(10)))).appointment

        draft = booking(at(9, 30), at(10, 30), id=created.id, title="Moved")
        result = await save_appointment(repo, draft)

        assert result.saved
        assert result.appointment.id == created.id
        assert result.appointment.start == at(9, 30)
        assert result.appointment.title == "Moved"

    @pytest.mark.asyncio
    async def test_update_unknown_id(self, repo):
        with pytest.raises(NotFoundError):
            await save_appointment(repo, booking(at(9), at(10), id="appt-missing"))


@pytest.mark.integration
class TestMoveAppointment:

    @pytest.mark.asyncio
    async def test_drop_keeps_duration(self, repo):
        created = (await save_appointment(repo, booking(at(9), at(10)))).appointment
        dragged = DraggedAppointment(created.id, created.start, created.end)

        result = await move_appointment(repo, dragged, at(14))

        assert result.saved
        assert result.appointment.start == at(14)
        assert result.appointment.end == at(15)
        assert result.appointment.staff_id == "staff-1"

    @pytest.mark.asyncio
    async def test_drop_onto_other_staff(self, repo):
        created = (await save_appointment(repo, booking(at(9), at(9, 30)))).appointment
        dragged = DraggedAppointment(created.id, created.start, created.end)

        result = await move_appointment(repo, dragged, at(11), target_staff_id="staff-2")

        assert result.saved
        assert result.appointment.staff_id == "staff-2"
        assert result.appointment.end == at(11, 30)

    @pytest.mark.asyncio
    async def test_drop_onto_busy_slot(self, repo):
        busy = (await save_appointment(repo, booking(at(14), at(15)))).appointment
        created = (await save_appointment(repo, booking(at(9), at(10)))).appointment
        dragged = DraggedAppointment(created.id, created.start, created.end)

        result = await move_appointment(repo, dragged, at(14, 30))
        assert not result.saved
        assert result.conflicting_ids == [busy.id]

        forced = await move_appointment(repo, dragged, at(14, 30), allow_conflict=True)
        assert forced.saved

    @pytest.mark.asyncio
    async def test_move_unknown_id(self, repo):
        dragged = DraggedAppointment("appt-missing", at(9), at(10))
        with pytest.raises(NotFoundError):
            await move_appointment(repo, dragged, at(11))


@pytest.mark.integration
class TestDeleteAndCheck:

    @pytest.mark.asyncio
    async def test_delete(self, repo, db_session):
        created = (await save_appointment(repo, booking(at(9), at(10)))).appointment
        await delete_appointment(repo, created.id)
        assert await repo.get(created.id) is None

    @pytest.mark.asyncio
    async def test_delete_unknown_id(self, repo):
        with pytest.raises(NotFoundError):
            await delete_appointment(repo, "appt-missing")

    @pytest.mark.asyncio
    async def test_check_conflict(self, repo):
        created = (await save_appointment(repo, booking(at(9), at(10)))).appointment

        hits = await check_conflict(repo, AppointmentDraft(start=at(9, 30), end=at(10, 30), staff_id="staff-1"))
        assert [a.id for a in hits] == [created.id]

        assert await check_conflict(repo, AppointmentDraft(start=at(9, 30), end=at(10, 30))) == []


@pytest.mark.unit
class TestServiceWithMockRepository:
    """The service only needs the repository protocol"""

    @pytest.mark.asyncio
    async def test_create_goes_through_repo(self):
        repo = MagicMock()
        repo.list = AsyncMock(return_value=[])
        stored = MagicMock(id="appt-1", staff_id="staff-1")
        repo.create = AsyncMock(return_value=stored)
        repo.update = AsyncMock()

        result = await save_appointment(repo, booking(at(9), at(10)), default_tenant_id="tenant-9")

        assert result.saved
        assert result.appointment is stored
        repo.list.assert_awaited_once_with(staff_id="staff-1")
        repo.update.assert_not_called()
        assert repo.create.await_args.args[0]["tenant_id"] == "tenant-9"

    @pytest.mark.asyncio
    async def test_no_lookup_without_staff(self):
        repo = MagicMock()
        repo.list = AsyncMock(return_value=[])
        repo.create = AsyncMock()

        result = await save_appointment(repo, AppointmentDraft())

        assert not result.saved
        repo.list.assert_not_called()
        repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_propagates_not_found(self):
        repo = MagicMock()
        repo.delete = AsyncMock(side_effect=NotFoundError("Appointment", "appt-x"))

        with pytest.raises(NotFoundError):
            await delete_appointment(repo, "appt-x")
