import pytest

from songbird.db.models import NotificationLog, Shifts, ShiftType
from songbird.services.exchange import (
    CapExceededError,
    InvalidStateError,
    NotFoundError,
    bulk_create_shifts,
    create_shift,
    update_shift,
)
from songbird.services.notifications import Outbox

from conftest import day


class TestCreateShift:
    def test_assigned_shift_notifies_assignee(self, db, admin, make_user):
        alice = make_user(full_name="Alice", telegram_id="111")
        outbox = Outbox(db)

        shift = create_shift(db, day(1), "morning", created_by=admin.id, assigned_to=alice.id, outbox=outbox)

        assert shift.assigned_to == alice.id
        assert shift.is_open is False
        assert shift.created_by_user_id == admin.id
        pending = outbox.drain()
        assert [(p.user_id, p.kind, p.chat_id) for p in pending] == [(alice.id, "shift_assigned", "111")]
        assert db.query(NotificationLog).filter(NotificationLog.user_id == alice.id).count() == 1

    def test_open_shift_drops_assignee(self, db, admin, make_user):
        alice = make_user()
        shift = create_shift(db, day(1), "afternoon", created_by=admin.id, assigned_to=alice.id, is_open=True)
        assert shift.is_open is True
        assert shift.assigned_to is None

    def test_duplicate_slot_rejected(self, db, admin, make_shift):
        make_shift(day(1), "morning")
        with pytest.raises(InvalidStateError):
            create_shift(db, day(1), "morning", created_by=admin.id)
        assert db.query(Shifts).count() == 1

    def test_cap_exceeded_creates_nothing(self, db, admin, make_user, make_shift):
        alice = make_user()
        for i in range(3):
            make_shift(day(i), "overnight", assigned_to=alice.id)

        with pytest.raises(CapExceededError) as exc:
            create_shift(db, day(4), "overnight", created_by=admin.id, assigned_to=alice.id)

        assert exc.value.staff_member == "assignee"
        assert exc.value.check.projected_hours == 48.0
        assert db.query(Shifts).count() == 3

    def test_unknown_assignee(self, db, admin):
        with pytest.raises(NotFoundError):
            create_shift(db, day(1), "morning", created_by=admin.id, assigned_to=404)

    def test_system_user_cannot_hold_shifts(self, db, admin, open_user):
        with pytest.raises(InvalidStateError):
            create_shift(db, day(1), "morning", created_by=admin.id, assigned_to=open_user.id)

    def test_inactive_user_cannot_hold_shifts(self, db, admin, make_user):
        gone = make_user(is_active=False)
        with pytest.raises(InvalidStateError):
            create_shift(db, day(1), "morning", created_by=admin.id, assigned_to=gone.id)


class TestUpdateShift:
    def test_opening_clears_assignee(self, db, make_user, make_shift):
        alice = make_user()
        shift = make_shift(day(1), "morning", assigned_to=alice.id)

        updated = update_shift(db, shift.id, {"is_open": True})
        assert updated.is_open is True
        assert updated.assigned_to is None

    def test_reassign_checks_cap_excluding_this_shift(self, db, make_user, make_shift):
        alice = make_user()
        bob = make_user()
        for i in range(3):
            make_shift(day(i), "overnight", assigned_to=bob.id)
        shift = make_shift(day(4), "overnight", assigned_to=alice.id)

        with pytest.raises(CapExceededError):
            update_shift(db, shift.id, {"assigned_to": bob.id})

        db.refresh(shift)
        assert shift.assigned_to == alice.id

    def test_reassign_closes_open_shift(self, db, make_user, make_shift):
        alice = make_user(telegram_id="5")
        shift = make_shift(day(2), "afternoon", is_open=True)
        outbox = Outbox(db)

        updated = update_shift(db, shift.id, {"assigned_to": alice.id}, outbox=outbox)
        assert updated.assigned_to == alice.id
        assert updated.is_open is False
        assert len(outbox.drain()) == 1

    def test_notes_only_update_skips_cap(self, db, make_user, make_shift):
        alice = make_user()
        for i in range(4):
            make_shift(day(i), "overnight", assigned_to=alice.id)  # 48h, set up past the cap
        shift = make_shift(day(5), "morning", assigned_to=alice.id)

        updated = update_shift(db, shift.id, {"notes": "bring keys", "is_preliminary": True})
        assert updated.notes == "bring keys"
        assert updated.is_preliminary is True

    def test_missing_shift(self, db):
        with pytest.raises(NotFoundError):
            update_shift(db, 999, {"notes": "x"})


class TestBulkCreate:
    def test_skips_duplicates_and_counts_batch_toward_cap(self, db, admin, make_user, make_shift):
        alice = make_user()
        make_shift(day(0), "morning")

        items = [
            {"date": day(0), "shift_type": "morning"},  # duplicate
            {"date": day(1), "shift_type": "overnight", "assigned_to": alice.id},
            {"date": day(2), "shift_type": "overnight", "assigned_to": alice.id},
            {"date": day(3), "shift_type": "overnight", "assigned_to": alice.id},
            {"date": day(4), "shift_type": "overnight", "assigned_to": alice.id},  # 48h
            {"date": day(4), "shift_type": "afternoon", "assigned_to": alice.id},  # 40h
            {"date": day(5), "shift_type": "morning", "is_open": True},
        ]
        result = bulk_create_shifts(db, items, created_by=admin.id)

        assert len(result.created) == 5
        assert [s["index"] for s in result.skipped] == [0, 4]
        assert "40-hour" in result.skipped[1]["reason"]
        open_shift = result.created[-1]
        assert open_shift.is_open is True and open_shift.assigned_to is None

    def test_invalid_assignee_skipped(self, db, admin):
        result = bulk_create_shifts(db, [{"date": day(1), "shift_type": ShiftType.MORNING, "assigned_to": 777}], created_by=admin.id)
        assert result.created == []
        assert result.skipped == [{"index": 0, "reason": "Staff member not found"}]
