"""
HTTP-level tests: auth, role checks, and error mapping from the exchange engine.
"""
from unittest.mock import patch

from songbird.db.models import UserRole

from conftest import TEST_PASSWORD, day


class TestAuth:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_login_and_me(self, client, make_user):
        make_user(username="alice", full_name="Alice")
        response = client.post("/api/v1/auth/login", json={"username": "Alice", "password": TEST_PASSWORD})
        assert response.status_code == 200
        token = response.json()["access_token"]

        me = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})
        assert me.status_code == 200
        assert me.json()["full_name"] == "Alice"

    def test_bad_password(self, client, make_user):
        make_user(username="alice")
        response = client.post("/api/v1/auth/login", json={"username": "alice", "password": "nope"})
        assert response.status_code == 401

    def test_disabled_account(self, client, make_user):
        make_user(username="gone", is_active=False)
        response = client.post("/api/v1/auth/login", json={"username": "gone", "password": TEST_PASSWORD})
        assert response.status_code == 403

    def test_open_shift_placeholder_cannot_log_in(self, client, open_user):
        response = client.post("/api/v1/auth/login", json={"username": "_open", "password": TEST_PASSWORD})
        assert response.status_code == 401

    def test_invalid_token(self, client):
        response = client.get("/api/v1/users/me", headers={"Authorization": "Bearer junk"})
        assert response.status_code == 401


class TestUsers:
    def test_listing_hides_placeholder(self, client, admin, open_user, make_user, auth_headers):
        alice = make_user(full_name="Alice")
        response = client.get("/api/v1/users", headers=auth_headers(alice))
        ids = {u["id"] for u in response.json()}
        assert alice.id in ids and admin.id in ids
        assert open_user.id not in ids

    def test_staff_cannot_create_users(self, client, make_user, auth_headers):
        alice = make_user()
        response = client.post(
            "/api/v1/users",
            json={"username": "bob", "full_name": "Bob", "password": "pw"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 403

    def test_admin_creates_user_and_rejects_duplicate(self, client, admin, auth_headers):
        body = {"username": "Bob", "full_name": "Bob", "password": "pw", "job_title": "House Manager"}
        first = client.post("/api/v1/users", json=body, headers=auth_headers(admin))
        assert first.status_code == 201
        assert first.json()["username"] == "bob"
        assert first.json()["role"] == "staff"

        second = client.post("/api/v1/users", json=body, headers=auth_headers(admin))
        assert second.status_code == 400

    def test_admin_updates_user(self, client, admin, make_user, auth_headers):
        alice = make_user()
        response = client.put(
            f"/api/v1/users/{alice.id}",
            json={"telegram_id": "555", "job_title": "House Manager"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["telegram_id"] == "555"

        missing = client.put("/api/v1/users/9999", json={"full_name": "x"}, headers=auth_headers(admin))
        assert missing.status_code == 404

    def test_admin_cannot_be_deactivated(self, client, admin, make_user, auth_headers):
        other_admin = make_user(role=UserRole.ADMIN)
        response = client.put(
            f"/api/v1/users/{other_admin.id}",
            json={"is_active": False},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot deactivate admin users"


class TestSelfService:
    def test_rename_self(self, client, make_user, auth_headers):
        alice = make_user(full_name="Alice")
        response = client.put("/api/v1/users/me", json={"full_name": "  Alice Smith "}, headers=auth_headers(alice))
        assert response.status_code == 200
        assert response.json()["full_name"] == "Alice Smith"
        assert response.json()["job_title"] == "Caregiver"

    def test_blank_name_rejected(self, client, make_user, auth_headers):
        alice = make_user(full_name="Alice")
        response = client.put("/api/v1/users/me", json={"full_name": "   "}, headers=auth_headers(alice))
        assert response.status_code == 400

    def test_job_title_is_not_self_editable(self, client, make_user, auth_headers):
        alice = make_user(full_name="Alice")
        response = client.put(
            "/api/v1/users/me",
            json={"full_name": "Alice", "job_title": "House Manager"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        assert response.json()["job_title"] == "Caregiver"

    def test_change_password(self, client, make_user, auth_headers):
        carol = make_user(username="carol")
        response = client.post(
            "/api/v1/users/me/password",
            json={"current_password": TEST_PASSWORD, "new_password": "a-longer-secret"},
            headers=auth_headers(carol),
        )
        assert response.status_code == 204

        old = client.post("/api/v1/auth/login", json={"username": "carol", "password": TEST_PASSWORD})
        new = client.post("/api/v1/auth/login", json={"username": "carol", "password": "a-longer-secret"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_change_password_needs_current(self, client, make_user, auth_headers):
        alice = make_user(username="alice")
        response = client.post(
            "/api/v1/users/me/password",
            json={"current_password": "wrong", "new_password": "a-longer-secret"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Current password is incorrect"

    def test_short_password_rejected(self, client, make_user, auth_headers):
        alice = make_user(username="alice")
        response = client.post(
            "/api/v1/users/me/password",
            json={"current_password": TEST_PASSWORD, "new_password": "short"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 400

        still_works = client.post("/api/v1/auth/login", json={"username": "alice", "password": TEST_PASSWORD})
        assert still_works.status_code == 200


class TestShiftsAndHours:
    def test_admin_creates_shift(self, client, admin, make_user, auth_headers):
        alice = make_user()
        response = client.post(
            "/api/v1/shifts",
            json={"date": str(day(1)), "shift_type": "morning", "assigned_to": alice.id},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["assigned_to"] == alice.id

        duplicate = client.post(
            "/api/v1/shifts",
            json={"date": str(day(1)), "shift_type": "morning"},
            headers=auth_headers(admin),
        )
        assert duplicate.status_code == 400

    def test_staff_cannot_create_shift(self, client, make_user, auth_headers):
        alice = make_user()
        response = client.post(
            "/api/v1/shifts",
            json={"date": str(day(1)), "shift_type": "morning"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 403

    def test_cap_error_body(self, client, admin, make_user, make_shift, auth_headers):
        alice = make_user()
        for i in range(3):
            make_shift(day(i), "overnight", assigned_to=alice.id)

        response = client.post(
            "/api/v1/shifts",
            json={"date": str(day(4)), "shift_type": "overnight", "assigned_to": alice.id},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400
        body = response.json()
        assert body["staff_member"] == "assignee"
        assert body["details"]["current_hours"] == 36.0
        assert body["details"]["projected_hours"] == 48.0

    def test_list_shifts_with_running_hours(self, client, make_user, make_shift, auth_headers):
        alice = make_user(full_name="Alice")
        make_shift(day(1), "afternoon", assigned_to=alice.id)
        make_shift(day(1), "morning", assigned_to=alice.id)
        make_shift(day(2), "morning", is_open=True)

        response = client.get(
            "/api/v1/shifts",
            params={"start_date": str(day(0)), "end_date": str(day(6))},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        by_type = {(s["date"], s["shift_type"]): s for s in response.json()}
        assert by_type[(str(day(1)), "morning")]["running_hours"] == 8.0
        assert by_type[(str(day(1)), "afternoon")]["running_hours"] == 12.0
        assert by_type[(str(day(1)), "morning")]["assignee_name"] == "Alice"
        assert by_type[(str(day(2)), "morning")]["running_hours"] is None

    def test_bulk_create(self, client, admin, auth_headers):
        response = client.post(
            "/api/v1/shifts/bulk",
            json={"shifts": [
                {"date": str(day(1)), "shift_type": "morning", "is_open": True},
                {"date": str(day(1)), "shift_type": "morning", "is_open": True},
            ]},
            headers=auth_headers(admin),
        )
        assert response.status_code == 201
        assert response.json()["created"] == 1
        assert response.json()["skipped"][0]["index"] == 1

    def test_update_missing_shift(self, client, admin, auth_headers):
        response = client.put("/api/v1/shifts/999", json={"notes": "x"}, headers=auth_headers(admin))
        assert response.status_code == 404

    def test_hours_check_is_always_200(self, client, make_user, make_shift, auth_headers):
        alice = make_user()
        for i in range(3):
            make_shift(day(i), "overnight", assigned_to=alice.id)

        response = client.get(
            "/api/v1/hours/check",
            params={"shift_date": str(day(3)), "shift_type": "overnight"},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        assert response.json()["would_exceed"] is True

    def test_hours_check_unknown_user_reads_as_zero(self, client, make_user, auth_headers):
        alice = make_user()
        response = client.get(
            "/api/v1/hours/check",
            params={"shift_date": str(day(3)), "shift_type": "morning", "user_id": 9999},
            headers=auth_headers(alice),
        )
        assert response.status_code == 200
        body = response.json()
        assert body["would_exceed"] is False
        assert body["is_exempt"] is False
        assert body["current_hours"] == 0.0
        assert body["projected_hours"] == 8.0

    def test_weekly_summary(self, client, make_user, make_shift, auth_headers, open_user):
        alice = make_user(full_name="Alice")
        make_shift(day(6), "overnight", assigned_to=alice.id)

        response = client.get(
            "/api/v1/hours/weekly",
            params={"anchor_date": str(day(3))},
            headers=auth_headers(alice),
        )
        body = response.json()
        assert body["period_start"] == str(day(0))
        assert body["period_end"] == str(day(6))
        assert [d["day"] for d in body["days"]] == [str(day(i)) for i in range(7)]
        assert body["days"][0]["name"] == "Sunday"
        assert body["days"][-1]["name"] == "Saturday"
        entry = next(e for e in body["staff"] if e["user_id"] == alice.id)
        assert entry["hours"] == 5.0
        assert entry["display"] == "5.0/40.0"
        assert all(e["user_id"] != open_user.id for e in body["staff"])


class TestRequestFlows:
    @patch("songbird.api.routes.shift_requests.deliver_notifications")
    def test_shift_request_lifecycle(self, mock_deliver, client, admin, make_user, make_shift, auth_headers):
        alice = make_user()
        shift = make_shift(day(2), "morning", is_open=True)

        created = client.post("/api/v1/shift-requests", json={"shift_id": shift.id}, headers=auth_headers(alice))
        assert created.status_code == 201
        request_id = created.json()["id"]
        assert mock_deliver.call_count == 1

        duplicate = client.post("/api/v1/shift-requests", json={"shift_id": shift.id}, headers=auth_headers(alice))
        assert duplicate.status_code == 400

        forbidden = client.post(f"/api/v1/shift-requests/{request_id}/approve", headers=auth_headers(alice))
        assert forbidden.status_code == 403

        approved = client.post(
            f"/api/v1/shift-requests/{request_id}/approve",
            json={"admin_note": "ok"},
            headers=auth_headers(admin),
        )
        assert approved.status_code == 200
        assert approved.json()["status"] == "approved"

        again = client.post(f"/api/v1/shift-requests/{request_id}/deny", headers=auth_headers(admin))
        assert again.status_code == 404

        mine = client.get("/api/v1/shift-requests", headers=auth_headers(alice))
        assert [r["id"] for r in mine.json()] == [request_id]

    def test_trade_lifecycle(self, client, admin, make_user, make_shift, auth_headers):
        alice = make_user()
        bob = make_user()
        alice_shift = make_shift(day(1), "morning", assigned_to=alice.id)
        bob_shift = make_shift(day(2), "morning", assigned_to=bob.id)

        proposed = client.post(
            "/api/v1/trade-requests",
            json={"requester_shift_id": alice_shift.id, "target_shift_id": bob_shift.id},
            headers=auth_headers(alice),
        )
        assert proposed.status_code == 201
        trade_id = proposed.json()["id"]
        assert proposed.json()["awaiting_admin"] is False

        early = client.post(f"/api/v1/trade-requests/{trade_id}/finalize", headers=auth_headers(admin))
        assert early.status_code == 400

        wrong_party = client.post(f"/api/v1/trade-requests/{trade_id}/approve", headers=auth_headers(alice))
        assert wrong_party.status_code == 403

        accepted = client.post(f"/api/v1/trade-requests/{trade_id}/approve", headers=auth_headers(bob))
        assert accepted.json()["target_approved"] is True
        assert accepted.json()["awaiting_admin"] is True

        final = client.post(f"/api/v1/trade-requests/{trade_id}/finalize", headers=auth_headers(admin))
        assert final.status_code == 200
        assert final.json()["status"] == "approved"
        assert final.json()["awaiting_admin"] is False

        listed = client.get("/api/v1/trade-requests", headers=auth_headers(bob))
        assert [t["id"] for t in listed.json()] == [trade_id]

    def test_trade_on_someone_elses_shift(self, client, make_user, make_shift, auth_headers):
        alice = make_user()
        bob = make_user()
        bob_shift = make_shift(day(2), "morning", assigned_to=bob.id)
        other = make_shift(day(3), "morning", assigned_to=bob.id)

        response = client.post(
            "/api/v1/trade-requests",
            json={"requester_shift_id": bob_shift.id, "target_shift_id": other.id},
            headers=auth_headers(alice),
        )
        assert response.status_code == 403

    def test_time_off_and_absence(self, client, admin, make_user, make_shift, auth_headers):
        alice = make_user()
        bob = make_user()
        shift = make_shift(day(2), "morning", assigned_to=alice.id)
        bob_shift = make_shift(day(3), "morning", assigned_to=bob.id)

        created = client.post(
            "/api/v1/time-off-requests",
            json={"request_type": "assigned_shift", "shift_id": shift.id, "reason": "family"},
            headers=auth_headers(alice),
        )
        assert created.status_code == 201

        approved = client.post(
            f"/api/v1/time-off-requests/{created.json()['id']}/approve",
            headers=auth_headers(admin),
        )
        assert approved.status_code == 200

        absence = client.post("/api/v1/absences", json={"shift_id": bob_shift.id}, headers=auth_headers(bob))
        assert absence.status_code == 201
        not_mine = client.post("/api/v1/absences", json={"shift_id": bob_shift.id}, headers=auth_headers(alice))
        assert not_mine.status_code == 403
        missing = client.post("/api/v1/absences", json={"shift_id": 999}, headers=auth_headers(alice))
        assert missing.status_code == 404

    def test_dashboard(self, client, admin, make_user, auth_headers):
        alice = make_user()
        response = client.get("/api/v1/dashboard", headers=auth_headers(alice))
        assert response.status_code == 200
        body = response.json()
        assert body["my_hours"] == 0.0
        assert body["my_hours_status"] == "ok"
        assert body["pending_trade_requests"] == 0

    def test_admin_role_from_user_record(self, client, make_user, auth_headers):
        boss = make_user(role=UserRole.ADMIN)
        response = client.get("/api/v1/shift-requests", headers=auth_headers(boss))
        assert response.status_code == 200
