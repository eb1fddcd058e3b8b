from datetime import timedelta

import pytest
from conftest import auth_headers, future_date

from brokerconnect.models import Booking, Notification


def create_booking(client, client_user, prop, visit_date=None, visit_time="14:30"):
    return client.post(
        "/api/bookings",
        json={
            "brokerId": prop.broker_id,
            "propertyId": prop.id,
            "visitDate": (visit_date or future_date()).isoformat(),
            "visitTime": visit_time,
            "clientName": client_user.name,
            "clientPhone": "0700123456",
            "message": "Is parking included?",
        },
        headers=auth_headers(client_user),
    )


def notifications_for(db, user):
    db.expire_all()
    return db.query(Notification).filter(Notification.user_id == user.id).order_by(Notification.created_at).all()


def test_booking_lifecycle_end_to_end(client, db, broker, client_user, listing):
    first_date = future_date(3)
    resp = create_booking(client, client_user, listing, visit_date=first_date)
    assert resp.status_code == 201
    booking = resp.json()["booking"]
    assert booking["status"] == "pending"
    assert booking["visitTime"] == "14:30:00"

    [request_note] = notifications_for(db, broker)
    assert request_note.type == "booking"
    assert request_note.title == "New Property Visit Request"
    assert request_note.text == (
        f"{client_user.name} wants to visit {listing.title} on {first_date.isoformat()} at 14:30"
    )
    assert request_note.related_id == booking["id"]

    resp = client.put(
        f"/api/bookings/{booking['id']}/status", json={"status": "confirmed"}, headers=auth_headers(broker)
    )
    assert resp.status_code == 200
    assert resp.json()["booking"]["status"] == "confirmed"
    [status_note] = notifications_for(db, client_user)
    assert status_note.text == f"Your visit request for {listing.title} has been confirmed"

    new_date = first_date + timedelta(days=4)
    resp = client.put(
        f"/api/bookings/{booking['id']}/reschedule",
        json={"visitDate": new_date.isoformat(), "visitTime": "09:15", "message": "Earlier slot"},
        headers=auth_headers(broker),
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Reschedule proposal sent to client"
    assert resp.json()["booking"]["status"] == "reschedule_pending"
    assert resp.json()["booking"]["visitDate"] == new_date.isoformat()
    assert notifications_for(db, client_user)[-1].title == "Visit Rescheduled - Confirmation Needed"

    resp = client.put(
        f"/api/bookings/{booking['id']}/reschedule-response",
        json={"action": "accept"},
        headers=auth_headers(client_user),
    )
    assert resp.status_code == 200
    assert resp.json()["booking"]["status"] == "confirmed"

    broker_notes = notifications_for(db, broker)
    assert len(broker_notes) == 2
    assert broker_notes[-1].title == "Reschedule Accepted"

    stored = db.get(Booking, booking["id"])
    assert stored.status == "confirmed"
    assert stored.visit_date == new_date


def test_counter_proposal_notifies_broker_with_new_time(client, db, broker, client_user, listing, make_booking):
    booking = make_booking(client_user, listing, status="reschedule_pending")
    counter_date = future_date(20)

    resp = client.put(
        f"/api/bookings/{booking.id}/reschedule-response",
        json={"action": "counter", "visitDate": counter_date.isoformat(), "visitTime": "17:45"},
        headers=auth_headers(client_user),
    )

    assert resp.status_code == 200
    assert resp.json()["message"] == "Counter-proposal sent to broker"
    assert resp.json()["booking"]["status"] == "counter_pending"
    [note] = notifications_for(db, broker)
    assert note.title == "New Time Proposed"
    assert note.text.endswith(f"{counter_date.isoformat()} at 17:45")

    # The broker accepts the counter-proposal through the status endpoint
    resp = client.put(
        f"/api/bookings/{booking.id}/status", json={"status": "confirmed"}, headers=auth_headers(broker)
    )
    assert resp.status_code == 200
    assert notifications_for(db, client_user)[-1].text == (
        f"Your proposed time for {listing.title} has been accepted by the broker"
    )


def test_counter_requires_new_time(client, client_user, listing, make_booking):
    booking = make_booking(client_user, listing, status="reschedule_pending")

    resp = client.put(
        f"/api/bookings/{booking.id}/reschedule-response",
        json={"action": "counter"},
        headers=auth_headers(client_user),
    )

    assert resp.status_code == 422


def test_pending_cannot_jump_to_counter_pending(client, db, client_user, listing, make_booking):
    booking = make_booking(client_user, listing)

    resp = client.put(
        f"/api/bookings/{booking.id}/reschedule-response",
        json={"action": "counter", "visitDate": future_date(5).isoformat(), "visitTime": "10:00"},
        headers=auth_headers(client_user),
    )

    assert resp.status_code == 409
    assert resp.json()["code"] == "invalid_transition"
    db.expire_all()
    assert db.get(Booking, booking.id).status == "pending"


class TestAuthorization:
    def test_missing_token(self, client, listing):
        resp = client.get("/api/bookings/client")
        assert resp.status_code == 401
        assert resp.json()["code"] == "auth_required"

    def test_invalid_token(self, client):
        resp = client.get("/api/bookings/client", headers={"Authorization": "Bearer not-a-token"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "auth_invalid"

    def test_other_broker_is_forbidden_not_not_found(self, client, make_user, client_user, listing, make_booking):
        booking = make_booking(client_user, listing)
        stranger = make_user("broker")

        resp = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "confirmed"}, headers=auth_headers(stranger)
        )
        assert resp.status_code == 403
        assert resp.json()["code"] == "forbidden"

        resp = client.put(
            "/api/bookings/does-not-exist/status", json={"status": "confirmed"}, headers=auth_headers(stranger)
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == "not_found"

    def test_client_cannot_use_status_endpoint(self, client, client_user, listing, make_booking):
        booking = make_booking(client_user, listing)

        resp = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": "cancelled"}, headers=auth_headers(client_user)
        )

        assert resp.status_code == 403

    def test_broker_cannot_create_booking(self, client, broker, listing):
        resp = create_booking(client, broker, listing)
        assert resp.status_code == 403


@pytest.mark.parametrize("terminal", ["cancelled", "completed"])
def test_terminal_bookings_reject_further_actions(client, broker, client_user, listing, make_booking, terminal):
    booking = make_booking(client_user, listing, status=terminal)

    for status in ("confirmed", "cancelled", "completed"):
        resp = client.put(
            f"/api/bookings/{booking.id}/status", json={"status": status}, headers=auth_headers(broker)
        )
        assert resp.status_code == 409

    resp = client.put(
        f"/api/bookings/{booking.id}/reschedule",
        json={"visitDate": future_date().isoformat(), "visitTime": "10:00"},
        headers=auth_headers(broker),
    )
    assert resp.status_code == 409


def test_status_endpoint_rejects_non_terminal_targets(client, broker, client_user, listing, make_booking):
    booking = make_booking(client_user, listing)

    resp = client.put(
        f"/api/bookings/{booking.id}/status", json={"status": "counter_pending"}, headers=auth_headers(broker)
    )

    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_failed"


def test_past_visit_date_is_rejected(client, client_user, listing):
    resp = create_booking(client, client_user, listing, visit_date=future_date(-1))
    assert resp.status_code == 422


def test_lists_are_scoped_and_ordered(client, broker, client_user, make_user, listing, make_booking):
    later = make_booking(client_user, listing, visit_date=future_date(9))
    earlier = make_booking(client_user, listing, visit_date=future_date(2))
    make_booking(make_user("client"), listing)

    resp = client.get("/api/bookings/client", headers=auth_headers(client_user))
    assert resp.status_code == 200
    rows = resp.json()
    assert [b["id"] for b in rows] == [later.id, earlier.id]
    assert rows[0]["propertyTitle"] == listing.title
    assert rows[0]["brokerName"] == broker.name

    resp = client.get("/api/bookings/broker", headers=auth_headers(broker))
    assert len(resp.json()) == 3
    assert "confirm" in resp.json()[0]["allowedActions"]


def test_booking_detail_visible_to_parties_only(client, broker, client_user, make_user, listing, make_booking):
    booking = make_booking(client_user, listing)

    assert client.get(f"/api/bookings/{booking.id}", headers=auth_headers(broker)).status_code == 200
    assert client.get(f"/api/bookings/{booking.id}", headers=auth_headers(client_user)).status_code == 200
    assert client.get(f"/api/bookings/{booking.id}", headers=auth_headers(make_user("client"))).status_code == 403


def test_reconfirming_a_confirmed_booking_notifies_client_again(
    client, db, broker, client_user, listing, make_booking
):
    booking = make_booking(client_user, listing, status="confirmed")

    resp = client.put(
        f"/api/bookings/{booking.id}/status", json={"status": "confirmed"}, headers=auth_headers(broker)
    )

    assert resp.status_code == 200
    assert resp.json()["booking"]["status"] == "confirmed"
    [note] = notifications_for(db, client_user)
    assert note.text == f"Your visit request for {listing.title} has been confirmed"
