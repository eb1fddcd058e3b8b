import pytest
from conftest import auth_headers

from brokerconnect.models import BrokerProfile, Notification, Review


def review_payload(booking, **overrides):
    payload = {
        "bookingId": booking.id,
        "brokerId": booking.broker_id,
        "propertyId": booking.property_id,
        "brokerRating": 4,
        "brokerComment": "On time and helpful",
        "propertyRating": 3,
        "propertyComment": "Smaller than the photos",
        "propertyTaken": False,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def completed_booking(make_booking, client_user, listing):
    return make_booking(client_user, listing, status="completed")


def test_submit_review_updates_broker_rating_and_notifies(client, db, broker, client_user, completed_booking):
    resp = client.post("/api/reviews", json=review_payload(completed_booking), headers=auth_headers(client_user))

    assert resp.status_code == 201
    assert resp.json()["review"]["brokerRating"] == 4

    db.expire_all()
    profile = db.get(BrokerProfile, broker.id)
    assert profile.rating == 4.0
    assert profile.total_reviews == 1

    [note] = db.query(Notification).filter(Notification.user_id == broker.id).all()
    assert note.title == "New Review"
    assert note.related_id == completed_booking.id


def test_second_review_is_rejected_and_first_kept(client, db, client_user, completed_booking):
    first = client.post("/api/reviews", json=review_payload(completed_booking), headers=auth_headers(client_user))
    assert first.status_code == 201

    second = client.post(
        "/api/reviews",
        json=review_payload(completed_booking, brokerRating=1, brokerComment="Changed my mind"),
        headers=auth_headers(client_user),
    )

    assert second.status_code == 409
    assert second.json()["code"] == "conflict"
    db.expire_all()
    [stored] = db.query(Review).filter(Review.booking_id == completed_booking.id).all()
    assert stored.broker_rating == 4
    assert stored.broker_comment == "On time and helpful"


def test_only_completed_bookings_can_be_reviewed(client, client_user, listing, make_booking):
    booking = make_booking(client_user, listing, status="confirmed")

    resp = client.post("/api/reviews", json=review_payload(booking), headers=auth_headers(client_user))

    assert resp.status_code == 409
    assert resp.json()["code"] == "invalid_transition"


def test_only_the_booking_client_can_review(client, make_user, completed_booking):
    resp = client.post(
        "/api/reviews", json=review_payload(completed_booking), headers=auth_headers(make_user("client"))
    )
    assert resp.status_code == 403


def test_unknown_booking(client, client_user, completed_booking):
    resp = client.post(
        "/api/reviews",
        json=review_payload(completed_booking, bookingId="missing"),
        headers=auth_headers(client_user),
    )
    assert resp.status_code == 404


def test_mismatched_property_is_a_validation_failure(client, client_user, broker, make_property, completed_booking):
    other = make_property(broker, title="Elsewhere")

    resp = client.post(
        "/api/reviews",
        json=review_payload(completed_booking, propertyId=other.id),
        headers=auth_headers(client_user),
    )

    assert resp.status_code == 422
    assert resp.json()["code"] == "validation_failed"


@pytest.mark.parametrize("rating", [0, 6])
def test_ratings_must_be_one_to_five(client, client_user, completed_booking, rating):
    resp = client.post(
        "/api/reviews",
        json=review_payload(completed_booking, brokerRating=rating),
        headers=auth_headers(client_user),
    )
    assert resp.status_code == 422


def test_taken_property_is_hidden_only_from_that_client(
    client, client_user, make_user, listing, make_property, broker, completed_booking
):
    other_listing = make_property(broker, title="Ntinda Bungalow")
    resp = client.post(
        "/api/reviews",
        json=review_payload(completed_booking, propertyTaken=True),
        headers=auth_headers(client_user),
    )
    assert resp.status_code == 201

    mine = client.get("/api/properties", headers=auth_headers(client_user)).json()
    assert [p["id"] for p in mine] == [other_listing.id]

    theirs = client.get("/api/properties", headers=auth_headers(make_user("client"))).json()
    assert {p["id"] for p in theirs} == {listing.id, other_listing.id}

    anonymous = client.get("/api/properties").json()
    assert len(anonymous) == 2

    taken = client.get("/api/properties/client/taken", headers=auth_headers(client_user)).json()
    assert [p["id"] for p in taken] == [listing.id]
    assert taken[0]["review"]["rating"] == 3


def test_booking_review_status(client, broker, client_user, make_user, completed_booking):
    url = f"/api/reviews/booking/{completed_booking.id}"
    assert client.get(url, headers=auth_headers(client_user)).json() == {"hasReview": False, "review": None}

    client.post("/api/reviews", json=review_payload(completed_booking), headers=auth_headers(client_user))

    resp = client.get(url, headers=auth_headers(broker))
    assert resp.json()["hasReview"] is True
    assert resp.json()["review"]["propertyRating"] == 3
    assert client.get(url, headers=auth_headers(make_user("client"))).status_code == 403
