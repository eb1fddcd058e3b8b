from conftest import auth_headers

from brokerconnect.models import Notification


def send(client, sender, receiver, text, prop=None):
    payload = {"receiverId": receiver.id, "message": text}
    if prop is not None:
        payload["propertyId"] = prop.id
    return client.post("/api/messages", json=payload, headers=auth_headers(sender))


def test_send_message_notifies_receiver(client, db, broker, client_user, listing):
    resp = send(client, client_user, broker, "Is it still available?", listing)

    assert resp.status_code == 201
    [note] = db.query(Notification).filter(Notification.user_id == broker.id).all()
    assert note.type == "message"
    assert note.title == "New Message"
    assert note.text == f"{client_user.name} sent you a message about {listing.title}"
    assert note.related_id == resp.json()["messageId"]


def test_send_message_validation(client, client_user, broker, listing):
    assert send(client, client_user, client_user, "Note to self").status_code == 422

    resp = client.post(
        "/api/messages", json={"receiverId": "nobody", "message": "hello"}, headers=auth_headers(client_user)
    )
    assert resp.status_code == 404

    resp = client.post(
        "/api/messages",
        json={"receiverId": broker.id, "propertyId": "missing", "message": "hello"},
        headers=auth_headers(client_user),
    )
    assert resp.status_code == 404


def test_thread_is_oldest_first_and_marks_incoming_read(client, broker, client_user, listing):
    send(client, client_user, broker, "Hello", listing)
    send(client, broker, client_user, "Hi, how can I help?", listing)
    send(client, client_user, broker, "Can I visit on Friday?", listing)

    assert client.get("/api/messages/unread-count", headers=auth_headers(broker)).json() == {"unreadCount": 2}

    resp = client.get(
        f"/api/messages/{client_user.id}", params={"propertyId": listing.id}, headers=auth_headers(broker)
    )

    assert resp.status_code == 200
    assert [m["message"] for m in resp.json()] == ["Hello", "Hi, how can I help?", "Can I visit on Friday?"]
    assert resp.json()[0]["senderName"] == client_user.name
    assert client.get("/api/messages/unread-count", headers=auth_headers(broker)).json() == {"unreadCount": 0}
    # Reading the thread does not touch the other side's unread messages
    assert client.get("/api/messages/unread-count", headers=auth_headers(client_user)).json() == {"unreadCount": 1}


def test_conversations_group_by_user_and_property(client, broker, client_user, make_user, listing, make_property):
    other_listing = make_property(broker, title="Bugolobi Flat")
    other_client = make_user("client", name="Olive Other")

    send(client, client_user, broker, "About Kololo", listing)
    send(client, client_user, broker, "About Bugolobi", other_listing)
    send(client, other_client, broker, "Hello broker", listing)
    send(client, broker, client_user, "Kololo reply", listing)

    rows = client.get("/api/messages/conversations", headers=auth_headers(broker)).json()

    assert [(r["otherUserName"], r["propertyTitle"], r["lastMessage"]) for r in rows] == [
        (client_user.name, listing.title, "Kololo reply"),
        ("Olive Other", listing.title, "Hello broker"),
        (client_user.name, "Bugolobi Flat", "About Bugolobi"),
    ]


def test_property_chats_for_listing_broker(client, broker, client_user, make_user, listing):
    other_client = make_user("client", name="Olive Other")
    send(client, client_user, broker, "First", listing)
    send(client, client_user, broker, "Second", listing)
    send(client, other_client, broker, "Interested", listing)

    resp = client.get(f"/api/messages/property/{listing.id}/chats", headers=auth_headers(broker))

    assert resp.status_code == 200
    chats = {c["clientName"]: c for c in resp.json()}
    assert chats[client_user.name]["lastMessage"] == "Second"
    assert chats[client_user.name]["unreadCount"] == 2
    assert chats["Olive Other"]["unreadCount"] == 1

    assert (
        client.get(f"/api/messages/property/{listing.id}/chats", headers=auth_headers(client_user)).status_code
        == 403
    )
