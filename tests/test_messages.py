"""Direct messages between accounts."""

import pytest

from tests.conftest import login_user, send


@pytest.fixture
def pair(make_client, seed_user):
    """Two logged-in candidates: (client, row) for alice and bob."""
    alice = seed_user(email="alice@example.com")
    bob = seed_user(email="bob@example.com", firstname="Bob")
    alice_client = make_client()
    bob_client = make_client()
    login_user(alice_client, alice["email"])
    login_user(bob_client, bob["email"])
    return (alice_client, alice), (bob_client, bob)


class TestSendMessage:
    def test_send(self, pair):
        (alice_client, alice), (_, bob) = pair
        response = send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": " Hi! "})

        assert response.status_code == 201
        body = response.json()
        assert body["content"] == "Hi!"
        assert body["id_sender"] == alice["id_user"]
        assert body["is_read"] is False

    def test_cannot_message_yourself(self, pair):
        (alice_client, alice), _ = pair
        response = send(alice_client, "POST", "/messages", json={"id_receiver": alice["id_user"], "content": "me"})
        assert response.status_code == 400

    def test_unknown_recipient(self, pair):
        (alice_client, _), _ = pair
        response = send(alice_client, "POST", "/messages", json={"id_receiver": 999, "content": "hello"})
        assert response.status_code == 404

    def test_empty_and_oversized_content(self, pair):
        (alice_client, _), (_, bob) = pair
        empty = send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "   "})
        huge = send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "x" * 5001})
        assert empty.status_code == 422
        assert huge.status_code == 422


class TestConversations:
    """Conversation list, thread and read receipts."""

    def test_conversation_summary(self, pair):
        (alice_client, alice), (bob_client, bob) = pair
        send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "first"})
        send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "second"})

        conversations = bob_client.get("/messages/conversations").json()

        assert len(conversations) == 1
        assert conversations[0]["correspondent_id"] == alice["id_user"]
        assert conversations[0]["correspondent"]["firstname"] == "Alice"
        assert conversations[0]["unread_count"] == 2
        assert conversations[0]["last_message"]["content"] == "second"

    def test_thread_is_chronological(self, pair):
        (alice_client, alice), (bob_client, bob) = pair
        send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "ping"})
        send(bob_client, "POST", "/messages", json={"id_receiver": alice["id_user"], "content": "pong"})

        thread = alice_client.get(f"/messages/with/{bob['id_user']}").json()

        assert [m["content"] for m in thread] == ["ping", "pong"]

    def test_only_recipient_marks_read(self, pair):
        (alice_client, _), (bob_client, bob) = pair
        message = send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "hey"}).json()

        assert send(alice_client, "PUT", f"/messages/{message['id_message']}/read").status_code == 403
        response = send(bob_client, "PUT", f"/messages/{message['id_message']}/read")
        assert response.status_code == 200
        assert response.json()["is_read"] is True

    def test_only_sender_deletes(self, pair, fake_db):
        (alice_client, _), (bob_client, bob) = pair
        message = send(alice_client, "POST", "/messages", json={"id_receiver": bob["id_user"], "content": "oops"}).json()

        assert send(bob_client, "DELETE", f"/messages/{message['id_message']}").status_code == 403
        assert send(alice_client, "DELETE", f"/messages/{message['id_message']}").status_code == 200
        assert fake_db.rows("message") == []

    def test_companies_have_no_inbox(self, company_client):
        test_client, _ = company_client
        assert test_client.get("/messages/conversations").status_code == 403
