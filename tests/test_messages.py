"""Tests for the contact form and the admin inbox."""

from studio.routes.site import CONTACT_THANK_YOU


async def _submit(client, name="Ann Client", email="ann@example.com", message="Kitchen remodel"):
    return await client.post("/api/messages", json={"name": name, "email": email, "message": message})


class TestContactForm:
    async def test_submission_is_stored_unread(self, client, auth_headers):
        response = await _submit(client)

        assert response.status_code == 201
        assert response.json() == {"success": True, "message": CONTACT_THANK_YOU}

        inbox = (await client.get("/api/cms/messages", headers=auth_headers)).json()
        assert inbox["unread_count"] == 1
        assert inbox["messages"][0]["email"] == "ann@example.com"
        assert inbox["messages"][0]["read"] is False

    async def test_invalid_email_rejected(self, client, auth_headers):
        response = await _submit(client, email="not-an-email")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

        inbox = (await client.get("/api/cms/messages", headers=auth_headers)).json()
        assert inbox["messages"] == []

    async def test_blank_message_rejected(self, client):
        response = await _submit(client, message="   ")

        assert response.status_code == 400


class TestInbox:
    async def test_requires_token(self, client):
        assert (await client.get("/api/cms/messages")).status_code == 401

    async def test_newest_first(self, client, auth_headers):
        for name in ("First", "Second", "Third"):
            await _submit(client, name=name)

        inbox = (await client.get("/api/cms/messages", headers=auth_headers)).json()

        assert [m["name"] for m in inbox["messages"]] == ["Third", "Second", "First"]
        assert inbox["unread_count"] == 3

    async def test_mark_read(self, client, auth_headers):
        await _submit(client, name="First")
        await _submit(client, name="Second")
        inbox = (await client.get("/api/cms/messages", headers=auth_headers)).json()
        message_id = inbox["messages"][0]["id"]

        response = await client.patch(f"/api/cms/messages/{message_id}/read", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["read"] is True
        inbox = (await client.get("/api/cms/messages", headers=auth_headers)).json()
        assert inbox["unread_count"] == 1

    async def test_delete(self, client, auth_headers):
        await _submit(client)
        message_id = (await client.get("/api/cms/messages", headers=auth_headers)).json()["messages"][0]["id"]

        response = await client.delete(f"/api/cms/messages/{message_id}", headers=auth_headers)

        assert response.json() == {"message": "Message deleted successfully", "message_id": message_id}
        assert (await client.delete(f"/api/cms/messages/{message_id}", headers=auth_headers)).status_code == 404
        assert (await client.patch(f"/api/cms/messages/{message_id}/read", headers=auth_headers)).status_code == 404
