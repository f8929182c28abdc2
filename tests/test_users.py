"""
Registration and user listing.
"""
from nfclink.models import User
from nfclink.security import hashing


class TestUsers:

    async def test_register(self, client, fetch):
        response = await client.post(
            "/users", json={"name": "Ada", "email": "ada@example.com", "password": "pw-123456"}
        )

        assert response.status_code == 201
        data = response.json()
        assert len(data) == 1
        assert data[0]["name"] == "Ada"
        assert data[0]["email"] == "ada@example.com"
        assert set(data[0]) == {"id", "name", "email"}

        stored = (await fetch(User))[0]
        assert stored.password_hash != "pw-123456"
        assert hashing.verify_password("pw-123456", stored.password_hash)

    async def test_registered_user_can_log_in(self, client):
        await client.post("/users", json={"name": "Ada", "email": "ada@example.com", "password": "pw-123456"})

        response = await client.post("/login", json={"email": "ada@example.com", "password": "pw-123456"})

        assert response.json()["success"] is True

    async def test_duplicate_email(self, client, user):
        response = await client.post("/users", json={"name": "Again", "email": user.email, "password": "x"})
        assert response.status_code == 400

    async def test_list(self, client, user):
        response = await client.get("/users")

        assert response.status_code == 200
        data = response.json()
        assert [u["email"] for u in data] == [user.email]
        assert "created_at" in data[0]
        assert "password_hash" not in data[0]
