"""
Store failures: audit writes that fail, and errors raised by the store itself.
"""
from sqlalchemy import text

from nfclink.models import Card
from tests.conftest import PASSWORD


async def drop_table(engine, name):
    async with engine.begin() as conn:
        await conn.execute(text(f"DROP TABLE {name}"))


class TestAuditFailure:

    async def test_card_write_survives_broken_audit_table(self, client, engine, user, fetch):
        await drop_table(engine, "audit_logs")

        response = await client.post("/cards", json={"uid": "T1", "link": "https://x", "user_id": user.id})

        assert response.status_code == 201
        assert response.json()[0]["uid"] == "T1"
        cards = await fetch(Card)
        assert [(c.uid, c.user_id) for c in cards] == [("T1", user.id)]

    async def test_login_survives_broken_audit_table(self, client, engine, user):
        await drop_table(engine, "audit_logs")

        response = await client.post("/login", json={"email": user.email, "password": PASSWORD})

        assert response.status_code == 200
        assert response.json()["success"] is True


class TestStoreErrors:

    async def test_store_error_is_a_generic_500(self, client, engine):
        await drop_table(engine, "cards")

        response = await client.get("/cards")

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}
        assert "cards" not in response.text
