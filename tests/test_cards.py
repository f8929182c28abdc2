"""
Card (tag UID -> URL) CRUD.
"""
from nfclink.models import AuditLog, Card


async def write_card(client, user, uid="T1", link="https://x"):
    response = await client.post("/cards", json={"uid": uid, "link": link, "user_id": user.id})
    assert response.status_code == 201
    return response.json()


class TestCards:

    async def test_write_list_delete_round_trip(self, client, user):
        created = await write_card(client, user)
        assert len(created) == 1
        card = created[0]
        assert card["uid"] == "T1"
        assert card["link"] == "https://x"
        assert card["user_id"] == user.id

        listing = await client.get("/cards", params={"user_id": user.id})
        assert [(c["uid"], c["link"]) for c in listing.json()] == [("T1", "https://x")]

        response = await client.request("DELETE", "/cards", json={"id": card["id"]})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        listing = await client.get("/cards", params={"user_id": user.id})
        assert listing.json() == []

    async def test_listing_embeds_owner(self, client, user):
        await write_card(client, user)

        card = (await client.get("/cards")).json()[0]

        assert card["user"] == {"name": user.name, "email": user.email}

    async def test_listing_filters_by_owner(self, client, user, create_user):
        other = await create_user(email="other@example.com")
        await write_card(client, user, uid="MINE")
        await write_card(client, other, uid="THEIRS")

        everything = await client.get("/cards")
        mine = await client.get("/cards", params={"user_id": user.id})

        assert {c["uid"] for c in everything.json()} == {"MINE", "THEIRS"}
        assert [c["uid"] for c in mine.json()] == ["MINE"]

    async def test_same_uid_may_be_written_twice(self, client, user, fetch):
        await write_card(client, user, link="https://a")
        await write_card(client, user, link="https://b")

        assert len(await fetch(Card, Card.uid == "T1")) == 2

    async def test_unknown_owner(self, client):
        response = await client.post("/cards", json={"uid": "T1", "link": "https://x", "user_id": 42})
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    async def test_delete_unknown_card(self, client):
        response = await client.request("DELETE", "/cards", json={"id": 12345})
        assert response.status_code == 404

    async def test_writes_are_audited(self, client, user, fetch):
        card = (await write_card(client, user))[0]
        await client.request("DELETE", "/cards", json={"id": card["id"]})

        actions = [entry.action for entry in await fetch(AuditLog)]
        assert actions == ["card_created", "card_deleted"]

    async def test_listing_returns_every_card(self, client, user, db):
        db.add_all([Card(uid=f"T{i}", link="https://x", user_id=user.id) for i in range(105)])
        await db.commit()

        response = await client.get("/cards", params={"user_id": user.id})

        assert response.status_code == 200
        assert len(response.json()) == 105
        assert response.json()[0]["uid"] == "T104"
