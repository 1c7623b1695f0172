"""
End-to-end marketplace flow through the public API only.
"""

import pytest
from datetime import datetime, timezone, timedelta
from httpx import AsyncClient

from tests.conftest import bearer


async def _signup_and_login(client: AsyncClient, email: str, role: str) -> dict:
    signup = await client.post("/auth/signup", json={"email": email, "password": "hunter22", "role": role})
    assert signup.status_code == 201
    login = await client.post("/auth/login", json={"email": email, "password": "hunter22"})
    assert login.status_code == 200
    return {"Authorization": f"Bearer {login.json()['token']}"}


@pytest.mark.asyncio
async def test_host_publishes_and_user_books(client: AsyncClient, admin_user):
    host = await _signup_and_login(client, "a@example.com", "host")
    guest = await _signup_and_login(client, "b@example.com", "user")

    created = await client.post(
        "/experiences",
        json={
            "title": "Pottery Workshop",
            "location": "Kyoto",
            "price": 8000,
            "start_time": (datetime.now(timezone.utc) + timedelta(days=14)).isoformat(),
        },
        headers=host,
    )
    assert created.status_code == 201
    experience = created.json()
    assert experience["status"] == "draft"

    published = await client.patch(f"/experiences/{experience['id']}/publish", headers=host)
    assert published.status_code == 200

    listing = (await client.get("/experiences", params={"location": "kyoto"})).json()
    assert [e["id"] for e in listing["experiences"]] == [experience["id"]]

    booked = await client.post(f"/experiences/{experience['id']}/book", json={"seats": 2}, headers=guest)
    assert booked.status_code == 201
    assert booked.json()["seats"] == 2

    again = await client.post(f"/experiences/{experience['id']}/book", json={"seats": 2}, headers=guest)
    assert again.status_code == 400
    assert again.json()["error"]["code"] == "DUPLICATE_BOOKING"

    anonymous = await client.post(
        "/experiences",
        json={"title": "Nope", "location": "Kyoto", "price": 0,
              "start_time": datetime.now(timezone.utc).isoformat()},
    )
    assert anonymous.status_code == 401

    user_block = await client.patch(f"/experiences/{experience['id']}/block", headers=guest)
    assert user_block.status_code == 403

    admin_block = await client.patch(f"/experiences/{experience['id']}/block", headers=bearer(admin_user))
    assert admin_block.status_code == 200
    listing = (await client.get("/experiences")).json()
    assert listing["total"] == 0
