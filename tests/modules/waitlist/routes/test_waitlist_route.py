import asyncio
from unittest.mock import AsyncMock, patch

import pytest
from sqlmodel import select

from app.api.db.database import Datastore, get_datastore
from app.api.modules.waitlist.models.waitlist_model import Waitlist
from app.api.modules.waitlist.service.waitlist_repository import WaitlistCRUD
from main import app


async def _rows(datastore):
    async with datastore.session() as db:
        result = await db.execute(select(Waitlist))
        return list(result.scalars().all())


@pytest.mark.asyncio
async def test_signup_success(client, datastore):
    response = await client.post("/api/signup", json={"email": "user@example.com"})

    assert response.status_code == 200
    assert response.json() == {"message": "Successfully joined the waitlist!"}

    rows = await _rows(datastore)
    assert len(rows) == 1
    assert rows[0].email == "user@example.com"
    assert rows[0].created_at is not None


@pytest.mark.asyncio
async def test_signup_stores_lowercased_email(client, datastore):
    response = await client.post("/api/signup", json={"email": "Jane.Doe@Example.COM"})

    assert response.status_code == 200
    rows = await _rows(datastore)
    assert [row.email for row in rows] == ["jane.doe@example.com"]


@pytest.mark.asyncio
async def test_signup_duplicate_in_other_casing_conflicts(client, datastore):
    first = await client.post("/api/signup", json={"email": "user@example.com"})
    second = await client.post("/api/signup", json={"email": "USER@example.com"})

    assert first.status_code == 200
    assert second.status_code == 409
    assert second.json() == {"error": "Email already registered"}

    async with datastore.session() as db:
        assert await WaitlistCRUD.count_by_email(db, "user@example.com") == 1


@pytest.mark.asyncio
async def test_signup_invalid_email(client, datastore):
    response = await client.post("/api/signup", json={"email": "not-an-email"})

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email address"}
    assert await _rows(datastore) == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"email": ""},
        {"email": None},
        {"email": 42},
        {"email": ["user@example.com"]},
        {"email": {"address": "user@example.com"}},
        {"email": " user@example.com"},
        {"email": "user@example.com "},
        {"email": "user@example.com\n"},
        {"email": "us er@example.com"},
        {"email": "user@example"},
        {"email": "user@@example.com"},
        {"email": "@example.com"},
        {"email": "user@.com"},
    ],
)
async def test_signup_rejects_invalid_payloads(client, datastore, payload):
    with patch.object(WaitlistCRUD, "create", new_callable=AsyncMock) as mock_create:
        response = await client.post("/api/signup", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid email address"}
    mock_create.assert_not_awaited()


@pytest.mark.asyncio
async def test_signup_malformed_body_is_internal_error(client, datastore):
    response = await client.post(
        "/api/signup",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert await _rows(datastore) == []


@pytest.mark.asyncio
async def test_signup_non_object_body_is_internal_error(client):
    response = await client.post("/api/signup", json=["user@example.com"])

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_signup_unconfigured_datastore_fails_generically(client):
    app.dependency_overrides[get_datastore] = lambda: Datastore(engine=None)

    response = await client.post("/api/signup", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to join waitlist"}


@pytest.mark.asyncio
async def test_signup_does_not_echo_datastore_cause(client):
    from app.api.core.exceptions import PersistenceError

    with patch.object(
        WaitlistCRUD,
        "create",
        new_callable=AsyncMock,
        side_effect=PersistenceError("password authentication failed for user 'waitlist'"),
    ):
        response = await client.post("/api/signup", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to join waitlist"}
    assert "password" not in response.text


@pytest.mark.asyncio
async def test_signup_unexpected_error_is_internal_error(client):
    with patch.object(
        WaitlistCRUD, "create", new_callable=AsyncMock, side_effect=RuntimeError("boom")
    ):
        response = await client.post("/api/signup", json={"email": "user@example.com"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


@pytest.mark.asyncio
async def test_concurrent_signups_for_same_email(client, datastore):
    responses = await asyncio.gather(
        client.post("/api/signup", json={"email": "race@example.com"}),
        client.post("/api/signup", json={"email": "RACE@example.com"}),
    )

    assert sorted(r.status_code for r in responses) == [200, 409]

    async with datastore.session() as db:
        assert await WaitlistCRUD.count_by_email(db, "race@example.com") == 1


@pytest.mark.asyncio
async def test_signup_accepts_long_valid_email(client, datastore):
    email = "a" * 250 + "@example.com"

    response = await client.post("/api/signup", json={"email": email})

    assert response.status_code == 200
    rows = await _rows(datastore)
    assert [row.email for row in rows] == [email]
