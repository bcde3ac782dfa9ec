"""
Tests for the quote HTTP endpoints.

Covers:
- Draft, cite, undo, remove round trips
- 404 for unknown ids, 400 for malformed ids
- Paginated listing with one-time tokens
- Reset
"""

from unittest.mock import AsyncMock
from uuid import UUID, uuid4

import pytest

from quote_service.exceptions import (
    DatabaseException,
    DuplicateQuoteException,
    InvalidQuoteException,
)

PREFIX = "/19"


async def draft_quote(client, author: str, quote: str) -> dict:
    response = await client.post(f"{PREFIX}/draft", json={"author": author, "quote": quote})
    assert response.status_code == 201
    return response.json()


class TestDraft:
    """Test POST /draft."""

    @pytest.mark.asyncio
    async def test_draft_returns_created_quote(self, client, sample_draft):
        response = await client.post(f"{PREFIX}/draft", json=sample_draft)

        assert response.status_code == 201
        data = response.json()
        assert UUID(data["id"])
        assert data["author"] == "Santa"
        assert data["quote"] == "Ho ho ho!"
        assert data["version"] == 1
        assert data["created_at"]

    @pytest.mark.asyncio
    async def test_draft_missing_field(self, client):
        response = await client.post(f"{PREFIX}/draft", json={"author": "Santa"})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_draft_response_has_request_id(self, client, sample_draft):
        response = await client.post(
            f"{PREFIX}/draft", json=sample_draft, headers={"X-Request-ID": "req-42"}
        )

        assert response.headers["X-Request-ID"] == "req-42"


class TestCite:
    """Test GET /cite/{id}."""

    @pytest.mark.asyncio
    async def test_cite_existing_quote(self, client, sample_draft):
        created = await draft_quote(client, **sample_draft)

        response = await client.get(f"{PREFIX}/cite/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_cite_unknown_quote(self, client):
        response = await client.get(f"{PREFIX}/cite/{uuid4()}")

        assert response.status_code == 404
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_cite_malformed_id(self, client):
        response = await client.get(f"{PREFIX}/cite/not-a-uuid")

        assert response.status_code == 400


class TestRemove:
    """Test DELETE /remove/{id}."""

    @pytest.mark.asyncio
    async def test_remove_returns_deleted_quote(self, client, sample_draft):
        created = await draft_quote(client, **sample_draft)

        response = await client.delete(f"{PREFIX}/remove/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

        response = await client.get(f"{PREFIX}/cite/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_remove_unknown_quote(self, client):
        response = await client.delete(f"{PREFIX}/remove/{uuid4()}")

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_remove_malformed_id(self, client):
        response = await client.delete(f"{PREFIX}/remove/not-a-uuid")

        assert response.status_code == 400
        assert response.content == b""


class TestUndo:
    """Test PUT /undo/{id}."""

    @pytest.mark.asyncio
    async def test_undo_overwrites_and_bumps_version(self, client, sample_draft):
        created = await draft_quote(client, **sample_draft)

        response = await client.put(
            f"{PREFIX}/undo/{created['id']}",
            json={"author": "Grinch", "quote": "Bah humbug"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == created["id"]
        assert data["author"] == "Grinch"
        assert data["quote"] == "Bah humbug"
        assert data["version"] == 2
        assert data["created_at"] == created["created_at"]

    @pytest.mark.asyncio
    async def test_undo_twice(self, client, sample_draft):
        created = await draft_quote(client, **sample_draft)
        body = {"author": "Grinch", "quote": "Bah humbug"}

        await client.put(f"{PREFIX}/undo/{created['id']}", json=body)
        response = await client.put(f"{PREFIX}/undo/{created['id']}", json=body)

        assert response.json()["version"] == 3

    @pytest.mark.asyncio
    async def test_undo_unknown_quote(self, client, sample_draft):
        response = await client.put(f"{PREFIX}/undo/{uuid4()}", json=sample_draft)

        assert response.status_code == 404


    @pytest.mark.asyncio
    async def test_undo_malformed_id(self, client, sample_draft):
        response = await client.put(f"{PREFIX}/undo/not-a-uuid", json=sample_draft)

        assert response.status_code == 400
        assert response.content == b""


class TestList:
    """Test GET /list pagination."""

    @pytest.mark.asyncio
    async def test_list_empty(self, client):
        response = await client.get(f"{PREFIX}/list")

        assert response.status_code == 200
        assert response.json() == {"quotes": [], "page": 1, "next_token": None}

    @pytest.mark.asyncio
    async def test_list_walks_pages_in_creation_order(self, client):
        created = [await draft_quote(client, "Elf", f"quote {i}") for i in range(7)]

        first = (await client.get(f"{PREFIX}/list")).json()
        assert first["page"] == 1
        assert [q["id"] for q in first["quotes"]] == [q["id"] for q in created[:3]]
        assert len(first["next_token"]) == 16

        second = (await client.get(f"{PREFIX}/list", params={"token": first["next_token"]})).json()
        assert second["page"] == 2
        assert [q["id"] for q in second["quotes"]] == [q["id"] for q in created[3:6]]

        third = (await client.get(f"{PREFIX}/list", params={"token": second["next_token"]})).json()
        assert third["page"] == 3
        assert [q["id"] for q in third["quotes"]] == [created[6]["id"]]
        assert third["next_token"] is None

    @pytest.mark.asyncio
    async def test_list_exactly_one_page(self, client):
        for i in range(3):
            await draft_quote(client, "Elf", f"quote {i}")

        data = (await client.get(f"{PREFIX}/list")).json()

        assert len(data["quotes"]) == 3
        assert data["next_token"] is None

    @pytest.mark.asyncio
    async def test_list_token_is_single_use(self, client):
        for i in range(4):
            await draft_quote(client, "Elf", f"quote {i}")
        token = (await client.get(f"{PREFIX}/list")).json()["next_token"]

        first_use = await client.get(f"{PREFIX}/list", params={"token": token})
        second_use = await client.get(f"{PREFIX}/list", params={"token": token})

        assert first_use.status_code == 200
        assert second_use.status_code == 400

    @pytest.mark.asyncio
    async def test_list_expired_token(self, client, clock):
        for i in range(4):
            await draft_quote(client, "Elf", f"quote {i}")
        token = (await client.get(f"{PREFIX}/list")).json()["next_token"]

        clock.advance(61)
        response = await client.get(f"{PREFIX}/list", params={"token": token})

        assert response.status_code == 400
        assert response.content == b""

    @pytest.mark.asyncio
    async def test_list_unknown_token(self, client):
        response = await client.get(f"{PREFIX}/list", params={"token": "abcdefghijklmnop"})

        assert response.status_code == 400
        assert response.content == b""


class TestReset:
    """Test POST /reset."""

    @pytest.mark.asyncio
    async def test_reset_removes_quotes_and_tokens(self, client):
        for i in range(4):
            await draft_quote(client, "Elf", f"quote {i}")
        token = (await client.get(f"{PREFIX}/list")).json()["next_token"]

        response = await client.post(f"{PREFIX}/reset")

        assert response.status_code == 200
        assert (await client.get(f"{PREFIX}/list")).json()["quotes"] == []
        assert (await client.get(f"{PREFIX}/list", params={"token": token})).status_code == 400

    @pytest.mark.asyncio
    async def test_reset_failure(self, client, quote_repo):
        quote_repo.reset = AsyncMock(side_effect=DatabaseException("reset", "connection lost"))

        response = await client.post(f"{PREFIX}/reset")

        assert response.status_code == 500


class TestErrorMapping:
    """Test domain exception to HTTP status mapping."""

    @pytest.mark.asyncio
    async def test_database_error_is_500(self, client, quote_repo):
        quote_repo.get = AsyncMock(side_effect=DatabaseException("get", "timeout"))

        response = await client.get(f"{PREFIX}/cite/{uuid4()}")

        assert response.status_code == 500
        assert "timeout" in response.json()["detail"]

    @pytest.mark.asyncio
    async def test_duplicate_quote_is_409(self, client, quote_repo, sample_draft):
        quote_repo.create = AsyncMock(side_effect=DuplicateQuoteException("quotes_pkey"))

        response = await client.post(f"{PREFIX}/draft", json=sample_draft)

        assert response.status_code == 409
        assert response.json()["error_code"] == "duplicate_quote"

    @pytest.mark.asyncio
    async def test_invalid_quote_is_422(self, client, quote_repo, sample_draft):
        quote_repo.create = AsyncMock(
            side_effect=InvalidQuoteException("author", None, "must not be null")
        )

        response = await client.post(f"{PREFIX}/draft", json=sample_draft)

        assert response.status_code == 422
        assert response.json()["error_code"] == "invalid_quote"

    @pytest.mark.asyncio
    async def test_unhandled_error_keeps_request_id(self, client, quote_repo):
        quote_repo.get = AsyncMock(side_effect=RuntimeError("boom"))

        response = await client.get(
            f"{PREFIX}/cite/{uuid4()}", headers={"X-Request-ID": "req-500"}
        )

        assert response.status_code == 500
        assert response.json() == {"detail": "An unexpected error occurred"}
        assert response.headers["X-Request-ID"] == "req-500"

    @pytest.mark.asyncio
    async def test_error_bodies_documented(self, client):
        schema = (await client.get("/openapi.json")).json()

        draft_responses = schema["paths"][f"{PREFIX}/draft"]["post"]["responses"]
        ref = draft_responses["409"]["content"]["application/json"]["schema"]["$ref"]
        assert ref.endswith("/ErrorResponse")
