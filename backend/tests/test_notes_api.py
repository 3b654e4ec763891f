"""
Notes API Backend - HTTP Endpoint Tests
=======================================

What:  End-to-end tests of the /api/v1/notes routes, error mapping, docs
       and health endpoints.
How:   HTTPX AsyncClient against an app built on a migrated SQLite file.
"""

import logging
import uuid

import pytest

from conftest import parse_timestamp
from notesapi.dependencies import get_note_repository
from notesapi.exceptions import StorageError

NOTES_URL = "/api/v1/notes"
NOTE_URL_TEMPLATE = NOTES_URL + "/{note_id}"


async def create(client, title="Groceries", content="milk, eggs"):
    response = await client.post(NOTES_URL, json={"title": title, "content": content})
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateNote:

    @pytest.mark.asyncio
    async def test_create_returns_201_with_generated_fields(self, test_client, note_payload):
        response = await test_client.post(NOTES_URL, json=note_payload)

        assert response.status_code == 201
        body = response.json()
        assert set(body) == {"id", "title", "content", "createdAt", "updatedAt"}
        assert body["id"]
        assert body["title"] == "Groceries"
        assert body["content"] == "milk, eggs"
        assert body["createdAt"] == body["updatedAt"]

    @pytest.mark.asyncio
    async def test_empty_title_returns_400_and_persists_nothing(self, test_client):
        response = await test_client.post(NOTES_URL, json={"title": "", "content": "milk"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "validation_error"
        assert body["details"] == {"field": "title"}

        listing = await test_client.get(NOTES_URL)
        assert listing.json() == []

    @pytest.mark.asyncio
    async def test_missing_content_names_field(self, test_client):
        response = await test_client.post(NOTES_URL, json={"title": "Groceries"})

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "content"

    @pytest.mark.asyncio
    async def test_malformed_json_returns_400(self, test_client):
        response = await test_client.post(
            NOTES_URL,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestReadNotes:

    @pytest.mark.asyncio
    async def test_get_after_create_returns_same_note(self, test_client):
        created = await create(test_client)

        response = await test_client.get(f"{NOTES_URL}/{created['id']}")

        assert response.status_code == 200
        assert response.json() == created

    @pytest.mark.asyncio
    async def test_get_unknown_id_returns_404(self, test_client):
        response = await test_client.get(f"{NOTES_URL}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_list_returns_all_notes_in_creation_order(self, test_client):
        first = await create(test_client, title="first")
        second = await create(test_client, title="second")

        response = await test_client.get(NOTES_URL)

        assert response.status_code == 200
        assert [note["id"] for note in response.json()] == [first["id"], second["id"]]
        assert response.headers["X-Total-Count"] == "2"


class TestUpdateNote:

    @pytest.mark.asyncio
    async def test_update_keeps_created_at_and_advances_updated_at(self, test_client):
        created = await create(test_client)

        response = await test_client.put(
            f"{NOTES_URL}/{created['id']}",
            json={"title": "Groceries", "content": "milk, eggs, bread"},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == "milk, eggs, bread"
        assert body["createdAt"] == created["createdAt"]
        assert parse_timestamp(body["updatedAt"]) > parse_timestamp(created["updatedAt"])

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_404(self, test_client, note_payload):
        response = await test_client.put(f"{NOTES_URL}/{uuid.uuid4()}", json=note_payload)

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_update_invalid_body_returns_400(self, test_client):
        created = await create(test_client)

        response = await test_client.put(
            f"{NOTES_URL}/{created['id']}",
            json={"title": "   ", "content": "x"},
        )

        assert response.status_code == 400
        stored = await test_client.get(f"{NOTES_URL}/{created['id']}")
        assert stored.json() == created


class TestDeleteNote:

    @pytest.mark.asyncio
    async def test_delete_then_get_returns_404(self, test_client):
        created = await create(test_client)

        response = await test_client.delete(f"{NOTES_URL}/{created['id']}")
        assert response.status_code == 200
        assert response.json() == {"message": "Note deleted successfully."}

        response = await test_client.get(f"{NOTES_URL}/{created['id']}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_unknown_id_returns_404(self, test_client):
        response = await test_client.delete(f"{NOTES_URL}/{uuid.uuid4()}")

        assert response.status_code == 404


@pytest.mark.asyncio
async def test_groceries_scenario(test_client):
    """Create, read, update, delete, read again."""
    created = await create(test_client, title="Groceries", content="milk, eggs")
    note_url = f"{NOTES_URL}/{created['id']}"

    fetched = await test_client.get(note_url)
    assert fetched.status_code == 200
    assert fetched.json() == created

    updated = await test_client.put(
        note_url, json={"title": "Groceries", "content": "milk, eggs, bread"}
    )
    assert updated.status_code == 200
    t0 = parse_timestamp(created["createdAt"])
    t1 = parse_timestamp(updated.json()["updatedAt"])
    assert t1 > t0

    deleted = await test_client.delete(note_url)
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Note deleted successfully."}

    gone = await test_client.get(note_url)
    assert gone.status_code == 404


class TestErrorHandling:

    @pytest.mark.asyncio
    async def test_storage_failure_returns_generic_500(self, app, test_client):
        class BrokenRepository:
            async def list(self):
                raise StorageError(context={"original_error": "connection refused by 10.0.0.5"})

        app.dependency_overrides[get_note_repository] = lambda: BrokenRepository()

        response = await test_client.get(NOTES_URL)

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "10.0.0.5" not in response.text

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, app, test_client, caplog):
        class CrashingRepository:
            async def list(self):
                raise RuntimeError("pool exhausted at 10.0.0.5")

        app.dependency_overrides[get_note_repository] = lambda: CrashingRepository()

        with caplog.at_level(logging.INFO, logger="notesapi"):
            response = await test_client.get(NOTES_URL, headers={"X-Request-ID": "trace-500"})

        assert response.status_code == 500
        assert response.headers["X-Request-ID"] == "trace-500"
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert body["request_id"] == "trace-500"
        assert "10.0.0.5" not in response.text

        access_lines = [r for r in caplog.records if r.name == "notesapi.access"]
        assert [r.status for r in access_lines] == [500]
        assert access_lines[0].request_id == "trace-500"

    @pytest.mark.asyncio
    async def test_unknown_route_returns_json_404(self, test_client):
        response = await test_client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        assert response.json()["message"] == "not found"

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get(NOTES_URL, headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get(
            f"{NOTES_URL}/missing", headers={"X-Request-ID": "trace-404"}
        )

        assert response.json()["request_id"] == "trace-404"


class TestDocsAndHealth:

    @pytest.mark.asyncio
    async def test_openapi_document_describes_routes(self, test_client):
        response = await test_client.get("/api-docs/openapi.json")

        assert response.status_code == 200
        document = response.json()
        paths = document["paths"]
        assert set(paths[NOTES_URL]) == {"get", "post"}
        assert set(paths[NOTE_URL_TEMPLATE]) == {"get", "put", "delete"}
        assert "NoteResponse" in document["components"]["schemas"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "path, method, statuses",
        [
            (NOTES_URL, "post", {"201", "400", "500"}),
            (NOTES_URL, "get", {"200", "500"}),
            (NOTE_URL_TEMPLATE, "get", {"200", "404", "500"}),
            (NOTE_URL_TEMPLATE, "put", {"200", "400", "404", "500"}),
            (NOTE_URL_TEMPLATE, "delete", {"200", "404", "500"}),
        ],
    )
    async def test_openapi_lists_only_returned_statuses(self, test_client, path, method, statuses):
        document = (await test_client.get("/api-docs/openapi.json")).json()

        assert set(document["paths"][path][method]["responses"]) == statuses
        assert "HTTPValidationError" not in document["components"]["schemas"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("path", ["/swagger-ui", "/redoc", "/rapidoc"])
    async def test_doc_viewers_served(self, test_client, path):
        response = await test_client.get(path)

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]

    @pytest.mark.asyncio
    async def test_health_reports_connected_database(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
