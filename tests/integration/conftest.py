"""
Integration Test Fixtures.

Fixtures for integration tests against the real FastAPI app. They build
on the root conftest.py note_store and clock fixtures, so each test gets
its own SQLite file and upload directory.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from notehub.backend.main import create_app
from notehub.backend.services.attachments import AttachmentStorage
from notehub.backend.services.note_store import NoteStore

NOTE_KEYS = {
    "id",
    "title",
    "content",
    "tags",
    "createdAt",
    "nextReviewAt",
    "reviewStage",
    "pdfPath",
}

MAX_UPLOAD_BYTES = 1024


# =============================================================================
# Application Fixtures
# =============================================================================


@pytest.fixture
def attachments(tmp_path) -> AttachmentStorage:
    """Attachment storage in a temporary upload directory."""
    return AttachmentStorage(tmp_path / "uploads", max_bytes=MAX_UPLOAD_BYTES)


@pytest.fixture
def app(note_store: NoteStore, attachments: AttachmentStorage, clock) -> FastAPI:
    """
    Application wired to the test store, storage and clock.

    ASGITransport does not run the lifespan, so everything the lifespan
    would normally open is injected here.
    """
    return create_app(note_store=note_store, attachments=attachments, clock=clock)


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client for the application.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_success(response: Any, expected_status: int = 200) -> Any:
        """
        Assert API response is successful.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        return response.json()

    @staticmethod
    def assert_note(response: Any, expected_status: int = 200) -> dict[str, Any]:
        """Assert the response is a single note in wire format and return it."""
        note = ApiAssertions.assert_success(response, expected_status)
        assert set(note) == NOTE_KEYS, f"Unexpected note keys: {sorted(note)}"
        return note

    @staticmethod
    def assert_notes(response: Any) -> list[dict[str, Any]]:
        """Assert the response is a ``{"notes": [...]}`` listing and return the list."""
        data = ApiAssertions.assert_success(response)
        assert set(data) == {"notes"}, f"Unexpected listing keys: {sorted(data)}"
        for note in data["notes"]:
            assert set(note) == NOTE_KEYS
        return data["notes"]

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error.

        Args:
            response: httpx Response object
            expected_status: Expected HTTP status code
            expected_code: Expected error code (optional)

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert data.get("success") is False, f"Response should be error: {data}"
        assert data.get("error") is not None, f"Missing error details: {data}"

        if expected_code:
            actual_code = data["error"].get("code")
            assert actual_code == expected_code, (
                f"Expected error code {expected_code}, got {actual_code}"
            )

        return data

    @staticmethod
    def assert_validation_error(
        response: Any,
        field: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is a request validation error (422).

        Args:
            response: httpx Response object
            field: Expected field with validation error (optional)

        Returns:
            Response JSON data
        """
        data = ApiAssertions.assert_error(response, 422, "VAL_REQUEST_INVALID")

        if field:
            errors = data["error"].get("details", {}).get("validation_errors", [])
            fields = [e.get("field", "") for e in errors]
            assert any(field in f for f in fields), (
                f"Expected validation error for field '{field}', "
                f"got errors for: {fields}"
            )

        return data


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
