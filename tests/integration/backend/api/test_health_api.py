"""
Integration Tests for Health Endpoints.
"""

import pytest
from httpx import AsyncClient


class TestHealth:
    """Tests for /health and /health/ready."""

    @pytest.mark.asyncio
    async def test_liveness(self, client: AsyncClient):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_ready_reports_database(self, client: AsyncClient):
        await client.post("/api/notes", json={"title": "Counted"})

        response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["checks"]["database"]["status"] == "healthy"
        assert data["checks"]["database"]["notes"] == 1
        assert "timestamp" in data

    @pytest.mark.asyncio
    async def test_ready_fails_when_store_closed(self, client: AsyncClient, note_store):
        note_store.close()

        response = await client.get("/health/ready")

        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["status"] == "unhealthy"
        assert detail["checks"]["database"] == {
            "status": "unhealthy",
            "error": "Note store is not open",
        }

    @pytest.mark.asyncio
    async def test_liveness_ignores_store_state(self, client: AsyncClient, note_store):
        note_store.close()

        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_ready_reports_attachments(self, client: AsyncClient, attachments):
        response = await client.get("/health/ready")

        assert response.json()["checks"]["attachments"] == {
            "status": "healthy",
            "max_upload_bytes": attachments.max_bytes,
        }
        assert attachments.directory.is_dir()

    @pytest.mark.asyncio
    async def test_ready_fails_when_upload_dir_unusable(self, client: AsyncClient, attachments):
        attachments.directory.parent.mkdir(parents=True, exist_ok=True)
        attachments.directory.write_text("not a directory")

        response = await client.get("/health/ready")

        assert response.status_code == 503
        checks = response.json()["detail"]["checks"]
        assert checks["database"]["status"] == "healthy"
        assert checks["attachments"] == {
            "status": "unhealthy",
            "error": f"Upload directory unavailable: {attachments.directory}",
        }
