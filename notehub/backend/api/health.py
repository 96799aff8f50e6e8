"""
Health Check Endpoints.

- /health: liveness, the process answers
- /health/ready: readiness, notes can be read and attachments written
"""

from typing import Any

from fastapi import APIRouter, HTTPException

from notehub.backend.core.concurrency import run_blocking
from notehub.backend.core.dependencies import AttachmentsDep, NoteStoreDep
from notehub.backend.core.exceptions import StorageError
from notehub.backend.core.logging import get_logger
from notehub.backend.core.utils import utc_now
from notehub.backend.services.attachments import AttachmentStorage
from notehub.backend.services.note_store import NoteStore

router = APIRouter()
logger = get_logger(__name__)


async def check_database(store: NoteStore) -> dict[str, Any]:
    """
    Ping the note database and count the notes in it.

    Returns:
        Dict with status, latency, and either the note count or an error message
    """
    start = utc_now()
    try:
        await run_blocking(store.ping)
        note_count = await run_blocking(store.count)
    except StorageError as e:
        return {"status": "unhealthy", "error": e.message}

    latency_ms = int((utc_now() - start).total_seconds() * 1000)
    return {
        "status": "healthy",
        "latency_ms": latency_ms,
        "notes": note_count,
    }


async def check_attachments(attachments: AttachmentStorage) -> dict[str, Any]:
    try:
        await run_blocking(attachments.check_writable)
    except StorageError as e:
        return {"status": "unhealthy", "error": e.message}
    return {"status": "healthy", "max_upload_bytes": attachments.max_bytes}


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Returns 200 while the process is running. Nothing else is checked."""
    return {"status": "healthy"}


@router.get("/health/ready")
async def readiness_check(store: NoteStoreDep, attachments: AttachmentsDep) -> dict[str, Any]:
    """
    Readiness check.

    Returns 200 when the note database answers and the upload directory
    is writable, 503 otherwise.
    """
    checks = {
        "database": await check_database(store),
        "attachments": await check_attachments(attachments),
    }
    failing = sorted(name for name, check in checks.items() if check["status"] != "healthy")

    if failing:
        logger.warning("Readiness check failed", extra={"failing": failing, "checks": checks})
        raise HTTPException(
            status_code=503,
            detail={
                "status": "unhealthy",
                "checks": checks,
                "timestamp": utc_now().isoformat(),
            },
        )

    return {
        "status": "healthy",
        "checks": checks,
        "timestamp": utc_now().isoformat(),
    }
