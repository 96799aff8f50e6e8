"""
REST API Router.

Aggregates the note, review queue and upload endpoint routers.
"""

from fastapi import APIRouter

from notehub.backend.api.rest.endpoints import notes, reviews, uploads

router = APIRouter()

# Notes endpoints
router.include_router(notes.router, prefix="/notes", tags=["notes"])

# Review queue
router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])

# Attachments
router.include_router(uploads.router, prefix="/upload", tags=["attachments"])
