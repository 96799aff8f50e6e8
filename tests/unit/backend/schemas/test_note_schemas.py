"""
Unit Tests for Note Schemas.

Request parsing and the camelCase wire format.
"""

from datetime import datetime
from types import SimpleNamespace

import pytest
from pydantic import ValidationError as PydanticValidationError

from notehub.backend.schemas.note import NoteCollection, NoteCreate, NoteRead, NoteUpdate


def _note_row(**overrides):
    values = {
        "id": 1,
        "title": "A",
        "content": "B",
        "tags": "x",
        "created_at": datetime(2024, 1, 1),
        "next_review_at": datetime(2024, 1, 2),
        "review_stage": 0,
        "pdf_path": "",
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestNoteCreate:
    """Tests for create request parsing."""

    def test_accepts_camel_case_keys(self):
        data = NoteCreate.model_validate({"title": "A", "pdfPath": "/uploads/a.pdf"})

        assert data.pdf_path == "/uploads/a.pdf"

    def test_accepts_snake_case_keys(self):
        data = NoteCreate.model_validate({"title": "A", "pdf_path": "/uploads/a.pdf"})

        assert data.pdf_path == "/uploads/a.pdf"

    def test_defaults(self):
        data = NoteCreate.model_validate({})

        assert data.model_dump() == {"title": None, "content": "", "tags": "", "pdf_path": ""}

    def test_unknown_fields_ignored(self):
        data = NoteCreate.model_validate({"title": "A", "reviewStage": 3, "colour": "red"})

        assert "colour" not in data.model_dump()

    def test_rejects_non_string_title(self):
        with pytest.raises(PydanticValidationError):
            NoteCreate.model_validate({"title": 5})


class TestNoteUpdate:
    """Tests for update request parsing."""

    def test_supplied_fields_only_sent_keys(self):
        data = NoteUpdate.model_validate({"content": "x"})

        assert data.supplied_fields() == {"content": "x"}

    def test_supplied_fields_keeps_explicit_null(self):
        data = NoteUpdate.model_validate({"pdfPath": None, "tags": "t"})

        assert data.supplied_fields() == {"pdf_path": None, "tags": "t"}

    def test_empty_body(self):
        assert NoteUpdate.model_validate({}).supplied_fields() == {}


class TestNoteRead:
    """Tests for the note snapshot and wire format."""

    def test_from_orm_attributes(self):
        note = NoteRead.model_validate(_note_row(review_stage=2))

        assert note.review_stage == 2
        assert note.created_at == datetime(2024, 1, 1)

    def test_alias_dump_is_wire_format(self):
        note = NoteRead.model_validate(_note_row())

        assert note.model_dump(by_alias=True) == {
            "id": 1,
            "title": "A",
            "content": "B",
            "tags": "x",
            "createdAt": "2024-01-01T00:00:00Z",
            "nextReviewAt": "2024-01-02T00:00:00Z",
            "reviewStage": 0,
            "pdfPath": "",
        }

    def test_json_uses_same_format(self):
        note = NoteRead.model_validate(_note_row())

        assert '"nextReviewAt":"2024-01-02T00:00:00Z"' in note.model_dump_json(by_alias=True)

    def test_negative_stage_rejected(self):
        with pytest.raises(PydanticValidationError):
            NoteRead.model_validate(_note_row(review_stage=-1))

    def test_frozen(self):
        note = NoteRead.model_validate(_note_row())

        with pytest.raises(PydanticValidationError):
            note.review_stage = 4

    def test_collection_serializes_notes(self):
        collection = NoteCollection(notes=[NoteRead.model_validate(_note_row())])

        dumped = collection.model_dump(by_alias=True)

        assert dumped["notes"][0]["reviewStage"] == 0
