"""Document state machine.

Each transition takes the last fetched snapshot of a document and returns the
partial update to hand to the store. Nothing is written here, so a rejected
write leaves the caller's snapshot untouched.
"""

from __future__ import annotations

from typing import Any

from admitdesk.errors import TransitionError, ValidationError
from admitdesk.types import DOCUMENT_TYPES, DocumentRecord, DocumentStatus

SAVE_DRAFT = "save_draft"
SUBMIT_FOR_REVIEW = "submit_for_review"
RECORD_FEEDBACK = "record_feedback"

ALLOWED_SOURCES: dict[str, frozenset[DocumentStatus]] = {
    SAVE_DRAFT: frozenset({DocumentStatus.DRAFT, DocumentStatus.REVIEW}),
    SUBMIT_FOR_REVIEW: frozenset({DocumentStatus.DRAFT, DocumentStatus.REVIEW}),
    RECORD_FEEDBACK: frozenset(DocumentStatus),
}


def compose_title(title: str, document_type: str, school: str | None = None) -> str:
    if document_type == "essay" and school:
        return f"{school} - {title}"
    return title


def new_document_fields(
    *,
    client_id: int,
    title: str,
    document_type: str,
    school: str | None = None,
) -> dict[str, Any]:
    if not title or not title.strip() or not document_type:
        raise ValidationError("Please fill in all fields")
    if document_type not in DOCUMENT_TYPES:
        raise ValidationError(f"unknown document type '{document_type}'")

    return {
        "client_id": client_id,
        "title": compose_title(title, document_type, school),
        "document_type": document_type,
        "content": "",
        "status": DocumentStatus.DRAFT.value,
        "version": 1,
    }


def _check_source(document: DocumentRecord, operation: str) -> None:
    try:
        status = DocumentStatus(document.status)
    except ValueError as exc:
        raise TransitionError(f"document {document.id} has unknown status '{document.status}'") from exc

    if status not in ALLOWED_SOURCES[operation]:
        raise TransitionError(f"cannot {operation.replace('_', ' ')} a document in '{status}' state")


def save_draft(document: DocumentRecord, content: str) -> dict[str, Any]:
    _check_source(document, SAVE_DRAFT)
    # Incremented from the fetched copy; the store may reject it as stale.
    return {
        "content": content,
        "status": DocumentStatus.DRAFT.value,
        "version": document.version + 1,
    }


def submit_for_review(document: DocumentRecord, content: str) -> dict[str, Any]:
    _check_source(document, SUBMIT_FOR_REVIEW)
    return {"content": content, "status": DocumentStatus.REVIEW.value}


def record_feedback(
    document: DocumentRecord,
    feedback: str,
    content: str | None = None,
) -> dict[str, Any]:
    """Consultant edit. With ``content`` the detail-edit path replaces both fields."""
    _check_source(document, RECORD_FEEDBACK)
    fields: dict[str, Any] = {"feedback": feedback}
    if content is not None:
        fields["content"] = content
    return fields