import pytest

from admitdesk.core import lifecycle
from admitdesk.errors import TransitionError, ValidationError
from admitdesk.types import DocumentRecord, DocumentStatus


def _doc(status: DocumentStatus = DocumentStatus.DRAFT, version: int = 1) -> DocumentRecord:
    return DocumentRecord(
        id=7,
        client_id=3,
        document_type="essay",
        title="Essay 1",
        content="old",
        status=status,
        version=version,
    )


def test_new_essay_with_school_prefixes_title() -> None:
    fields = lifecycle.new_document_fields(client_id=3, title="Essay 1", document_type="essay", school="Wharton")
    assert fields["title"] == "Wharton - Essay 1"
    assert fields["status"] == "draft"
    assert fields["version"] == 1
    assert fields["content"] == ""


def test_new_essay_without_school_keeps_title() -> None:
    fields = lifecycle.new_document_fields(client_id=3, title="Essay 1", document_type="essay")
    assert fields["title"] == "Essay 1"


def test_school_only_prefixes_essays() -> None:
    fields = lifecycle.new_document_fields(client_id=3, title="CV", document_type="resume", school="Wharton")
    assert fields["title"] == "CV"


@pytest.mark.parametrize(
    ("title", "document_type"),
    [("", "essay"), ("   ", "essay"), ("Essay 1", ""), ("Essay 1", "cover_letter")],
)
def test_new_document_requires_title_and_known_type(title: str, document_type: str) -> None:
    with pytest.raises(ValidationError):
        lifecycle.new_document_fields(client_id=3, title=title, document_type=document_type)


def test_save_draft_bumps_version_and_forces_draft() -> None:
    fields = lifecycle.save_draft(_doc(DocumentStatus.REVIEW, version=4), "new text")
    assert fields == {"content": "new text", "status": "draft", "version": 5}


def test_submit_for_review_keeps_version() -> None:
    fields = lifecycle.submit_for_review(_doc(version=4), "final text")
    assert fields == {"content": "final text", "status": "review"}


def test_feedback_summary_path_only_touches_feedback() -> None:
    assert lifecycle.record_feedback(_doc(), "Tighten the intro") == {"feedback": "Tighten the intro"}


def test_feedback_detail_path_replaces_content_too() -> None:
    fields = lifecycle.record_feedback(_doc(), "Edited inline", content="rewritten")
    assert fields == {"feedback": "Edited inline", "content": "rewritten"}
    assert "version" not in fields


def test_final_documents_reject_client_transitions() -> None:
    final = _doc(DocumentStatus.FINAL)
    with pytest.raises(TransitionError):
        lifecycle.save_draft(final, "x")
    with pytest.raises(TransitionError):
        lifecycle.submit_for_review(final, "x")
    assert lifecycle.record_feedback(final, "Approved") == {"feedback": "Approved"}


def test_unknown_status_is_rejected() -> None:
    document = _doc().model_copy(update={"status": "archived"})
    with pytest.raises(TransitionError):
        lifecycle.save_draft(document, "x")
