import time
from datetime import date

import pytest

from admitdesk.core import lifecycle
from admitdesk.db.models import ClientProfile
from admitdesk.db.repositories import Repository
from admitdesk.db.session import SessionLocal
from admitdesk.errors import ConflictError, NotFoundError, ValidationError


def _client_with_profile(repo: Repository, email: str = "arjun@example.com", name: str = "Arjun Rao"):
    user = repo.create_user(email=email, full_name=name, role="client")
    return repo.provision_client(user.id, phone="+91 98000 00000")


def test_profile_fetch_joins_user_details() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        profile = _client_with_profile(repo)
        fetched = repo.fetch_profile(profile.user_id)
        assert fetched.id == profile.id
        assert fetched.email == "arjun@example.com"
        assert fetched.status == "active"
        assert fetched.target_schools == []
        assert repo.fetch_profile(9999) is None


def test_documents_are_scoped_and_ordered_by_last_update() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        mine = _client_with_profile(repo)
        other = _client_with_profile(repo, email="meera@example.com", name="Meera")

        first = repo.insert_document(lifecycle.new_document_fields(client_id=mine.id, title="CV", document_type="resume"))
        repo.insert_document(lifecycle.new_document_fields(client_id=mine.id, title="Essay 1", document_type="essay"))
        repo.insert_document(lifecycle.new_document_fields(client_id=other.id, title="LOR", document_type="lor"))

        repo.update_document(first.id, lifecycle.save_draft(first, "v2 text"), expected_version=1)

        titles = [doc.title for doc in repo.fetch_documents(mine.id)]
        assert titles == ["CV", "Essay 1"]

        all_docs = repo.fetch_all_documents()
        assert len(all_docs) == 3
        assert {doc.client_name for doc in all_docs} == {"Arjun Rao", "Meera"}


def test_versioned_update_rejects_stale_copy() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        profile = _client_with_profile(repo)
        document = repo.insert_document(
            lifecycle.new_document_fields(client_id=profile.id, title="Essay", document_type="essay")
        )

        repo.update_document(document.id, lifecycle.save_draft(document, "first"), expected_version=1)
        with pytest.raises(ConflictError):
            repo.update_document(document.id, lifecycle.save_draft(document, "second"), expected_version=1)

        stored = repo.get_document(document.id)
        assert stored.version == 2
        assert stored.content == "first"


def test_unversioned_update_reproduces_lost_update() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        profile = _client_with_profile(repo)
        document = repo.insert_document(
            lifecycle.new_document_fields(client_id=profile.id, title="Essay", document_type="essay")
        )

        repo.update_document(document.id, lifecycle.save_draft(document, "tab one"))
        repo.update_document(document.id, lifecycle.save_draft(document, "tab two"))

        stored = repo.get_document(document.id)
        assert stored.version == 2
        assert stored.content == "tab two"


def test_update_missing_document_or_unknown_field() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        with pytest.raises(NotFoundError):
            repo.update_document(404, {"feedback": "x"})
        with pytest.raises(ValidationError):
            repo.update_document(1, {"title": "renamed"})
        with pytest.raises(ValidationError):
            repo.update_profile(1, {"user_id": 5})


def test_insert_for_unknown_client_fails() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        with pytest.raises(NotFoundError):
            repo.insert_document(lifecycle.new_document_fields(client_id=77, title="CV", document_type="resume"))


def test_updated_at_moves_on_every_write() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        profile = _client_with_profile(repo)
        document = repo.insert_document(
            lifecycle.new_document_fields(client_id=profile.id, title="CV", document_type="resume")
        )
        time.sleep(0.05)
        repo.update_document(document.id, {"feedback": "Looks good"})
        stored = repo.get_document(document.id)
        assert stored.updated_at > document.updated_at
        assert stored.version == 1

        profile_before = db.get(ClientProfile, profile.id).updated_at
        time.sleep(0.05)
        repo.update_profile(profile.id, {"notes": "Strong quant profile"})
        db.expire_all()
        assert db.get(ClientProfile, profile.id).updated_at > profile_before


def test_deadlines_are_sorted_by_date_and_upsert_replaces() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        rows = repo.fetch_deadlines()
        assert rows
        assert [row.deadline_date for row in rows] == sorted(row.deadline_date for row in rows)

        before = len(rows)
        repo.upsert_deadline(school_name="Wharton", round_name="Round 1", deadline_date=date(2026, 9, 10))
        repo.upsert_deadline(school_name="Oxford Said", round_name="Round 1", deadline_date=date(2026, 9, 4))
        rows = repo.fetch_deadlines()
        assert len(rows) == before + 1
        wharton = next(row for row in rows if row.school_name == "Wharton" and row.round_name == "Round 1")
        assert wharton.deadline_date == date(2026, 9, 10)
