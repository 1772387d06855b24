from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from typing import Any

from sqlalchemy import and_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from admitdesk.db.models import ClientProfile, Document, SchoolDeadline, User
from admitdesk.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from admitdesk.types import (
    ClientProfileRecord,
    DocumentRecord,
    Role,
    SchoolDeadlineRecord,
)

logger = logging.getLogger(__name__)

DOCUMENT_UPDATABLE_FIELDS = frozenset({"content", "status", "feedback", "version"})
PROFILE_UPDATABLE_FIELDS = frozenset({"phone", "target_schools", "application_round", "status", "notes"})


def _profile_record(profile: ClientProfile, user: User | None) -> ClientProfileRecord:
    record = ClientProfileRecord.model_validate(profile)
    if user is None:
        return record
    return record.model_copy(update={"full_name": user.full_name, "email": user.email})


class Repository:
    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def _guard(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.warning("Store rejected %s: %s", action, exc)
            raise PersistenceError(f"could not {action}") from exc

    # Identity and provisioning

    def create_user(self, *, email: str, full_name: str | None = None, role: Role = "client") -> User:
        if role not in {"client", "admin"}:
            raise ValidationError(f"unsupported role '{role}'")
        with self._guard("create user"):
            user = User(email=email, full_name=full_name, role=role)
            self.session.add(user)
            self.session.commit()
            self.session.refresh(user)
        return user

    def get_user(self, user_id: int) -> User | None:
        with self._guard("load user"):
            return self.session.get(User, user_id)

    def provision_client(self, user_id: int, phone: str | None = None) -> ClientProfileRecord:
        user = self.get_user(user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found")
        with self._guard("provision client"):
            profile = ClientProfile(user_id=user_id, phone=phone, target_schools=[], status="active")
            self.session.add(profile)
            self.session.commit()
            self.session.refresh(profile)
            return _profile_record(profile, user)

    # Client profiles

    def fetch_profile(self, user_id: int) -> ClientProfileRecord | None:
        statement = (
            select(ClientProfile, User)
            .join(User, User.id == ClientProfile.user_id)
            .where(ClientProfile.user_id == user_id)
        )
        with self._guard("load client profile"):
            row = self.session.execute(statement).first()
            if row is None:
                return None
            return _profile_record(row[0], row[1])

    def get_profile(self, profile_id: int) -> ClientProfileRecord | None:
        statement = (
            select(ClientProfile, User)
            .join(User, User.id == ClientProfile.user_id)
            .where(ClientProfile.id == profile_id)
        )
        with self._guard("load client profile"):
            row = self.session.execute(statement).first()
            if row is None:
                return None
            return _profile_record(row[0], row[1])

    def fetch_clients(self) -> list[ClientProfileRecord]:
        statement = (
            select(ClientProfile, User)
            .join(User, User.id == ClientProfile.user_id)
            .order_by(ClientProfile.created_at.desc(), ClientProfile.id.desc())
        )
        with self._guard("load clients"):
            return [_profile_record(profile, user) for profile, user in self.session.execute(statement).all()]

    def update_profile(self, profile_id: int, fields: dict[str, Any]) -> None:
        unknown = set(fields) - PROFILE_UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update client fields {sorted(unknown)}")

        with self._guard("update client profile"):
            profile = self.session.get(ClientProfile, profile_id)
            if profile is None:
                raise NotFoundError(f"client {profile_id} not found")
            for key, value in fields.items():
                setattr(profile, key, value)
            self.session.commit()
        logger.info("Updated client profile id=%s fields=%s", profile_id, sorted(fields))

    # Documents

    def fetch_documents(self, client_id: int) -> list[DocumentRecord]:
        statement = (
            select(Document)
            .where(Document.client_id == client_id)
            .order_by(Document.updated_at.desc(), Document.id.desc())
        )
        with self._guard("load documents"):
            return [DocumentRecord.model_validate(row) for row in self.session.scalars(statement).all()]

    def fetch_all_documents(self) -> list[DocumentRecord]:
        statement = (
            select(Document, User.full_name)
            .join(ClientProfile, ClientProfile.id == Document.client_id)
            .join(User, User.id == ClientProfile.user_id)
            .order_by(Document.updated_at.desc(), Document.id.desc())
        )
        with self._guard("load documents"):
            return [
                DocumentRecord.model_validate(document).model_copy(update={"client_name": full_name})
                for document, full_name in self.session.execute(statement).all()
            ]

    def get_document(self, document_id: int) -> DocumentRecord | None:
        with self._guard("load document"):
            document = self.session.get(Document, document_id)
            if document is None:
                return None
            return DocumentRecord.model_validate(document)

    def insert_document(self, fields: dict[str, Any]) -> DocumentRecord:
        with self._guard("create document"):
            if self.session.get(ClientProfile, fields.get("client_id")) is None:
                raise NotFoundError(f"client {fields.get('client_id')} not found")
            document = Document(**fields)
            self.session.add(document)
            self.session.commit()
            self.session.refresh(document)
            record = DocumentRecord.model_validate(document)
        logger.info("Created document id=%s client_id=%s type=%s", record.id, record.client_id, record.document_type)
        return record

    def update_document(
        self,
        document_id: int,
        fields: dict[str, Any],
        expected_version: int | None = None,
    ) -> None:
        """Write ``fields`` to one document.

        With ``expected_version`` the row is only touched while its stored
        version still equals it; otherwise ``ConflictError`` is raised.
        """
        unknown = set(fields) - DOCUMENT_UPDATABLE_FIELDS
        if unknown:
            raise ValidationError(f"cannot update document fields {sorted(unknown)}")

        conditions = [Document.id == document_id]
        if expected_version is not None:
            conditions.append(Document.version == expected_version)

        with self._guard("update document"):
            result = self.session.execute(
                update(Document).where(and_(*conditions)).values(**fields).execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                self.session.rollback()
                if self.session.get(Document, document_id) is None:
                    raise NotFoundError(f"document {document_id} not found")
                raise ConflictError(
                    f"document {document_id} changed since version {expected_version} was loaded"
                )
            self.session.commit()
        self.session.expire_all()
        logger.info("Updated document id=%s fields=%s", document_id, sorted(fields))

    # Deadlines

    def fetch_deadlines(self) -> list[SchoolDeadlineRecord]:
        statement = select(SchoolDeadline).order_by(SchoolDeadline.deadline_date.asc(), SchoolDeadline.id.asc())
        with self._guard("load deadlines"):
            return [SchoolDeadlineRecord.model_validate(row) for row in self.session.scalars(statement).all()]

    def upsert_deadline(self, *, school_name: str, round_name: str, deadline_date: date) -> SchoolDeadlineRecord:
        with self._guard("save deadline"):
            existing = self.session.scalar(
                select(SchoolDeadline).where(
                    and_(
                        SchoolDeadline.school_name == school_name,
                        SchoolDeadline.round_name == round_name,
                    )
                )
            )
            if existing:
                existing.deadline_date = deadline_date
                obj = existing
            else:
                obj = SchoolDeadline(school_name=school_name, round_name=round_name, deadline_date=deadline_date)
                self.session.add(obj)

            self.session.commit()
            self.session.refresh(obj)
            return SchoolDeadlineRecord.model_validate(obj)
