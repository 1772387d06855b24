from __future__ import annotations

from typing import Any, Protocol

from admitdesk.types import ClientProfileRecord, DocumentRecord, SchoolDeadlineRecord


class PortalStore(Protocol):
    """What the dashboards need from persistence. Failures raise ``PersistenceError``."""

    def fetch_profile(self, user_id: int) -> ClientProfileRecord | None: ...

    def fetch_documents(self, client_id: int) -> list[DocumentRecord]: ...

    def fetch_deadlines(self) -> list[SchoolDeadlineRecord]: ...

    def fetch_clients(self) -> list[ClientProfileRecord]: ...

    def fetch_all_documents(self) -> list[DocumentRecord]: ...

    def insert_document(self, fields: dict[str, Any]) -> DocumentRecord: ...

    def update_document(
        self,
        document_id: int,
        fields: dict[str, Any],
        expected_version: int | None = None,
    ) -> None: ...

    def update_profile(self, profile_id: int, fields: dict[str, Any]) -> None: ...
