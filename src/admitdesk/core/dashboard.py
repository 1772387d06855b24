"""Client and consultant dashboard controllers.

A controller owns the in-memory view of one signed-in session. Reads flow from
the store into controller state; writes go to the store first and are only
reflected locally once the store accepted them, usually through a refetch.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from admitdesk.catalog import DOCUMENT_TAB_ORDER
from admitdesk.config import Settings, get_settings
from admitdesk.core import lifecycle, profiles
from admitdesk.core.deadlines import Clock, annotate_deadlines, relevant_deadlines, timezone_clock
from admitdesk.core.identity import Identity
from admitdesk.core.notifications import Notification, Notifier
from admitdesk.core.store import PortalStore
from admitdesk.errors import AccessDeniedError, ConflictError, PersistenceError, ValidationError
from admitdesk.types import (
    AdminStats,
    ClientProfileRecord,
    DeadlineView,
    DocumentCounts,
    DocumentRecord,
    DocumentStatus,
    Role,
    SchoolDeadlineRecord,
)

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth"
HOME_PATH = "/"

Navigator = Callable[[str], None]


class DashboardController:
    role: Role

    def __init__(
        self,
        identity: Identity,
        store: PortalStore,
        *,
        navigate: Navigator | None = None,
        notifier: Notifier | None = None,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ):
        self.identity = identity
        self.store = store
        self.settings = settings or get_settings()
        self.notifier = notifier or Notifier()
        self.clock = clock or timezone_clock(self.settings.timezone)
        self._navigate = navigate
        self.redirected_to: str | None = None
        self.loading = True
        self.load_error: Notification | None = None
        self._busy: set[str] = set()

    def navigate(self, path: str) -> None:
        self.redirected_to = path
        if self._navigate is not None:
            self._navigate(path)

    def mount(self) -> bool:
        """Check the session and load data. Returns False when the session was sent away."""
        if not self.identity.has_role(self.role):
            logger.info("Redirecting session user_id=%s role=%s", self.identity.user_id, self.identity.role)
            self.navigate(AUTH_PATH)
            return False
        self.fetch_data()
        return True

    def on_identity_change(self, identity: Identity) -> bool:
        self.identity = identity
        return self.mount()

    def sign_out(self) -> None:
        self.identity.sign_out()
        self.navigate(HOME_PATH)

    def fetch_data(self) -> None:
        raise NotImplementedError

    def _load_failed(self, message: str, exc: PersistenceError) -> None:
        logger.warning("%s: %s", message, exc)
        notification = self.notifier.error(message, exc)
        if self.load_error is None:
            self.load_error = notification

    def is_busy(self, action: str) -> bool:
        return action in self._busy

    def _run(
        self,
        action: str,
        work: Callable[[], Any],
        *,
        success: str,
        failure: str,
    ) -> Notification | None:
        if action in self._busy:
            return None

        self._busy.add(action)
        try:
            work()
        except ValidationError as exc:
            return self.notifier.error(str(exc), exc)
        except AccessDeniedError as exc:
            return self.notifier.error(str(exc), exc)
        except ConflictError as exc:
            return self.notifier.error(f"{failure}: it was changed elsewhere, reload and try again", exc)
        except PersistenceError as exc:
            logger.warning("%s failed: %s", action, exc)
            return self.notifier.error(failure, exc)
        finally:
            self._busy.discard(action)
        return self.notifier.success(success)


class ClientDashboard(DashboardController):
    role: Role = "client"

    def __init__(self, identity: Identity, store: PortalStore, **kwargs: Any):
        super().__init__(identity, store, **kwargs)
        self.profile: ClientProfileRecord | None = None
        self.documents: list[DocumentRecord] = []
        self.deadlines: list[SchoolDeadlineRecord] = []

        self.selected_document: DocumentRecord | None = None
        self.editing_content = ""
        self.last_created: DocumentRecord | None = None

        self.selected_schools: list[str] = []
        self.selected_round = ""

    def fetch_data(self) -> None:
        self.loading = True
        self.load_error = None
        try:
            self._fetch_profile_and_documents()
            self._fetch_deadlines()
        finally:
            self.loading = False

    def _fetch_profile_and_documents(self) -> None:
        try:
            profile = self.store.fetch_profile(self.identity.user_id)
            documents = self.store.fetch_documents(profile.id) if profile else []
        except PersistenceError as exc:
            self._load_failed("Failed to load your documents", exc)
            return

        self.profile = profile
        self.documents = documents
        if profile is not None:
            self.selected_schools = list(profile.target_schools or [])
            self.selected_round = profile.application_round or ""
        if self.selected_document is not None:
            self.selected_document = self.find_document(self.selected_document.id)

    def _fetch_deadlines(self) -> None:
        try:
            self.deadlines = self.store.fetch_deadlines()
        except PersistenceError as exc:
            self._load_failed("Failed to load school deadlines", exc)

    # Derived view state

    def find_document(self, document_id: int) -> DocumentRecord | None:
        return next((doc for doc in self.documents if doc.id == document_id), None)

    def documents_by_type(self, document_type: str) -> list[DocumentRecord]:
        return [doc for doc in self.documents if doc.document_type == document_type]

    def grouped_documents(self) -> dict[str, list[DocumentRecord]]:
        groups: dict[str, list[DocumentRecord]] = {}
        for document_type in DOCUMENT_TAB_ORDER:
            docs = self.documents_by_type(document_type)
            if docs:
                groups[document_type] = docs
        return groups

    def stories(self) -> list[DocumentRecord]:
        return self.documents_by_type("story")

    @property
    def counts(self) -> DocumentCounts:
        return DocumentCounts(
            total=len(self.documents),
            draft=sum(1 for doc in self.documents if doc.status == DocumentStatus.DRAFT),
            review=sum(1 for doc in self.documents if doc.status == DocumentStatus.REVIEW),
            with_feedback=sum(1 for doc in self.documents if doc.feedback),
        )

    def relevant_deadlines(self, limit: int | None = None) -> list[DeadlineView]:
        rows = relevant_deadlines(self.profile, self.deadlines)
        views = annotate_deadlines(rows, self.clock(), self.settings.urgent_window_days)
        return views if limit is None else views[:limit]

    def upcoming_deadlines(self) -> list[DeadlineView]:
        return self.relevant_deadlines(limit=self.settings.dashboard_deadline_limit)

    # Document actions

    def select_document(self, document_id: int) -> DocumentRecord | None:
        document = self.find_document(document_id)
        self.selected_document = document
        self.editing_content = (document.content or "") if document else ""
        return document

    def close_document(self) -> None:
        self.selected_document = None
        self.editing_content = ""

    def edit(self, content: str) -> None:
        self.editing_content = content

    def _expected_version(self, document: DocumentRecord) -> int | None:
        return document.version if self.settings.document_version_check else None

    def create_document(self, title: str, document_type: str, school: str | None = None) -> Notification | None:
        def work() -> None:
            if self.profile is None:
                raise ValidationError("No client profile found for this account")
            fields = lifecycle.new_document_fields(
                client_id=self.profile.id,
                title=title,
                document_type=document_type,
                school=school,
            )
            created = self.store.insert_document(fields)
            self.documents = [created, *self.documents]
            self.last_created = created

        return self._run(
            "create_document",
            work,
            success="Document created successfully",
            failure="Failed to create document",
        )

    def save_draft(self) -> Notification | None:
        document = self.selected_document
        if document is None:
            return None

        def work() -> None:
            fields = lifecycle.save_draft(document, self.editing_content)
            self.store.update_document(document.id, fields, expected_version=self._expected_version(document))
            self.fetch_data()

        return self._run(
            "save_document",
            work,
            success="Document saved successfully",
            failure="Failed to save document",
        )

    def submit_for_review(self) -> Notification | None:
        document = self.selected_document
        if document is None:
            return None

        def work() -> None:
            fields = lifecycle.submit_for_review(document, self.editing_content)
            self.store.update_document(document.id, fields, expected_version=self._expected_version(document))
            self.fetch_data()
            self.close_document()

        return self._run(
            "submit_document",
            work,
            success="Document submitted for review",
            failure="Failed to submit for review",
        )

    # Target schools editor

    def toggle_school(self, school: str) -> list[str]:
        self.selected_schools = profiles.toggle_school(self.selected_schools, school)
        return self.selected_schools

    def select_round(self, application_round: str) -> None:
        self.selected_round = application_round

    def save_schools(self) -> Notification | None:
        profile = self.profile
        if profile is None:
            return None

        def work() -> None:
            fields = profiles.target_update(self.selected_schools, self.selected_round)
            profiles.check_writable("client", fields)
            self.store.update_profile(profile.id, fields)
            self.profile = profile.model_copy(update=fields)
            self.selected_schools = list(fields["target_schools"])

        return self._run(
            "save_schools",
            work,
            success="Target schools updated",
            failure="Failed to save schools",
        )

    def book_consultation(self) -> Notification:
        return self.notifier.info("Calendly integration coming soon! Contact your consultant directly to schedule.")


class AdminDashboard(DashboardController):
    role: Role = "admin"

    def __init__(self, identity: Identity, store: PortalStore, **kwargs: Any):
        super().__init__(identity, store, **kwargs)
        self.clients: list[ClientProfileRecord] = []
        self.documents: list[DocumentRecord] = []
        self.search_term = ""

        self.selected_document: DocumentRecord | None = None
        self.editing_feedback = ""
        self.editing_content = ""

    def fetch_data(self) -> None:
        self.loading = True
        self.load_error = None
        try:
            try:
                self.clients = self.store.fetch_clients()
            except PersistenceError as exc:
                self._load_failed("Failed to load clients", exc)
            try:
                self.documents = self.store.fetch_all_documents()
            except PersistenceError as exc:
                self._load_failed("Failed to load documents", exc)
        finally:
            self.loading = False

    @property
    def filtered_clients(self) -> list[ClientProfileRecord]:
        term = self.search_term.lower()
        return [
            client
            for client in self.clients
            if term in (client.full_name or "").lower() or term in (client.email or "").lower()
        ]

    @property
    def stats(self) -> AdminStats:
        return AdminStats(
            total_clients=len(self.clients),
            total_documents=len(self.documents),
            in_review=sum(1 for doc in self.documents if doc.status == DocumentStatus.REVIEW),
        )

    def find_document(self, document_id: int) -> DocumentRecord | None:
        return next((doc for doc in self.documents if doc.id == document_id), None)

    def find_client(self, client_id: int) -> ClientProfileRecord | None:
        return next((client for client in self.clients if client.id == client_id), None)

    def select_document(self, document_id: int) -> DocumentRecord | None:
        document = self.find_document(document_id)
        self.selected_document = document
        self.editing_feedback = (document.feedback or "") if document else ""
        self.editing_content = (document.content or "") if document else ""
        return document

    def close_document(self) -> None:
        self.selected_document = None
        self.editing_feedback = ""
        self.editing_content = ""

    def _write_feedback(self, document: DocumentRecord, include_content: bool) -> None:
        fields = lifecycle.record_feedback(
            document,
            self.editing_feedback,
            content=self.editing_content if include_content else None,
        )
        self.store.update_document(document.id, fields)
        self.fetch_data()
        self.close_document()

    def save_feedback(self) -> Notification | None:
        """Summary edit: only the feedback text changes."""
        document = self.selected_document
        if document is None:
            return None
        return self._run(
            "save_feedback",
            lambda: self._write_feedback(document, include_content=False),
            success="Feedback saved successfully",
            failure="Failed to save feedback",
        )

    def save_review(self) -> Notification | None:
        """Detail edit: content and feedback are replaced together."""
        document = self.selected_document
        if document is None:
            return None
        return self._run(
            "save_review",
            lambda: self._write_feedback(document, include_content=True),
            success="Review saved successfully",
            failure="Failed to save review",
        )

    def update_client(
        self,
        client_id: int,
        *,
        status: str | None = None,
        notes: str | None = None,
    ) -> Notification | None:
        def work() -> None:
            fields = profiles.consultant_update(status=status, notes=notes)
            profiles.check_writable("admin", fields)
            self.store.update_profile(client_id, fields)
            self.fetch_data()

        return self._run(
            "update_client",
            work,
            success="Client updated",
            failure="Failed to update client",
        )
