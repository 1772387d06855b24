from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Role = Literal["client", "admin"]
DocumentType = Literal["resume", "essay", "lor", "story", "other"]
DeadlineUrgency = Literal["past", "urgent", "normal"]
NotificationLevel = Literal["success", "error", "info"]

DOCUMENT_TYPES: tuple[str, ...] = ("resume", "essay", "lor", "story", "other")


class DocumentStatus(StrEnum):
    DRAFT = "draft"
    REVIEW = "review"
    # Terminal label; nothing in the portal moves a document here yet.
    FINAL = "final"


class DocumentRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    document_type: str
    title: str
    content: str = ""
    status: DocumentStatus = DocumentStatus.DRAFT
    feedback: str | None = None
    version: int = 1
    created_at: datetime | None = None
    updated_at: datetime | None = None
    client_name: str | None = None


class ClientProfileRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    phone: str | None = None
    target_schools: list[str] = Field(default_factory=list)
    application_round: str | None = None
    status: str = "active"
    notes: str | None = None
    created_at: datetime | None = None
    full_name: str | None = None
    email: str | None = None


class SchoolDeadlineRecord(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    school_name: str
    round_name: str
    deadline_date: date


class DeadlineView(BaseModel):
    school_name: str
    round_name: str
    deadline_date: date
    days_left: int
    urgency: DeadlineUrgency

    @property
    def days_left_label(self) -> int | None:
        if self.urgency == "past":
            return None
        return self.days_left


class DocumentCounts(BaseModel):
    total: int = 0
    draft: int = 0
    review: int = 0
    with_feedback: int = 0


class AdminStats(BaseModel):
    total_clients: int = 0
    total_documents: int = 0
    in_review: int = 0
