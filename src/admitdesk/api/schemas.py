from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from admitdesk.types import DeadlineUrgency, DocumentCounts, NotificationLevel


class CatalogResponse(BaseModel):
    schools: list[str]
    rounds: list[str]
    document_types: dict[str, str]


class SchoolDeadlineRow(BaseModel):
    school_name: str = Field(min_length=1)
    round_name: str = Field(min_length=1)
    deadline_date: date


class SchoolDeadlineResponse(SchoolDeadlineRow):
    model_config = ConfigDict(from_attributes=True)

    id: int


class DeadlineViewResponse(BaseModel):
    school_name: str
    round_name: str
    deadline_date: date
    days_left: int | None
    urgency: DeadlineUrgency


class DocumentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_id: int
    document_type: str
    title: str
    content: str
    status: str
    feedback: str | None
    version: int
    created_at: datetime | None
    updated_at: datetime | None
    client_name: str | None = None


class ClientProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    phone: str | None
    target_schools: list[str]
    application_round: str | None
    status: str
    full_name: str | None = None
    email: str | None = None


class AdminClientResponse(ClientProfileResponse):
    notes: str | None = None
    created_at: datetime | None = None


class ClientDashboardResponse(BaseModel):
    profile: ClientProfileResponse | None
    counts: DocumentCounts
    documents: dict[str, list[DocumentResponse]] = Field(default_factory=dict)
    stories: list[DocumentResponse] = Field(default_factory=list)
    deadlines: list[DeadlineViewResponse] = Field(default_factory=list)


class AdminDashboardResponse(BaseModel):
    total_clients: int
    total_documents: int
    in_review: int


class TargetSchoolsRequest(BaseModel):
    target_schools: list[str] = Field(default_factory=list)
    application_round: str = ""


class DocumentCreateRequest(BaseModel):
    title: str = ""
    document_type: str = ""
    school: str | None = None


class DocumentContentRequest(BaseModel):
    content: str


class FeedbackRequest(BaseModel):
    feedback: str
    content: str | None = None


class ClientUpdateRequest(BaseModel):
    status: str | None = None
    notes: str | None = None


class NotificationResponse(BaseModel):
    level: NotificationLevel
    message: str
