from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from admitdesk.api.deps import ensure_ok, get_admin_dashboard, get_client_dashboard, get_db
from admitdesk.api.schemas import (
    AdminClientResponse,
    AdminDashboardResponse,
    CatalogResponse,
    ClientDashboardResponse,
    ClientProfileResponse,
    ClientUpdateRequest,
    DeadlineViewResponse,
    DocumentContentRequest,
    DocumentCreateRequest,
    DocumentResponse,
    FeedbackRequest,
    SchoolDeadlineResponse,
    TargetSchoolsRequest,
)
from admitdesk.catalog import AVAILABLE_SCHOOLS, DOCUMENT_TYPE_LABELS, ROUNDS
from admitdesk.core.dashboard import AdminDashboard, ClientDashboard
from admitdesk.db.repositories import Repository
from admitdesk.errors import PersistenceError
from admitdesk.types import DeadlineView

router = APIRouter(prefix="/api", tags=["api"])


def _deadline_response(view: DeadlineView) -> DeadlineViewResponse:
    return DeadlineViewResponse(
        school_name=view.school_name,
        round_name=view.round_name,
        deadline_date=view.deadline_date,
        days_left=view.days_left_label,
        urgency=view.urgency,
    )


def _client_document(dashboard: ClientDashboard, document_id: int) -> None:
    if dashboard.select_document(document_id) is None:
        raise HTTPException(status_code=404, detail="Document not found")


@router.get("/catalog", response_model=CatalogResponse)
def get_catalog() -> CatalogResponse:
    return CatalogResponse(
        schools=list(AVAILABLE_SCHOOLS),
        rounds=list(ROUNDS),
        document_types=dict(DOCUMENT_TYPE_LABELS),
    )


@router.get("/deadlines", response_model=list[SchoolDeadlineResponse])
def list_deadlines(db: Session = Depends(get_db)) -> list[SchoolDeadlineResponse]:
    try:
        rows = Repository(db).fetch_deadlines()
    except PersistenceError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return [SchoolDeadlineResponse.model_validate(row) for row in rows]


@router.get("/client/dashboard", response_model=ClientDashboardResponse)
def client_dashboard(dashboard: ClientDashboard = Depends(get_client_dashboard)) -> ClientDashboardResponse:
    profile = dashboard.profile
    return ClientDashboardResponse(
        profile=ClientProfileResponse.model_validate(profile) if profile else None,
        counts=dashboard.counts,
        documents={
            document_type: [DocumentResponse.model_validate(doc) for doc in docs]
            for document_type, docs in dashboard.grouped_documents().items()
        },
        stories=[DocumentResponse.model_validate(doc) for doc in dashboard.stories()],
        deadlines=[_deadline_response(view) for view in dashboard.upcoming_deadlines()],
    )


@router.put("/client/profile", response_model=ClientProfileResponse)
def update_target_schools(
    payload: TargetSchoolsRequest,
    dashboard: ClientDashboard = Depends(get_client_dashboard),
) -> ClientProfileResponse:
    if dashboard.profile is None:
        raise HTTPException(status_code=404, detail="Client profile not found")

    dashboard.selected_schools = list(payload.target_schools)
    dashboard.select_round(payload.application_round)
    ensure_ok(dashboard.save_schools())
    return ClientProfileResponse.model_validate(dashboard.profile)


@router.post("/client/documents", response_model=DocumentResponse)
def create_document(
    payload: DocumentCreateRequest,
    dashboard: ClientDashboard = Depends(get_client_dashboard),
) -> DocumentResponse:
    if dashboard.profile is None:
        raise HTTPException(status_code=404, detail="Client profile not found")

    ensure_ok(
        dashboard.create_document(
            title=payload.title,
            document_type=payload.document_type,
            school=payload.school,
        )
    )
    return DocumentResponse.model_validate(dashboard.last_created)


@router.put("/client/documents/{document_id}/draft", response_model=DocumentResponse)
def save_draft(
    document_id: int,
    payload: DocumentContentRequest,
    dashboard: ClientDashboard = Depends(get_client_dashboard),
) -> DocumentResponse:
    _client_document(dashboard, document_id)
    dashboard.edit(payload.content)
    ensure_ok(dashboard.save_draft())
    return DocumentResponse.model_validate(dashboard.find_document(document_id))


@router.post("/client/documents/{document_id}/submit", response_model=DocumentResponse)
def submit_for_review(
    document_id: int,
    payload: DocumentContentRequest,
    dashboard: ClientDashboard = Depends(get_client_dashboard),
) -> DocumentResponse:
    _client_document(dashboard, document_id)
    dashboard.edit(payload.content)
    ensure_ok(dashboard.submit_for_review())
    return DocumentResponse.model_validate(dashboard.find_document(document_id))


@router.get("/admin/dashboard", response_model=AdminDashboardResponse)
def admin_dashboard(dashboard: AdminDashboard = Depends(get_admin_dashboard)) -> AdminDashboardResponse:
    stats = dashboard.stats
    return AdminDashboardResponse(
        total_clients=stats.total_clients,
        total_documents=stats.total_documents,
        in_review=stats.in_review,
    )


@router.get("/admin/clients", response_model=list[AdminClientResponse])
def list_clients(
    search: str = "",
    dashboard: AdminDashboard = Depends(get_admin_dashboard),
) -> list[AdminClientResponse]:
    dashboard.search_term = search
    return [AdminClientResponse.model_validate(client) for client in dashboard.filtered_clients]


@router.patch("/admin/clients/{client_id}", response_model=AdminClientResponse)
def update_client(
    client_id: int,
    payload: ClientUpdateRequest,
    dashboard: AdminDashboard = Depends(get_admin_dashboard),
) -> AdminClientResponse:
    if dashboard.find_client(client_id) is None:
        raise HTTPException(status_code=404, detail="Client not found")

    ensure_ok(dashboard.update_client(client_id, status=payload.status, notes=payload.notes))
    return AdminClientResponse.model_validate(dashboard.find_client(client_id))


@router.get("/admin/documents", response_model=list[DocumentResponse])
def list_documents(dashboard: AdminDashboard = Depends(get_admin_dashboard)) -> list[DocumentResponse]:
    return [DocumentResponse.model_validate(doc) for doc in dashboard.documents]


@router.put("/admin/documents/{document_id}/feedback", response_model=DocumentResponse)
def record_feedback(
    document_id: int,
    payload: FeedbackRequest,
    dashboard: AdminDashboard = Depends(get_admin_dashboard),
) -> DocumentResponse:
    if dashboard.select_document(document_id) is None:
        raise HTTPException(status_code=404, detail="Document not found")

    dashboard.editing_feedback = payload.feedback
    if payload.content is None:
        ensure_ok(dashboard.save_feedback())
    else:
        dashboard.editing_content = payload.content
        ensure_ok(dashboard.save_review())
    return DocumentResponse.model_validate(dashboard.find_document(document_id))
