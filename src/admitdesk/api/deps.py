from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from admitdesk.api.schemas import NotificationResponse
from admitdesk.core.dashboard import AdminDashboard, ClientDashboard, DashboardController
from admitdesk.core.identity import ANONYMOUS, Identity
from admitdesk.core.notifications import Notification
from admitdesk.db.repositories import Repository
from admitdesk.db.session import get_db_session
from admitdesk.errors import AccessDeniedError, ConflictError, NotFoundError, PersistenceError, ValidationError


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def ensure_ok(notification: Notification | None) -> NotificationResponse:
    """Turn a controller notification into a response, or raise the matching HTTP error."""
    if notification is None:
        raise HTTPException(status_code=409, detail="Action already in progress")

    error = notification.error
    if error is None:
        return NotificationResponse(level=notification.level, message=notification.message)
    if isinstance(error, ValidationError):
        raise HTTPException(status_code=422, detail=notification.message)
    if isinstance(error, AccessDeniedError):
        raise HTTPException(status_code=403, detail=notification.message)
    if isinstance(error, NotFoundError):
        raise HTTPException(status_code=404, detail=str(error))
    if isinstance(error, ConflictError):
        raise HTTPException(status_code=409, detail=notification.message)
    if isinstance(error, PersistenceError):
        raise HTTPException(status_code=502, detail=notification.message)
    raise HTTPException(status_code=400, detail=notification.message)


def get_identity(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> Identity:
    if x_user_id is None:
        return ANONYMOUS
    user = Repository(db).get_user(x_user_id)
    if user is None:
        return ANONYMOUS
    return Identity(user_id=user.id, role=user.role, email=user.email, full_name=user.full_name)


def _mounted(controller: DashboardController) -> DashboardController:
    if not controller.mount():
        if not controller.identity.is_authenticated:
            raise HTTPException(status_code=401, detail="Sign in required")
        raise HTTPException(status_code=403, detail=f"{controller.role} role required")
    if controller.load_error is not None:
        ensure_ok(controller.load_error)
    return controller


def get_client_dashboard(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> ClientDashboard:
    return _mounted(ClientDashboard(identity, Repository(db)))


def get_admin_dashboard(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> AdminDashboard:
    return _mounted(AdminDashboard(identity, Repository(db)))
