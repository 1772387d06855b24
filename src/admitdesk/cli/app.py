from __future__ import annotations

import json
from pathlib import Path

import pydantic
import typer
import uvicorn

from admitdesk.api.app import create_app
from admitdesk.api.schemas import SchoolDeadlineRow
from admitdesk.config import get_settings
from admitdesk.core.dashboard import ClientDashboard
from admitdesk.core.identity import Identity
from admitdesk.core.profiles import consultant_update
from admitdesk.db.init import init_database
from admitdesk.db.repositories import Repository
from admitdesk.db.session import SessionLocal
from admitdesk.errors import PortalError
from admitdesk.logging_config import configure_logging

app = typer.Typer(help="AdmitDesk CLI")
user_app = typer.Typer(help="Manage portal users")
client_app = typer.Typer(help="Client profiles, documents and deadlines")
deadlines_app = typer.Typer(help="School deadline table")

app.add_typer(user_app, name="user")
app.add_typer(client_app, name="client")
app.add_typer(deadlines_app, name="deadlines")

_INITIALIZED = False
_DEADLINE_ROWS = pydantic.TypeAdapter(list[SchoolDeadlineRow])


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _client_dashboard(repo: Repository, user_id: int) -> ClientDashboard:
    user = repo.get_user(user_id)
    if user is None:
        raise typer.BadParameter(f"user {user_id} not found")
    dashboard = ClientDashboard(
        Identity(user_id=user.id, role=user.role, email=user.email, full_name=user.full_name),
        repo,
    )
    if not dashboard.mount():
        raise typer.BadParameter(f"user {user_id} is not a client")
    if dashboard.profile is None:
        raise typer.BadParameter(f"user {user_id} has no client profile")
    return dashboard


@app.command("init")
def init_cmd() -> None:
    """Initialize the database and seed the deadline table."""
    configure_logging()
    result = init_database()
    typer.echo(json.dumps({"ok": True, **result}, indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app()
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)


@user_app.command("create")
def user_create(
    email: str = typer.Option(..., "--email"),
    full_name: str = typer.Option("", "--name"),
    role: str = typer.Option("client", "--role"),
) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        try:
            user = repo.create_user(email=email, full_name=full_name or None, role=role)
        except PortalError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"id": user.id, "email": user.email, "role": user.role}, indent=2))


@client_app.command("provision")
def client_provision(
    user_id: int = typer.Option(..., "--user-id"),
    phone: str = typer.Option("", "--phone"),
) -> None:
    """Create the client profile for an existing user."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        if repo.fetch_profile(user_id) is not None:
            raise typer.BadParameter(f"user {user_id} already has a client profile")
        try:
            profile = repo.provision_client(user_id, phone=phone or None)
        except PortalError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"id": profile.id, "user_id": profile.user_id}, indent=2))


@client_app.command("targets")
def client_targets(
    user_id: int = typer.Option(..., "--user-id"),
    school: list[str] = typer.Option([], "--school"),
    application_round: str = typer.Option("", "--round"),
) -> None:
    """Replace the client's target schools and application round."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        dashboard = _client_dashboard(Repository(db), user_id)
        dashboard.selected_schools = list(school)
        dashboard.select_round(application_round)
        notification = dashboard.save_schools()
        if notification is None or not notification.ok:
            raise typer.BadParameter(notification.message if notification else "busy")
        typer.echo(json.dumps(dashboard.profile.model_dump(mode="json"), indent=2))


@client_app.command("deadlines")
def client_deadlines(user_id: int = typer.Option(..., "--user-id")) -> None:
    """Deadlines matching the client's schools and round, with urgency."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        dashboard = _client_dashboard(Repository(db), user_id)
        rows = [view.model_dump(mode="json") for view in dashboard.relevant_deadlines()]
        typer.echo(json.dumps(rows, indent=2))


@client_app.command("documents")
def client_documents(user_id: int = typer.Option(..., "--user-id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        dashboard = _client_dashboard(Repository(db), user_id)
        typer.echo(
            json.dumps(
                {
                    "counts": dashboard.counts.model_dump(),
                    "documents": [
                        doc.model_dump(mode="json", include={"id", "document_type", "title", "status", "version"})
                        for doc in dashboard.documents
                    ],
                },
                indent=2,
            )
        )


@client_app.command("update")
def client_update(
    client_id: int = typer.Option(..., "--client-id"),
    status: str | None = typer.Option(None, "--status"),
    notes: str | None = typer.Option(None, "--notes"),
) -> None:
    """Consultant-side status/notes change."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        repo = Repository(db)
        try:
            fields = consultant_update(status=status, notes=notes)
            repo.update_profile(client_id, fields)
        except PortalError as exc:
            raise typer.BadParameter(str(exc)) from exc
        profile = repo.get_profile(client_id)
        typer.echo(json.dumps(profile.model_dump(mode="json") if profile else {}, indent=2))


@deadlines_app.command("list")
def deadlines_list(school: str = typer.Option("", "--school")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        rows = Repository(db).fetch_deadlines()
        if school:
            rows = [row for row in rows if row.school_name == school]
        typer.echo(json.dumps([row.model_dump(mode="json") for row in rows], indent=2))


@deadlines_app.command("import")
def deadlines_import(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Load deadlines from a JSON list of {school_name, round_name, deadline_date}."""
    configure_logging()
    ensure_initialized()
    try:
        rows = _DEADLINE_ROWS.validate_json(file.read_bytes())
    except pydantic.ValidationError as exc:
        raise typer.BadParameter(f"invalid deadline rows: {exc}") from exc

    with SessionLocal() as db:
        repo = Repository(db)
        try:
            for row in rows:
                repo.upsert_deadline(
                    school_name=row.school_name,
                    round_name=row.round_name,
                    deadline_date=row.deadline_date,
                )
        except PortalError as exc:
            raise typer.BadParameter(str(exc)) from exc
        typer.echo(json.dumps({"imported": len(rows)}, indent=2))

