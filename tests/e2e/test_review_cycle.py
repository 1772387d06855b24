from datetime import date

from fastapi.testclient import TestClient

from admitdesk.api.app import create_app
from admitdesk.core.dashboard import ClientDashboard
from admitdesk.core.identity import Identity
from admitdesk.db.repositories import Repository
from admitdesk.db.session import SessionLocal


def test_draft_review_feedback_redraft_cycle() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        admin = repo.create_user(email="ameya@example.com", full_name="Ameya", role="admin")
        user = repo.create_user(email="nikhil@example.com", full_name="Nikhil", role="client")
        repo.provision_client(user.id)
        admin_headers = {"X-User-Id": str(admin.id)}
        client_headers = {"X-User-Id": str(user.id)}

    client = TestClient(create_app())
    doc = client.post(
        "/api/client/documents",
        json={"title": "Short answer", "document_type": "essay"},
        headers=client_headers,
    ).json()

    client.put(f"/api/client/documents/{doc['id']}/draft", json={"content": "v1"}, headers=client_headers)
    client.post(f"/api/client/documents/{doc['id']}/submit", json={"content": "v1"}, headers=client_headers)

    queue = client.get("/api/admin/documents", headers=admin_headers).json()
    assert [(row["title"], row["status"]) for row in queue] == [("Short answer", "review")]

    client.put(
        f"/api/admin/documents/{doc['id']}/feedback",
        json={"feedback": "Quantify the impact"},
        headers=admin_headers,
    )

    dashboard = client.get("/api/client/dashboard", headers=client_headers).json()
    essay = dashboard["documents"]["essay"][0]
    assert essay["feedback"] == "Quantify the impact"
    assert essay["status"] == "review"
    assert dashboard["counts"]["with_feedback"] == 1

    redraft = client.put(
        f"/api/client/documents/{doc['id']}/draft",
        json={"content": "v2 with numbers"},
        headers=client_headers,
    ).json()
    assert redraft["status"] == "draft"
    assert redraft["version"] == 3
    assert redraft["feedback"] == "Quantify the impact"


def test_controller_over_real_store_matches_seeded_deadlines() -> None:
    with SessionLocal() as db:
        repo = Repository(db)
        user = repo.create_user(email="tara@example.com", full_name="Tara", role="client")
        profile = repo.provision_client(user.id)
        repo.update_profile(
            profile.id,
            {"target_schools": ["Harvard Business School", "Kellogg"], "application_round": "Round 1"},
        )

        dashboard = ClientDashboard(
            Identity(user_id=user.id, role="client"),
            repo,
            clock=lambda: date(2026, 8, 17),
        )
        assert dashboard.mount()
        views = dashboard.relevant_deadlines()

    assert [(view.school_name, view.round_name) for view in views] == [
        ("Harvard Business School", "Round 1"),
        ("Kellogg", "Round 1"),
    ]
    assert views[0].days_left == 16
    assert views[0].urgency == "normal"
    assert views[1].days_left == 30
