from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from admitdesk.catalog import ROUNDS
from admitdesk.errors import AccessDeniedError, ValidationError
from admitdesk.types import Role

CLIENT_WRITABLE_FIELDS = frozenset({"target_schools", "application_round"})
ADMIN_WRITABLE_FIELDS = frozenset({"status", "notes"})


def normalize_schools(schools: Iterable[str]) -> list[str]:
    """Drop blanks and repeats, keeping the order the client picked them in."""
    seen: set[str] = set()
    result: list[str] = []
    for school in schools:
        name = school.strip()
        if not name or name in seen:
            continue
        seen.add(name)
        result.append(name)
    return result


def toggle_school(selection: list[str], school: str) -> list[str]:
    if school in selection:
        return [item for item in selection if item != school]
    return [*selection, school]


def validate_round(application_round: str | None) -> str:
    value = application_round or ""
    if value and value not in ROUNDS:
        raise ValidationError(f"unknown application round '{value}'")
    return value


def target_update(schools: Iterable[str], application_round: str | None) -> dict[str, Any]:
    return {
        "target_schools": normalize_schools(schools),
        "application_round": validate_round(application_round),
    }


def consultant_update(*, status: str | None = None, notes: str | None = None) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if status is not None:
        if not status.strip():
            raise ValidationError("client status cannot be blank")
        fields["status"] = status.strip()
    if notes is not None:
        fields["notes"] = notes
    if not fields:
        raise ValidationError("nothing to update")
    return fields


def check_writable(role: Role, fields: dict[str, Any]) -> None:
    allowed = CLIENT_WRITABLE_FIELDS if role == "client" else ADMIN_WRITABLE_FIELDS
    rejected = sorted(set(fields) - allowed)
    if rejected:
        raise AccessDeniedError(f"{role} cannot change {', '.join(rejected)}")
