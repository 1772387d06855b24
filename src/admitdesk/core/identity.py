from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

from admitdesk.types import Role


def _noop() -> None:
    return None


@dataclass(slots=True)
class Identity:
    """Who is looking at a dashboard. ``user_id`` is ``None`` for anonymous sessions."""

    user_id: int | None = None
    role: Role | None = None
    email: str = ""
    full_name: str | None = None
    sign_out_hook: Callable[[], None] = field(default=_noop, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def has_role(self, role: Role) -> bool:
        return self.is_authenticated and self.role == role

    def sign_out(self) -> None:
        self.sign_out_hook()


ANONYMOUS = Identity()
