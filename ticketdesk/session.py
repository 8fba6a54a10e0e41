"""Session and actor context.

The actor (who is logged in, their role and department) is passed to page
controllers explicitly instead of being read from global state. One
``SessionContext`` lives in each Streamlit session; ``start`` is called on
login and ``end`` on logout, which also runs the registered teardown
callbacks so controllers can drop per-user state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, MutableMapping, Optional

from ticketdesk.api.endpoints import AuthApi

logger = logging.getLogger(__name__)

SESSION_KEY = "ticketdesk_session"

ROLE_ADMIN = "admin"
ROLE_DEPARTMENT_HEAD = "department_head"


def department_id_of(user: Dict[str, Any]) -> Any:
    department = user.get("department")
    nested = department.get("id") if isinstance(department, dict) else None
    for candidate in (user.get("departmentId"), user.get("department_id"), nested):
        if candidate not in (None, ""):
            return candidate
    return None


@dataclass(frozen=True)
class ActorContext:
    id: Any
    role: str = ""
    department_id: Any = None
    name: str = ""
    email: str = ""

    @classmethod
    def from_user(cls, user: Dict[str, Any]) -> "ActorContext":
        user = user or {}
        name = user.get("name") or " ".join(
            p for p in (user.get("firstName"), user.get("lastName")) if p
        )
        return cls(
            id=user.get("id"),
            role=str(user.get("role") or ""),
            department_id=department_id_of(user),
            name=name or "",
            email=str(user.get("email") or ""),
        )

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_department_head(self) -> bool:
        return self.role == ROLE_DEPARTMENT_HEAD

    @property
    def can_manage_reports(self) -> bool:
        return self.is_admin or self.is_department_head

    def to_user_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "role": self.role,
            "departmentId": self.department_id,
            "name": self.name,
            "email": self.email,
        }


class SessionContext:
    def __init__(self) -> None:
        self.actor: Optional[ActorContext] = None
        self.token: Optional[str] = None
        self._teardown: List[Callable[[], None]] = []

    @property
    def is_authenticated(self) -> bool:
        return self.actor is not None and bool(self.token)

    def start(self, user: Dict[str, Any], token: Optional[str]) -> ActorContext:
        self.actor = ActorContext.from_user(user)
        self.token = token
        logger.info("Session started", extra={"user_id": self.actor.id})
        return self.actor

    def on_teardown(self, callback: Callable[[], None]) -> None:
        if callback not in self._teardown:
            self._teardown.append(callback)

    def end(self) -> None:
        user_id = self.actor.id if self.actor else None
        self.actor = None
        self.token = None
        # callbacks stay registered for the next login in this browser session
        for callback in list(self._teardown):
            callback()
        logger.info("Session ended", extra={"user_id": user_id})


def get_session(session_state: MutableMapping[str, Any]) -> SessionContext:
    session = session_state.get(SESSION_KEY)
    if session is None:
        session = SessionContext()
        session_state[SESSION_KEY] = session
    return session


def is_logged_in(session_state: MutableMapping[str, Any]) -> bool:
    session = session_state.get(SESSION_KEY)
    return bool(session and session.is_authenticated)


def login(auth_api: AuthApi, session: SessionContext, email: str, password: str) -> Optional[str]:
    """Log in against the backend; returns an error message or None."""
    if not (email or "").strip() or not password:
        return "Email and password are required."

    resp = auth_api.login(email.strip(), password)
    if not resp.ok:
        if resp.status_code in (400, 401, 403):
            return "Invalid email or password."
        return "Login failed. Please try again."

    data = resp.data if isinstance(resp.data, dict) else {}
    token = data.get("token")
    user = data.get("user")
    if not token or not isinstance(user, dict):
        return "Login failed. Please try again."

    auth_api.client.set_token(token)
    session.start(user, token)
    return None


def logout(auth_api: AuthApi, session: SessionContext) -> None:
    if session.token:
        resp = auth_api.logout()
        if not resp.ok:
            logger.warning("Backend logout failed: %s", resp.error)
    auth_api.client.set_token(None)
    session.end()
