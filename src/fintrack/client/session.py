"""Client-side session cache acting as the caller identity provider."""

from __future__ import annotations

import json
import time
from dataclasses import asdict, dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Protocol

from ..logging_config import get_logger

logger = get_logger(__name__)

SESSION_MAX_AGE = timedelta(days=7)


class IdentityProvider(Protocol):
    def get_user_id(self) -> Optional[int]:
        ...


@dataclass(frozen=True, slots=True)
class UserSession:
    id: int
    email: str
    name: str
    is_logged_in: bool
    login_time: float


class SessionStore:
    """Keeps the signed-in user between runs.

    Sessions live in a small JSON file when ``path`` is given, otherwise in
    memory. A session older than ``max_age`` is dropped on the next check.
    """

    def __init__(
        self,
        path: Path | None = None,
        *,
        clock: Callable[[], float] = time.time,
        max_age: timedelta = SESSION_MAX_AGE,
    ) -> None:
        self.path = path
        self._clock = clock
        self._max_age = max_age
        self._memory: Optional[dict[str, Any]] = None

    def login(self, user: Mapping[str, Any]) -> UserSession:
        """Store the session for ``user`` (the ``user`` object of a login response)."""

        session = UserSession(
            id=int(user["id"]),
            email=str(user.get("email") or ""),
            name=str(user.get("name") or ""),
            is_logged_in=True,
            login_time=self._clock(),
        )
        self._write(asdict(session))
        return session

    def get_session(self) -> Optional[UserSession]:
        data = self._read()
        if not data:
            return None
        try:
            return UserSession(
                id=int(data["id"]),
                email=str(data.get("email", "")),
                name=str(data.get("name", "")),
                is_logged_in=bool(data.get("is_logged_in")),
                login_time=float(data.get("login_time", 0)),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed session data")
            return None

    def is_authenticated(self) -> bool:
        session = self.get_session()
        return bool(session and session.is_logged_in and session.id)

    def is_session_valid(self) -> bool:
        """Return True for a logged-in session younger than ``max_age``; expire it otherwise."""

        session = self.get_session()
        if session is None:
            return False
        if self._clock() - session.login_time > self._max_age.total_seconds():
            logger.info("Session expired", extra={"user_id": session.id})
            self.logout()
            return False
        return self.is_authenticated()

    def get_user_id(self) -> Optional[int]:
        if not self.is_session_valid():
            return None
        session = self.get_session()
        return session.id if session else None

    def get_user(self) -> Optional[dict[str, Any]]:
        session = self.get_session()
        if session is None:
            return None
        return {"id": session.id, "email": session.email, "name": session.name}

    def logout(self) -> None:
        self._memory = None
        if self.path is not None:
            self.path.unlink(missing_ok=True)

    def _read(self) -> Optional[dict[str, Any]]:
        if self.path is None:
            return dict(self._memory) if self._memory else None
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Session file is not valid JSON", extra={"path": str(self.path)})
            return None
        return data if isinstance(data, dict) else None

    def _write(self, data: dict[str, Any]) -> None:
        if self.path is None:
            self._memory = dict(data)
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")
