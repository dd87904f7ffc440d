"""User identity lookups consumed by the authorization engine."""

from __future__ import annotations

from typing import Optional, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from permission_engine.models.user import User


class UserDirectory(Protocol):
    """Contract for confirming that a user id refers to a known user."""

    def exists(self, user_id: int) -> bool:
        ...


class SqlUserDirectory(UserDirectory):
    """Resolves users from the local ``users`` table."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def exists(self, user_id: int) -> bool:
        return self._session.get(User, user_id) is not None

    def find_by_username(self, username: str) -> Optional[User]:
        return self._session.scalar(select(User).where(User.username == username))
