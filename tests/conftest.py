import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("PE_ENVIRONMENT", "test")
os.environ.setdefault("PE_DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("PE_LOG_JSON", "false")

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from permission_engine.core.config import get_settings  # noqa: E402

get_settings.cache_clear()

from permission_engine.core.database import engine, session_scope  # noqa: E402
from permission_engine.main import create_app  # noqa: E402
from permission_engine.models import Base, User, UserRole  # noqa: E402
from permission_engine.services.authorization import AuthorizationEngine  # noqa: E402


class FrozenClock:
    """Manually advanced clock injected into the authorization engine."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def session():
    with session_scope() as db_session:
        yield db_session


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture()
def auth_engine(session, clock) -> AuthorizationEngine:
    return AuthorizationEngine(session, clock=clock)


@pytest.fixture()
def make_user(session) -> Callable[..., int]:
    def _make_user(username: str, role: UserRole = UserRole.CUSTOMER) -> int:
        user = User(username=username, role=role)
        session.add(user)
        session.flush()
        return user.id

    return _make_user


@pytest.fixture()
def bootstrap_users() -> Dict[str, int]:
    """Users that exist before the app starts so the lifespan seeder grants their defaults."""

    ids: Dict[str, int] = {}
    with session_scope() as db_session:
        for username, role in (
            ("admin", UserRole.ADMIN),
            ("shop", UserRole.SHOP),
            ("customer", UserRole.CUSTOMER),
            ("bob", UserRole.CUSTOMER),
        ):
            user = User(username=username, role=role)
            db_session.add(user)
            db_session.flush()
            ids[username] = user.id
    return ids


@pytest.fixture()
def client(bootstrap_users) -> TestClient:  # noqa: ANN001
    app = create_app()
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def admin_headers(bootstrap_users) -> Dict[str, str]:
    return {"X-Actor-Id": str(bootstrap_users["admin"])}
