from __future__ import annotations

import importlib.util
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from permission_engine.core.database import session_scope
from permission_engine.models import PermissionGrant

SCRIPT_PATH = Path(__file__).resolve().parents[1] / "scripts" / "sweep_expired_grants.py"


@pytest.fixture()
def sweep_script():
    module_spec = importlib.util.spec_from_file_location("sweep_expired_grants", SCRIPT_PATH)
    module = importlib.util.module_from_spec(module_spec)
    assert module_spec.loader is not None
    module_spec.loader.exec_module(module)
    return module


@pytest.fixture()
def expiring_grant(auth_engine, make_user, session, clock) -> int:
    user_id = make_user("temp")
    permission = auth_engine.catalog.create_permission("View Reports", None, "reports", "view")
    grant = auth_engine.grant(user_id, permission.id, granted_by=user_id, expires_at=clock() + timedelta(hours=1))
    session.commit()
    return grant.id


def _is_active(grant_id: int) -> bool:
    with session_scope() as session:
        return session.get(PermissionGrant, grant_id).is_active


def test_sweep_script_honours_cutoff(sweep_script, expiring_grant: int) -> None:
    before = datetime(2026, 1, 1, 12, 30, tzinfo=timezone.utc).isoformat()
    after = datetime(2026, 1, 1, 14, 0, tzinfo=timezone.utc).isoformat()

    assert sweep_script.main(["--as-of", before]) == 0
    assert _is_active(expiring_grant) is True

    assert sweep_script.main(["--as-of", after, "--verbose"]) == 0
    assert _is_active(expiring_grant) is False


def test_parse_args_defaults(sweep_script) -> None:
    args = sweep_script.parse_args([])
    assert args.as_of is None
    assert args.user_id is None
    assert args.verbose is False
