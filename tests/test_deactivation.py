"""Deactivating a catalog entry invalidates existing grants at check time.

The grant rows themselves are left untouched so they remain available for
audit; the live check additionally requires the permission to be active.
"""

from __future__ import annotations

import pytest

from permission_engine.services.authorization import AuthorizationEngine, PermissionInactiveError


@pytest.fixture()
def holders(auth_engine: AuthorizationEngine, make_user):
    permission = auth_engine.catalog.create_permission("Manage Orders", None, "orders", "manage")
    user_ids = [make_user(f"holder-{index}") for index in range(3)]
    for user_id in user_ids:
        auth_engine.grant(user_id, permission.id, granted_by=1)
    return permission, user_ids


def test_deactivation_denies_existing_holders(auth_engine: AuthorizationEngine, holders) -> None:
    permission, user_ids = holders
    assert all(auth_engine.has_permission(user_id, "orders", "manage") for user_id in user_ids)

    auth_engine.catalog.deactivate_permission(permission.id, actor_id=1)

    for user_id in user_ids:
        assert auth_engine.has_permission(user_id, "orders", "manage") is False
        assert auth_engine.has_permission_by_name(user_id, "Manage Orders") is False
        assert list(auth_engine.effective_permissions(user_id)) == []


def test_deactivation_keeps_grant_rows_for_audit(auth_engine: AuthorizationEngine, holders) -> None:
    permission, user_ids = holders

    auth_engine.catalog.deactivate_permission(permission.id)

    grants = auth_engine.list_permission_holders(permission.id)
    assert sorted(grant.user_id for grant in grants) == sorted(user_ids)
    assert all(grant.is_active for grant in grants)
    assert all(grant.revoked_at is None for grant in grants)
    for user_id in user_ids:
        assert len(auth_engine.list_grants(user_id)) == 1


def test_deactivated_permission_cannot_be_granted_but_can_be_revoked(auth_engine: AuthorizationEngine, holders, make_user) -> None:
    permission, user_ids = holders
    auth_engine.catalog.deactivate_permission(permission.id)
    newcomer = make_user("newcomer")

    with pytest.raises(PermissionInactiveError):
        auth_engine.grant(newcomer, permission.id, granted_by=1)

    revoked = auth_engine.revoke(user_ids[0], permission.id, revoked_by=1, reason="capability retired")
    assert revoked.is_active is False
