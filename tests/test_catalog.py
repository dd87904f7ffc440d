from __future__ import annotations

import pytest

from permission_engine.services.audit import AuditService
from permission_engine.services.catalog import (
    DuplicatePermissionNameError,
    DuplicateResourceActionError,
    PermissionCatalog,
    PermissionNotFoundError,
)


@pytest.fixture()
def catalog(session) -> PermissionCatalog:
    return PermissionCatalog(session)


def test_create_permission_is_active_and_found_by_name(catalog: PermissionCatalog) -> None:
    created = catalog.create_permission("Manage Shops", "Full shop management access", "shops", "manage")

    found = catalog.get_by_name("Manage Shops")
    assert found is not None
    assert found.id == created.id
    assert found.is_active is True
    assert found.resource == "shops"
    assert found.action == "manage"
    assert found.full_permission == "shops:manage"


def test_create_rejects_duplicate_name(catalog: PermissionCatalog) -> None:
    catalog.create_permission("Manage Shops", None, "shops", "manage")

    with pytest.raises(DuplicatePermissionNameError):
        catalog.create_permission("Manage Shops", None, "shops", "administer")


def test_create_rejects_duplicate_resource_action_even_when_inactive(catalog: PermissionCatalog) -> None:
    original = catalog.create_permission("View Shops", None, "shops", "view")
    catalog.deactivate_permission(original.id)

    with pytest.raises(DuplicateResourceActionError):
        catalog.create_permission("Browse Shops", None, "shops", "view")


def test_update_permission_changes_fields(catalog: PermissionCatalog) -> None:
    permission = catalog.create_permission("Edit Shops", "Edit shop information", "shops", "edit")

    updated = catalog.update_permission(permission.id, "Modify Shops", "Change shop details", "shops", "modify")

    assert updated.id == permission.id
    assert updated.name == "Modify Shops"
    assert updated.description == "Change shop details"
    assert updated.full_permission == "shops:modify"
    assert catalog.get_by_name("Edit Shops") is None


def test_update_permission_keeping_own_name_is_allowed(catalog: PermissionCatalog) -> None:
    permission = catalog.create_permission("View Orders", "old", "orders", "view")

    updated = catalog.update_permission(permission.id, "View Orders", "new", "orders", "view")

    assert updated.description == "new"


def test_update_permission_rejects_name_of_other_entry(catalog: PermissionCatalog) -> None:
    catalog.create_permission("View Orders", None, "orders", "view")
    other = catalog.create_permission("Edit Orders", None, "orders", "edit")

    with pytest.raises(DuplicatePermissionNameError):
        catalog.update_permission(other.id, "View Orders", None, "orders", "edit")


def test_update_permission_rejects_pair_of_other_entry(catalog: PermissionCatalog) -> None:
    catalog.create_permission("View Orders", None, "orders", "view")
    other = catalog.create_permission("Edit Orders", None, "orders", "edit")

    with pytest.raises(DuplicateResourceActionError):
        catalog.update_permission(other.id, "Edit Orders", None, "orders", "view")


def test_update_missing_permission_raises(catalog: PermissionCatalog) -> None:
    with pytest.raises(PermissionNotFoundError):
        catalog.update_permission(404, "Ghost", None, "ghosts", "haunt")


def test_deactivate_is_idempotent(catalog: PermissionCatalog, session) -> None:
    permission = catalog.create_permission("Export Data", None, "data", "export")

    first = catalog.deactivate_permission(permission.id, actor_id=1)
    second = catalog.deactivate_permission(permission.id, actor_id=1)

    assert first.is_active is False
    assert second.is_active is False
    assert catalog.get_by_id(permission.id).is_active is False
    entries = AuditService(session).list_entries(subject_type="permission", action="permission.deactivate")
    assert len(entries) == 1


def test_deactivate_missing_permission_raises(catalog: PermissionCatalog) -> None:
    with pytest.raises(PermissionNotFoundError):
        catalog.deactivate_permission(12345)


def test_listing_filters(catalog: PermissionCatalog) -> None:
    catalog.create_permission("View Shops", "View shop information", "shops", "view")
    edit = catalog.create_permission("Edit Shops", "Edit shop information", "shops", "edit")
    catalog.create_permission("View Cart", "View cart contents", "cart", "view")
    catalog.deactivate_permission(edit.id)

    assert {p.name for p in catalog.list_all()} == {"View Shops", "Edit Shops", "View Cart"}
    assert {p.name for p in catalog.list_active()} == {"View Shops", "View Cart"}
    assert [p.name for p in catalog.list_by_resource("shops")] == ["View Shops"]
    assert catalog.list_by_resource("unknown") == []


def test_search_matches_name_or_description_case_insensitively(catalog: PermissionCatalog) -> None:
    catalog.create_permission("View Shops", "View shop information", "shops", "view")
    catalog.create_permission("Manage Cart", "Full cart management access", "cart", "manage")
    catalog.create_permission("Export Data", "Export 100% of system data", "data", "export")

    assert {p.name for p in catalog.search("shop")} == {"View Shops"}
    assert {p.name for p in catalog.search("MANAGEMENT")} == {"Manage Cart"}
    assert {p.name for p in catalog.search("100%")} == {"Export Data"}
    assert catalog.search("nothing-matches") == []


def test_catalog_mutations_are_audited(catalog: PermissionCatalog, session) -> None:
    permission = catalog.create_permission("View Reports", None, "reports", "view", actor_id=7)
    catalog.update_permission(permission.id, "View Reports", "Reporting", "reports", "view", actor_id=7)

    entries = AuditService(session).list_entries(subject_type="permission", subject_id=permission.id)

    assert [entry.action for entry in entries] == ["permission.create", "permission.update"]
    assert all(entry.actor_id == 7 for entry in entries)
    assert entries[1].details["after"]["description"] == "Reporting"


def test_storage_level_pair_collision_is_reported_as_pair_duplicate(catalog: PermissionCatalog, monkeypatch) -> None:
    catalog.create_permission("View Shops", None, "shops", "view")
    edit = catalog.create_permission("Edit Shops", None, "shops", "edit")
    monkeypatch.setattr(catalog, "_find_by_resource_action", lambda resource, action: None)

    with pytest.raises(DuplicateResourceActionError):
        catalog.create_permission("Browse Shops", None, "shops", "view")

    assert catalog.get_by_name("Browse Shops") is None
    assert catalog.get_by_name("Edit Shops").id == edit.id
    assert len(catalog.list_all()) == 2
