from __future__ import annotations

import pytest

from permission_engine.services.authorization import AuthorizationEngine
from permission_engine.services.evaluator import (
    ByInstance,
    ByName,
    ByResourceAction,
    DecisionEvaluator,
    DecisionOutcome,
    InvalidContextError,
    parse_reference,
)


@pytest.fixture()
def evaluator(auth_engine: AuthorizationEngine) -> DecisionEvaluator:
    return DecisionEvaluator(auth_engine)


@pytest.fixture()
def shop_owner(auth_engine: AuthorizationEngine, make_user) -> int:
    catalog = auth_engine.catalog
    user_id = make_user("shop-owner")
    for name, resource, action in (
        ("View Shops", "shops", "view"),
        ("Edit Shops", "shops", "edit"),
        ("Manage Permissions", "permissions", "manage"),
        ("Shop Dashboard", "dashboard", "shop"),
        ("Edit Shop 7", "shops:7", "edit"),
    ):
        permission = catalog.create_permission(name, None, resource, action)
        auth_engine.grant(user_id, permission.id, granted_by=1)
    catalog.create_permission("Delete Shops", None, "shops", "delete")
    return user_id


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("shops:manage", ByResourceAction("shops", "manage")),
        (" shops : view ", ByResourceAction("shops", "view")),
        ("Manage Shops", ByName("Manage Shops")),
        ("shops:7:edit", ByName("shops:7:edit")),
        ("shops:", ByName("shops:")),
        (":view", ByName(":view")),
    ],
)
def test_parse_reference(raw: str, expected) -> None:
    assert parse_reference(raw) == expected


@pytest.mark.parametrize("raw", ["", "   "])
def test_parse_reference_rejects_blank(raw: str) -> None:
    with pytest.raises(InvalidContextError):
        parse_reference(raw)


def test_decide_by_name_and_resource_action(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    assert evaluator.decide(shop_owner, "View Shops") is True
    assert evaluator.decide(shop_owner, "shops:view") is True
    assert evaluator.decide(shop_owner, ByResourceAction("shops", "edit")) is True
    assert evaluator.decide(shop_owner, "Delete Shops") is False
    assert evaluator.decide(shop_owner, "shops:delete") is False


def test_unresolved_name_is_distinguished_from_denial(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    unresolved = evaluator.evaluate(shop_owner, "Launch Rockets")
    denied = evaluator.evaluate(shop_owner, "Delete Shops")

    assert unresolved.outcome is DecisionOutcome.UNRESOLVED
    assert unresolved.allowed is False
    assert unresolved.resource is None
    assert denied.outcome is DecisionOutcome.DENIED
    assert (denied.resource, denied.action) == ("shops", "delete")
    assert evaluator.decide(shop_owner, "Launch Rockets") is False


def test_instance_reference_composes_resource_key(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    own_shop = evaluator.evaluate(shop_owner, ByInstance("shops", 7, "edit"))
    other_shop = evaluator.evaluate(shop_owner, ByInstance("shops", 8, "edit"))

    assert own_shop.allowed is True
    assert own_shop.resource == "shops:7"
    assert other_shop.outcome is DecisionOutcome.DENIED
    assert other_shop.resource == "shops:8"


def test_missing_user_or_malformed_reference_raises(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    with pytest.raises(InvalidContextError):
        evaluator.decide(None, "shops:view")
    with pytest.raises(InvalidContextError):
        evaluator.decide(shop_owner, " ")
    with pytest.raises(InvalidContextError):
        evaluator.decide(shop_owner, ByResourceAction("", "view"))
    with pytest.raises(InvalidContextError):
        evaluator.decide(shop_owner, ByInstance("shops", "", "edit"))
    with pytest.raises(InvalidContextError):
        evaluator.decide(shop_owner, 42)  # type: ignore[arg-type]


def test_unknown_user_is_denied(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    assert evaluator.decide(shop_owner + 100, "shops:view") is False


def test_convenience_predicates(evaluator: DecisionEvaluator, shop_owner: int) -> None:
    assert evaluator.can_view_shops(shop_owner) is True
    assert evaluator.can_edit_shops(shop_owner) is True
    assert evaluator.can_create_shops(shop_owner) is False
    assert evaluator.can_delete_shops(shop_owner) is False
    assert evaluator.can_manage_users(shop_owner) is False
    assert evaluator.can_manage_permissions(shop_owner) is True
    assert evaluator.can_view_dashboard(shop_owner, "shop") is True
    assert evaluator.can_view_dashboard(shop_owner, "admin") is False
    assert evaluator.can_access_resource(shop_owner, "shops", "view") is True


@pytest.mark.parametrize(
    "reference",
    [ByName(""), ByName("   "), ByInstance("shops", None, "edit"), ByInstance("shops", " ", "edit")],
)
def test_malformed_tagged_references_raise(evaluator: DecisionEvaluator, shop_owner: int, reference) -> None:
    with pytest.raises(InvalidContextError):
        evaluator.evaluate(shop_owner, reference)
