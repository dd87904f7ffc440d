"""System permission catalog and default role grants."""

from __future__ import annotations

from typing import Dict, List, NamedTuple

from permission_engine.models.user import UserRole


class PermissionDefinition(NamedTuple):
    name: str
    description: str
    resource: str
    action: str


SYSTEM_PERMISSIONS: List[PermissionDefinition] = [
    # User management
    PermissionDefinition("Manage Users", "Full user management access", "users", "manage"),
    PermissionDefinition("View Users", "View user information", "users", "view"),
    PermissionDefinition("Create Users", "Create new users", "users", "create"),
    PermissionDefinition("Edit Users", "Edit user information", "users", "edit"),
    PermissionDefinition("Delete Users", "Delete users", "users", "delete"),
    # Shops
    PermissionDefinition("Manage Shops", "Full shop management access", "shops", "manage"),
    PermissionDefinition("View Shops", "View shop information", "shops", "view"),
    PermissionDefinition("Create Shops", "Create new shops", "shops", "create"),
    PermissionDefinition("Edit Shops", "Edit shop information", "shops", "edit"),
    PermissionDefinition("Delete Shops", "Delete shops", "shops", "delete"),
    # Menu items
    PermissionDefinition("Manage Menu Items", "Full menu item management", "menu-items", "manage"),
    PermissionDefinition("View Menu Items", "View menu items", "menu-items", "view"),
    PermissionDefinition("Create Menu Items", "Create new menu items", "menu-items", "create"),
    PermissionDefinition("Edit Menu Items", "Edit menu items", "menu-items", "edit"),
    PermissionDefinition("Delete Menu Items", "Delete menu items", "menu-items", "delete"),
    # Orders
    PermissionDefinition("Manage Orders", "Full order management access", "orders", "manage"),
    PermissionDefinition("View Orders", "View order information", "orders", "view"),
    PermissionDefinition("Create Orders", "Create new orders", "orders", "create"),
    PermissionDefinition("Edit Orders", "Edit order information", "orders", "edit"),
    PermissionDefinition("Cancel Orders", "Cancel orders", "orders", "cancel"),
    # Dashboards
    PermissionDefinition("Admin Dashboard", "Access admin dashboard", "dashboard", "admin"),
    PermissionDefinition("Shop Dashboard", "Access shop dashboard", "dashboard", "shop"),
    PermissionDefinition("Customer Dashboard", "Access customer dashboard", "dashboard", "customer"),
    # Permission management
    PermissionDefinition("Manage Permissions", "Full permission management access", "permissions", "manage"),
    PermissionDefinition("View Permissions", "View permission information", "permissions", "view"),
    # Cart
    PermissionDefinition("Manage Cart", "Full cart management access", "cart", "manage"),
    PermissionDefinition("View Cart", "View cart contents", "cart", "view"),
    # Reporting
    PermissionDefinition("View Reports", "Access reporting features", "reports", "view"),
    PermissionDefinition("Export Data", "Export system data", "data", "export"),
]


def get_all_permission_names() -> List[str]:
    return [definition.name for definition in SYSTEM_PERMISSIONS]


def get_shop_permission_names() -> List[str]:
    return [
        "View Shops",
        "Edit Shops",
        "Manage Menu Items",
        "View Menu Items",
        "Create Menu Items",
        "Edit Menu Items",
        "Delete Menu Items",
        "View Orders",
        "Edit Orders",
        "Shop Dashboard",
        "View Cart",
    ]


def get_customer_permission_names() -> List[str]:
    return [
        "View Shops",
        "View Menu Items",
        "Create Orders",
        "View Orders",
        "Customer Dashboard",
        "Manage Cart",
        "View Cart",
    ]


DEFAULT_ROLE_PERMISSIONS: Dict[UserRole, List[str]] = {
    UserRole.ADMIN: get_all_permission_names(),
    UserRole.SHOP: get_shop_permission_names(),
    UserRole.CUSTOMER: get_customer_permission_names(),
}
