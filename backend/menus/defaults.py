"""Default menu tree, permissions and roles of a fresh console."""

from __future__ import annotations

from django.db import transaction

from accounts import permissions as codes
from accounts.models import Permission, Role

from .models import Menu
from .registry import PageComponent

DEFAULT_MENUS: tuple[dict, ...] = (
    {
        "name": "dashboard",
        "title": "Dashboard",
        "path": "/dashboard",
        "icon": "DashboardOutlined",
        "component": PageComponent.DASHBOARD,
        "sort_order": 1,
    },
    {
        "name": "influencer-center",
        "title": "Influencers",
        "icon": "TeamOutlined",
        "sort_order": 2,
        "children": (
            {
                "name": "influencers",
                "title": "Influencer List",
                "path": "/influencers",
                "icon": "StarOutlined",
                "component": PageComponent.INFLUENCER_MANAGEMENT,
                "sort_order": 1,
                "children": (
                    {
                        "name": "influencers-export",
                        "title": "Export influencers",
                        "menu_type": Menu.MenuType.BUTTON,
                        "sort_order": 1,
                    },
                ),
            },
            {
                "name": "contact-records",
                "title": "Contact Records",
                "path": "/contact-records",
                "icon": "MessageOutlined",
                "component": PageComponent.CONTACT_RECORD_MANAGEMENT,
                "sort_order": 2,
            },
            {
                "name": "cooperation-records",
                "title": "Cooperation Records",
                "path": "/cooperation-records",
                "icon": "FileTextOutlined",
                "component": PageComponent.COOPERATION_RECORD_MANAGEMENT,
                "sort_order": 3,
            },
            {
                "name": "cooperation-products",
                "title": "Cooperation Products",
                "path": "/cooperation-products",
                "icon": "ShoppingOutlined",
                "component": PageComponent.COOPERATION_PRODUCT_MANAGEMENT,
                "sort_order": 4,
            },
        ),
    },
    {
        "name": "system",
        "title": "System",
        "icon": "SettingOutlined",
        "sort_order": 9,
        "children": (
            {
                "name": "users",
                "title": "Users",
                "path": "/system/users",
                "icon": "UserOutlined",
                "component": PageComponent.USER_MANAGEMENT,
                "sort_order": 1,
            },
            {
                "name": "roles",
                "title": "Roles",
                "path": "/system/roles",
                "icon": "SafetyOutlined",
                "component": PageComponent.ROLE_MANAGEMENT,
                "sort_order": 2,
            },
            {
                "name": "permissions",
                "title": "Permissions",
                "path": "/system/permissions",
                "icon": "KeyOutlined",
                "component": PageComponent.PERMISSION_MANAGEMENT,
                "sort_order": 3,
            },
            {
                "name": "menus",
                "title": "Menus",
                "path": "/system/menus",
                "icon": "MenuOutlined",
                "component": PageComponent.MENU_MANAGEMENT,
                "sort_order": 4,
            },
        ),
    },
)

# (code, name, module, menu name)
DEFAULT_PERMISSIONS: tuple[tuple[str, str, str, str], ...] = (
    (codes.USER_MANAGE, "Manage users", "system", "users"),
    (codes.ROLE_MANAGE, "Manage roles", "system", "roles"),
    (codes.PERMISSION_MANAGE, "Manage permissions", "system", "permissions"),
    (codes.MENU_MANAGE, "Manage menus", "system", "menus"),
    (codes.INFLUENCER_MANAGE, "Manage influencers", "influencer", "influencers"),
    (codes.INFLUENCER_EXPORT, "Export influencers", "influencer", "influencers-export"),
    (codes.CONTACT_MANAGE, "Manage contact records", "contact", "contact-records"),
    (codes.CONTACT_EXPORT, "Export contact records", "contact", "contact-records"),
    (codes.COOPERATION_MANAGE, "Manage cooperation records", "cooperation", "cooperation-records"),
    (codes.COOPERATION_EXPORT, "Export cooperation records", "cooperation", "cooperation-records"),
)

# (code, name, description, menu names, permission codes); None grants everything.
DEFAULT_ROLES: tuple[tuple[str, str, str, tuple[str, ...] | None, tuple[str, ...] | None], ...] = (
    ("admin", "Administrator", "Full access to the console.", None, None),
    (
        "operator",
        "Influencer operator",
        "Runs outreach and cooperation with influencers.",
        (
            "dashboard",
            "influencers",
            "influencers-export",
            "contact-records",
            "cooperation-records",
            "cooperation-products",
        ),
        (
            codes.INFLUENCER_MANAGE,
            codes.INFLUENCER_EXPORT,
            codes.CONTACT_MANAGE,
            codes.CONTACT_EXPORT,
            codes.COOPERATION_MANAGE,
            codes.COOPERATION_EXPORT,
        ),
    ),
    (
        "viewer",
        "Viewer",
        "Read-only access to influencers and contact history.",
        ("dashboard", "influencers", "contact-records"),
        (),
    ),
)


def _install_menus(entries, parent: Menu | None = None) -> int:
    count = 0
    for entry in entries:
        menu, _created = Menu.objects.update_or_create(
            name=entry["name"],
            defaults={
                "title": entry["title"],
                "path": entry.get("path", ""),
                "icon": entry.get("icon", ""),
                "component": entry.get("component", ""),
                "menu_type": entry.get("menu_type", Menu.MenuType.MENU),
                "sort_order": entry.get("sort_order", 0),
                "parent": parent,
            },
        )
        count += 1 + _install_menus(entry.get("children", ()), menu)
    return count


@transaction.atomic
def install_defaults() -> dict[str, int]:
    """Create or refresh the default menus, permissions and roles.

    Existing rows are matched by ``name``/``code``; nothing is deleted.
    """
    menu_count = _install_menus(DEFAULT_MENUS)
    menus_by_name = {menu.name: menu for menu in Menu.objects.all()}

    for code, name, module, menu_name in DEFAULT_PERMISSIONS:
        Permission.objects.update_or_create(
            code=code,
            defaults={
                "name": name,
                "module": module,
                "permission_type": Permission.PermissionType.BUTTON,
                "menu": menus_by_name.get(menu_name),
            },
        )

    for code, name, description, menu_names, permission_codes in DEFAULT_ROLES:
        role, _created = Role.objects.update_or_create(
            code=code,
            defaults={"name": name, "description": description},
        )
        if menu_names is None:
            role.menus.set(Menu.objects.all())
        else:
            role.menus.set([menus_by_name[menu_name] for menu_name in menu_names if menu_name in menus_by_name])
        if permission_codes is None:
            role.permissions.set(Permission.objects.all())
        else:
            role.permissions.set(Permission.objects.filter(code__in=permission_codes))

    return {
        "menus": menu_count,
        "permissions": len(DEFAULT_PERMISSIONS),
        "roles": len(DEFAULT_ROLES),
    }
