from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .routing import is_displayable, normalize_path, ordered
from .tree import MenuNode

DEFAULT_ICON = "bi-grid"

# Menu rows store Ant Design icon names; the console renders Bootstrap Icons.
ICONS: dict[str, str] = {
    "DashboardOutlined": "bi-speedometer2",
    "UserOutlined": "bi-person",
    "TeamOutlined": "bi-people",
    "SafetyOutlined": "bi-shield-check",
    "ControlOutlined": "bi-sliders",
    "AppstoreOutlined": "bi-grid",
    "SettingOutlined": "bi-gear",
    "MenuOutlined": "bi-list",
    "KeyOutlined": "bi-key",
    "ContactsOutlined": "bi-person-lines-fill",
    "MessageOutlined": "bi-chat-dots",
    "ShoppingOutlined": "bi-bag",
    "FileTextOutlined": "bi-file-earmark-text",
    "StarOutlined": "bi-star",
}


def resolve_icon(name: str | None) -> str:
    if not name:
        return DEFAULT_ICON
    return ICONS.get(name, DEFAULT_ICON)


@dataclass(frozen=True)
class SidebarItem:
    key: str
    label: str
    path: str | None
    icon: str
    is_active: bool = False
    is_open: bool = False
    children: tuple["SidebarItem", ...] = field(default=())

    @property
    def is_folder(self) -> bool:
        return bool(self.children)


def build_sidebar(nodes: Iterable[MenuNode], current_path: str | None = None) -> list[SidebarItem]:
    """Sidebar entries for the displayable part of a permitted tree.

    A node with a path and children is both a link and a folder.
    """
    current = normalize_path(current_path) if current_path else ""
    items: list[SidebarItem] = []
    for node in ordered(nodes):
        if not is_displayable(node):
            continue
        children = tuple(build_sidebar(node.children, current_path))
        is_active = bool(node.path) and node.path == current
        items.append(
            SidebarItem(
                key=node.path or f"menu-{node.id}",
                label=node.title,
                path=node.path,
                icon=resolve_icon(node.icon),
                is_active=is_active,
                is_open=any(child.is_active or child.is_open for child in children),
                children=children,
            )
        )
    return items
