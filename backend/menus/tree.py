from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Mapping

from .models import Menu, normalize_menu_path


@dataclass(frozen=True)
class MenuNode:
    """Read-only snapshot of one menu entry and its subtree."""

    id: int
    name: str
    title: str
    path: str | None = None
    icon: str | None = None
    component: str | None = None
    menu_type: str = Menu.MenuType.MENU
    is_hidden: bool = False
    is_active: bool = True
    sort_order: int = 0
    parent_id: int | None = None
    children: tuple[MenuNode, ...] = field(default=())

    @classmethod
    def from_menu(cls, menu: Menu, children: Iterable[MenuNode] = ()) -> MenuNode:
        return cls(
            id=menu.pk,
            name=menu.name,
            title=menu.title,
            path=normalize_menu_path(menu.path) or None,
            icon=menu.icon or None,
            component=menu.component or None,
            menu_type=menu.menu_type,
            is_hidden=menu.is_hidden,
            is_active=menu.is_active,
            sort_order=menu.sort_order,
            parent_id=menu.parent_id,
            children=tuple(children),
        )

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> MenuNode:
        name = str(payload.get("name") or "")
        return cls(
            id=int(payload.get("id") or 0),
            name=name,
            title=str(payload.get("title") or name),
            path=normalize_menu_path(payload.get("path")) or None,
            icon=payload.get("icon") or None,
            component=payload.get("component") or None,
            menu_type=payload.get("menu_type") or Menu.MenuType.MENU,
            is_hidden=bool(payload.get("is_hidden", False)),
            is_active=bool(payload.get("is_active", True)),
            sort_order=int(payload.get("sort_order") or 0),
            parent_id=payload.get("parent_id"),
            children=tuple(cls.from_dict(child) for child in payload.get("children") or ()),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "path": self.path,
            "icon": self.icon,
            "component": self.component,
            "menu_type": self.menu_type,
            "is_hidden": self.is_hidden,
            "is_active": self.is_active,
            "sort_order": self.sort_order,
            "parent_id": self.parent_id,
            "children": [child.as_dict() for child in self.children],
        }

    def walk(self) -> Iterator[MenuNode]:
        yield self
        for child in self.children:
            yield from child.walk()


def iter_nodes(nodes: Iterable[MenuNode]) -> Iterator[MenuNode]:
    for node in nodes:
        yield from node.walk()


def nodes_from_payload(payload: Iterable[Mapping[str, Any]]) -> tuple[MenuNode, ...]:
    return tuple(MenuNode.from_dict(item) for item in payload)


def build_menu_tree(menus: Iterable[Menu]) -> tuple[MenuNode, ...]:
    """Nest flat menu rows by ``parent_id``.

    Rows whose parent is not part of ``menus`` become roots. Siblings are
    ordered by ``(sort_order, id)``.
    """
    rows = sorted(menus, key=lambda menu: (menu.sort_order, menu.pk))
    row_ids = {menu.pk for menu in rows}
    children_of: dict[int | None, list[Menu]] = {}
    for menu in rows:
        parent_key = menu.parent_id if menu.parent_id in row_ids else None
        children_of.setdefault(parent_key, []).append(menu)

    def assemble(parent_key: int | None, ancestry: frozenset[int]) -> tuple[MenuNode, ...]:
        nodes = []
        for menu in children_of.get(parent_key, []):
            if menu.pk in ancestry:
                continue
            children = assemble(menu.pk, ancestry | {menu.pk})
            nodes.append(MenuNode.from_menu(menu, children))
        return tuple(nodes)

    return assemble(None, frozenset())


def permitted_menu_queryset(user):
    """Active menus ``user`` may see, plus the ancestors that connect them.

    A menu below an inactive ancestor is withheld together with that
    ancestor's whole subtree.
    """
    if user is None or not getattr(user, "is_authenticated", False) or not user.is_active:
        return Menu.objects.none()

    active_menus = Menu.objects.filter(is_active=True)
    menu_rows = list(Menu.objects.values_list("id", "parent_id", "is_active"))
    parent_of = {menu_id: parent_id for menu_id, parent_id, _is_active in menu_rows}
    active_ids = {menu_id for menu_id, _parent_id, is_active in menu_rows if is_active}

    if user.is_superuser:
        granted_ids = set(active_ids)
    else:
        granted_ids = set(
            active_menus.filter(roles__users=user, roles__is_active=True).values_list("id", flat=True)
        )

    permitted: set[int] = set()
    for menu_id in granted_ids:
        chain: list[int] = []
        current: int | None = menu_id
        while current is not None and current not in chain:
            if current not in active_ids:
                chain = []
                break
            chain.append(current)
            current = parent_of.get(current)
        permitted.update(chain)

    return active_menus.filter(id__in=permitted)


def load_user_menu_tree(user) -> tuple[MenuNode, ...]:
    return build_menu_tree(permitted_menu_queryset(user))


def load_full_menu_tree() -> tuple[MenuNode, ...]:
    return build_menu_tree(Menu.objects.all())
