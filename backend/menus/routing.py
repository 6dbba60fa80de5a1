"""Derive the page route table from a permitted menu tree.

The sidebar and the route table read the same tree through the same
predicates, so a node is either reachable from both or from neither:

* a *menu entry* is a ``menu``-typed node that is neither hidden nor
  inactive; other nodes are pruned together with their subtree;
* a *displayable* entry has a path or at least one displayable child;
* a *routable* entry has a path and a registered page component.

Siblings are visited in ascending ``sort_order``; ties keep tree order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from django.conf import settings

from .models import Menu, normalize_menu_path
from .registry import PageComponent, is_resolvable, resolve_component, to_page_component
from .tree import MenuNode

logger = logging.getLogger(__name__)

DEFAULT_PATH_FALLBACK = "/dashboard"


def default_path() -> str:
    return getattr(settings, "CONSOLE_DEFAULT_PATH", DEFAULT_PATH_FALLBACK)


def normalize_path(path: str | None) -> str:
    return normalize_menu_path(path) or "/"


def is_menu_entry(node: MenuNode) -> bool:
    return node.menu_type == Menu.MenuType.MENU and not node.is_hidden and node.is_active


def is_displayable(node: MenuNode) -> bool:
    if not is_menu_entry(node):
        return False
    if node.path:
        return True
    return any(is_displayable(child) for child in node.children)


def is_routable(node: MenuNode) -> bool:
    return is_menu_entry(node) and bool(node.path) and is_resolvable(node.component)


def ordered(nodes: Iterable[MenuNode]) -> list[MenuNode]:
    return sorted(nodes, key=lambda node: node.sort_order)


def _iter_menu_entries(nodes: Iterable[MenuNode]) -> Iterator[MenuNode]:
    for node in ordered(nodes):
        if not is_menu_entry(node):
            continue
        yield node
        yield from _iter_menu_entries(node.children)


class LazyPage:
    """Page view imported on its first request."""

    def __init__(self, component: PageComponent):
        self.component = component
        self.__name__ = f"lazy_{component.name.lower()}"

    def __call__(self, request, *args, **kwargs):
        view = resolve_component(self.component)
        return view(request, *args, **kwargs)

    def __repr__(self) -> str:
        return f"<LazyPage {self.component.value}>"


@dataclass(frozen=True)
class GeneratedRoute:
    path: str
    component: PageComponent
    node_id: int
    view: Callable


def _guarded_page(path: str, component: PageComponent) -> Callable:
    from .guards import route_guard

    return route_guard(LazyPage(component), required_path=path)


def generate_routes_from_menus(nodes: Iterable[MenuNode]) -> list[GeneratedRoute]:
    """Flatten the tree into guarded page routes, parents before children.

    Nodes whose component is missing or unknown are skipped with a warning;
    their children are still visited.
    """
    routes: list[GeneratedRoute] = []
    for node in _iter_menu_entries(nodes):
        if not node.path:
            continue
        component = to_page_component(node.component)
        if component is None or not is_resolvable(node.component):
            logger.warning(
                "No page component registered for '%s' (menu %s '%s'); route %s skipped.",
                node.component,
                node.id,
                node.name,
                node.path,
            )
            continue
        routes.append(
            GeneratedRoute(
                path=node.path,
                component=component,
                node_id=node.id,
                view=_guarded_page(node.path, component),
            )
        )
    return routes


def get_default_route(nodes: Iterable[MenuNode]) -> str:
    for node in _iter_menu_entries(nodes):
        if is_routable(node):
            return node.path
    return default_path()


def validate_route_access(path: str, nodes: Iterable[MenuNode]) -> bool:
    """True when some node of the tree has exactly ``path``."""
    for node in nodes:
        if node.path and normalize_menu_path(node.path) == path:
            return True
        if node.children and validate_route_access(path, node.children):
            return True
    return False


def find_route(path: str, routes: Iterable[GeneratedRoute]) -> GeneratedRoute | None:
    for route in routes:
        if normalize_path(route.path) == path:
            return route
    return None


def resolve_page_path(nodes: Iterable[MenuNode], *components: PageComponent) -> str | None:
    """Path of the first routable node opening any of ``components``."""
    wanted = {component.value for component in components}
    for node in _iter_menu_entries(nodes):
        if node.component in wanted and is_routable(node):
            return node.path
    return None
