from __future__ import annotations

from .navigation import build_sidebar
from .routing import default_path, get_default_route


def app_navigation(request):
    console = getattr(request, "console", None)
    if console is None or not console.is_authenticated:
        return {"app_navigation": [], "menu_tree_status": None, "default_route": default_path()}

    state = console.menu_state()
    return {
        "app_navigation": build_sidebar(state.nodes, request.path),
        "menu_tree_status": state.status.value,
        "default_route": get_default_route(state.nodes),
    }
