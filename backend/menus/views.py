from __future__ import annotations

import logging

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.http import Http404, JsonResponse
from django.shortcuts import get_object_or_404, redirect, render
from django.views.decorators.http import require_http_methods

from accounts.permissions import MENU_MANAGE, has_permission, require_permission
from accounts.session import get_console_session

from .forms import MenuForm
from .guards import LOADING_RETRY_SECONDS, loading_response, page_action, page_url, require_menu_access
from .models import Menu
from .registry import PageComponent, is_resolvable
from .routing import find_route, generate_routes_from_menus, get_default_route, normalize_path, ordered
from .tree import load_full_menu_tree

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
def home(request):
    console = get_console_session(request)
    if not console.is_authenticated:
        return redirect_to_login(request.get_full_path())

    state = console.menu_state()
    if state.is_loading:
        return loading_response(request)
    return redirect(get_default_route(state.nodes))


@require_http_methods(["GET", "POST"])
def dispatch_page(request, page_path: str):
    """Open the console page whose menu path matches the request path."""
    path = normalize_path(page_path)
    state = get_console_session(request).menu_state()
    route = find_route(path, generate_routes_from_menus(state.nodes))
    if route is None:
        denied = require_menu_access(request, path)
        if denied:
            return denied
        logger.warning("Menu path %s is permitted but opens no registered page.", path)
        raise Http404("No page is registered for this menu.")

    request.page_path = route.path
    return route.view(request)


@require_http_methods(["GET"])
def user_menu_tree_api(request):
    console = get_console_session(request)
    if not console.is_authenticated:
        return JsonResponse({"detail": "Authentication credentials were not provided."}, status=401)

    state = console.menu_state()
    if state.is_loading:
        response = JsonResponse({"status": state.status.value, "menus": []}, status=503)
        response["Retry-After"] = str(LOADING_RETRY_SECONDS)
        return response

    return JsonResponse(
        {
            "status": state.status.value,
            "menus": [node.as_dict() for node in state.nodes],
            "default_route": get_default_route(state.nodes),
        }
    )


@require_http_methods(["GET"])
def menu_tree_api(request):
    console = get_console_session(request)
    if not console.is_authenticated:
        return JsonResponse({"detail": "Authentication credentials were not provided."}, status=401)
    if not has_permission(request.user, MENU_MANAGE):
        return JsonResponse({"detail": "You do not have permission to manage menus."}, status=403)

    return JsonResponse({"menus": [node.as_dict() for node in load_full_menu_tree()]})


def _flatten(nodes, depth: int = 0):
    for node in ordered(nodes):
        yield node, depth
        yield from _flatten(node.children, depth + 1)


@require_http_methods(["GET", "POST"])
def menu_list_create(request):
    page = page_url(request, PageComponent.MENU_MANAGEMENT)
    form = MenuForm(request.POST or None)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, MENU_MANAGE, redirect_to=page, area="menus")
        if denied:
            return denied

        if form.is_valid():
            menu = form.save()
            messages.success(request, f"Menu {menu.title} created.")
            return redirect(page)
        show_create_modal = True

    q_filter = request.GET.get("q", "").strip().lower()
    rows = []
    for node, depth in _flatten(load_full_menu_tree()):
        if q_filter and not any(q_filter in (value or "").lower() for value in (node.title, node.name, node.path)):
            continue
        rows.append(
            {
                "node": node,
                "depth": depth,
                "indent": depth * 1.5,
                "component_known": not node.component or is_resolvable(node.component),
            }
        )

    context = {
        "form": form,
        "menu_rows": rows,
        "can_manage": has_permission(request.user, MENU_MANAGE),
        "show_create_modal": show_create_modal,
        "filter_values": {"q": request.GET.get("q", "").strip()},
    }
    return render(request, "menus/menus.html", context)


@page_action(PageComponent.MENU_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def menu_edit(request, menu_id: int):
    page = page_url(request, PageComponent.MENU_MANAGEMENT)
    denied = require_permission(request, MENU_MANAGE, redirect_to=page, area="menus")
    if denied:
        return denied

    menu = get_object_or_404(Menu, pk=menu_id)
    form = MenuForm(request.POST or None, instance=menu)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Menu updated successfully.")
        return redirect(page)

    return render(request, "menus/menu_edit.html", {"form": form, "menu": menu, "page_path": page})


@page_action(PageComponent.MENU_MANAGEMENT)
@require_http_methods(["POST"])
def menu_delete(request, menu_id: int):
    page = page_url(request, PageComponent.MENU_MANAGEMENT)
    denied = require_permission(request, MENU_MANAGE, redirect_to=page, area="menus")
    if denied:
        return denied

    menu = get_object_or_404(Menu, pk=menu_id)
    child_count = menu.children.count()
    title = menu.title
    menu.delete()
    if child_count:
        messages.success(request, f"Menu {title} and its sub-menus deleted.")
    else:
        messages.success(request, f"Menu {title} deleted.")
    return redirect(page)
