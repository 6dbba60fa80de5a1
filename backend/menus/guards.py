"""Authentication-then-authorisation gate for console pages.

``require_menu_access`` follows the denial-helper convention used by the
views: it returns the response to send when access is refused and ``None``
when the request may proceed.
"""

from __future__ import annotations

import logging
from functools import wraps

from django.contrib import messages
from django.contrib.auth.views import redirect_to_login
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render

from accounts.session import get_console_session

from .registry import PageComponent
from .routing import default_path, normalize_path, resolve_page_path, validate_route_access

logger = logging.getLogger(__name__)

LOADING_RETRY_SECONDS = 1


def loading_response(request: HttpRequest) -> HttpResponse:
    response = render(
        request,
        "menus/loading.html",
        {"retry_after": LOADING_RETRY_SECONDS},
        status=503,
    )
    response["Retry-After"] = str(LOADING_RETRY_SECONDS)
    return response


def _deny(request: HttpRequest, target: str, fallback_path: str | None) -> HttpResponse:
    fallback = normalize_path(fallback_path or default_path())
    logger.info("Denied %s to user %s.", target, request.user.pk)
    if target == fallback:
        return render(request, "menus/forbidden.html", {"denied_path": target}, status=403)
    messages.error(request, "You do not have permission to access this page.")
    return redirect(fallback)


def _pre_checks(request: HttpRequest):
    """Return ``(response, state)``; a response means stop here."""
    console = get_console_session(request)
    if not console.is_authenticated:
        return redirect_to_login(request.get_full_path()), None

    state = console.menu_state()
    if state.is_loading:
        return loading_response(request), state
    if state.has_failed:
        messages.warning(request, "Navigation could not be loaded. Some pages may be unavailable.")
    return None, state


def require_menu_access(
    request: HttpRequest,
    required_path: str | None = None,
    *,
    fallback_path: str | None = None,
) -> HttpResponse | None:
    stop, state = _pre_checks(request)
    if stop:
        return stop

    target = normalize_path(required_path if required_path is not None else request.path)
    if validate_route_access(target, state.nodes):
        return None
    return _deny(request, target, fallback_path)


def route_guard(view=None, *, required_path: str | None = None, fallback_path: str | None = None):
    """Decorator form of :func:`require_menu_access`.

    Without ``required_path`` the request path itself is checked.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            denied = require_menu_access(request, required_path, fallback_path=fallback_path)
            if denied:
                return denied
            return view_func(request, *args, **kwargs)

        return wrapper

    if view is not None:
        return decorator(view)
    return decorator


def page_action(*components: PageComponent, fallback_path: str | None = None):
    """Guard a sub-action URL by the page it belongs to.

    The page path is looked up in the user's tree and stored on
    ``request.page_path`` so the view can return to the page afterwards.
    """

    def decorator(view_func):
        @wraps(view_func)
        def wrapper(request, *args, **kwargs):
            stop, state = _pre_checks(request)
            if stop:
                return stop

            page_path = resolve_page_path(state.nodes, *components)
            if page_path is None:
                return _deny(request, normalize_path(request.path), fallback_path)

            request.page_path = page_path
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator


def page_url(request: HttpRequest, *components: PageComponent) -> str:
    """Where a page or sub-action should send the user back to."""
    page_path = getattr(request, "page_path", None)
    if page_path:
        return page_path
    nodes = get_console_session(request).menu_state().nodes
    return resolve_page_path(nodes, *components) or default_path()
