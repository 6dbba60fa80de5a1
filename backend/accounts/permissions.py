from __future__ import annotations

from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect

USER_MANAGE = "system:user:manage"
ROLE_MANAGE = "system:role:manage"
PERMISSION_MANAGE = "system:permission:manage"
MENU_MANAGE = "system:menu:manage"
INFLUENCER_MANAGE = "influencer:manage"
INFLUENCER_EXPORT = "influencer:export"
CONTACT_MANAGE = "contact:manage"
CONTACT_EXPORT = "contact:export"
COOPERATION_MANAGE = "cooperation:manage"
COOPERATION_EXPORT = "cooperation:export"


def _build_denial_message(*, action: str, area: str) -> str:
    if action == "access":
        return f"You do not have permission to access {area}."
    return f"You do not have permission to {action} {area}."


def has_permission(user, code: str) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return user.has_permission_code(code)


def require_permission(
    request: HttpRequest,
    code: str,
    *,
    redirect_to: str,
    area: str,
    action: str = "manage",
) -> HttpResponse | None:
    if has_permission(request.user, code):
        return None

    messages.error(request, _build_denial_message(action=action, area=area))
    return redirect(redirect_to)
