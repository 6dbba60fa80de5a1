from __future__ import annotations

from django import template

from accounts.permissions import has_permission as user_has_permission


register = template.Library()


@register.simple_tag
def replace_query(request, **kwargs) -> str:
    params = request.GET.copy()
    for key, value in kwargs.items():
        if value in {None, ""}:
            params.pop(key, None)
            continue
        params[key] = str(value)

    encoded = params.urlencode()
    return f"?{encoded}" if encoded else ""


@register.filter
def has_permission(user, code: str) -> bool:
    """``{% if request.user|has_permission:"influencer:manage" %}``"""
    return user_has_permission(user, code)
