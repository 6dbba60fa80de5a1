"""Page component registry.

Menus name the page they open through their ``component`` field. The set of
pages is closed: every :class:`PageComponent` member is mapped to the dotted
path of its view, and the ``menus.E001`` system check refuses to start the
project when a member is left without one. View modules are imported on
first resolution only.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

from django.core import checks
from django.db import models
from django.utils.module_loading import import_string


class PageComponent(models.TextChoices):
    DASHBOARD = "Dashboard", "Dashboard"
    USER_MANAGEMENT = "UserManagement", "User management"
    ROLE_MANAGEMENT = "RoleManagement", "Role management"
    PERMISSION_MANAGEMENT = "PermissionManagement", "Permission management"
    MENU_MANAGEMENT = "MenuManagement", "Menu management"
    INFLUENCER_MANAGEMENT = "InfluencerManagement", "Influencer management"
    EXPERT_MANAGEMENT = "ExpertManagement", "Expert management"
    CONTACT_RECORD_MANAGEMENT = "ContactRecordManagement", "Contact records"
    COOPERATION_RECORD_MANAGEMENT = "CooperationRecordManagement", "Cooperation records"
    COOPERATION_PRODUCT_MANAGEMENT = "CooperationProductManagement", "Cooperation products"


PAGE_VIEWS: dict[PageComponent, str] = {
    PageComponent.DASHBOARD: "dashboard.views.home",
    PageComponent.USER_MANAGEMENT: "accounts.views.user_list_create",
    PageComponent.ROLE_MANAGEMENT: "accounts.views.role_list_create",
    PageComponent.PERMISSION_MANAGEMENT: "accounts.views.permission_list_create",
    PageComponent.MENU_MANAGEMENT: "menus.views.menu_list_create",
    PageComponent.INFLUENCER_MANAGEMENT: "influencers.views.influencer_list_create",
    # Experts are influencers under their older name.
    PageComponent.EXPERT_MANAGEMENT: "influencers.views.influencer_list_create",
    PageComponent.CONTACT_RECORD_MANAGEMENT: "contacts.views.contact_record_list_create",
    PageComponent.COOPERATION_RECORD_MANAGEMENT: "cooperation.views.cooperation_record_list_create",
    PageComponent.COOPERATION_PRODUCT_MANAGEMENT: "cooperation.views.cooperation_product_list",
}


def to_page_component(name: str | None) -> PageComponent | None:
    if not name:
        return None
    try:
        return PageComponent(name)
    except ValueError:
        return None


@lru_cache(maxsize=None)
def _load_view(dotted_path: str) -> Callable:
    return import_string(dotted_path)


def resolve_component(name: str | None) -> Callable | None:
    """Return the page view registered under ``name``, or ``None``."""
    component = to_page_component(name)
    if component is None:
        return None
    dotted_path = PAGE_VIEWS.get(component)
    if dotted_path is None:
        return None
    return _load_view(dotted_path)


def is_resolvable(name: str | None) -> bool:
    component = to_page_component(name)
    return component is not None and component in PAGE_VIEWS


def check_page_registry(app_configs=None, **kwargs) -> list[checks.CheckMessage]:
    errors: list[checks.CheckMessage] = []
    for component in PageComponent:
        dotted_path = PAGE_VIEWS.get(component)
        if dotted_path is None:
            errors.append(
                checks.Error(
                    f"Page component '{component.value}' has no view registered.",
                    hint="Add it to menus.registry.PAGE_VIEWS.",
                    id="menus.E001",
                )
            )
            continue
        try:
            _load_view(dotted_path)
        except ImportError as exc:
            errors.append(
                checks.Error(
                    f"View '{dotted_path}' for page component '{component.value}' cannot be imported: {exc}",
                    id="menus.E002",
                )
            )
    return errors
