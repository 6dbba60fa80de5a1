from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.signals import user_logged_out
from django.db.models.signals import m2m_changed, post_delete, post_save
from django.dispatch import receiver

from accounts.models import Permission, Role

from .models import Menu
from .provider import MenuTreeProvider, invalidate_menu_trees

logger = logging.getLogger(__name__)

User = get_user_model()

TREE_SOURCES = (Menu, Role, Permission, User)


def _invalidate(sender, **kwargs):
    if kwargs.get("raw"):
        return
    invalidate_menu_trees()
    logger.debug("Menu trees invalidated by a %s change.", sender._meta.label)


def _invalidate_on_m2m(sender, action, **kwargs):
    if action in {"post_add", "post_remove", "post_clear"}:
        invalidate_menu_trees()


for model in TREE_SOURCES:
    post_save.connect(_invalidate, sender=model, dispatch_uid=f"menus-tree-save-{model._meta.label_lower}")
    post_delete.connect(_invalidate, sender=model, dispatch_uid=f"menus-tree-delete-{model._meta.label_lower}")

for through in (Role.menus.through, Role.permissions.through, User.roles.through):
    m2m_changed.connect(
        _invalidate_on_m2m,
        sender=through,
        dispatch_uid=f"menus-tree-m2m-{through._meta.label_lower}",
    )


@receiver(user_logged_out)
def discard_menu_tree(sender, request, user, **kwargs):
    if user is not None:
        MenuTreeProvider().discard(user.pk)
