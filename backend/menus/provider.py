from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable

from django.conf import settings
from django.core.cache import caches
from django.db import DatabaseError

from .tree import MenuNode, load_user_menu_tree

logger = logging.getLogger(__name__)

VERSION_KEY = "menus:user-tree:version"


class MenuTreeStatus(enum.Enum):
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class MenuTreeState:
    status: MenuTreeStatus
    nodes: tuple[MenuNode, ...] = ()

    @property
    def is_loading(self) -> bool:
        return self.status is MenuTreeStatus.LOADING

    @property
    def is_ready(self) -> bool:
        return self.status is MenuTreeStatus.READY

    @property
    def has_failed(self) -> bool:
        return self.status is MenuTreeStatus.FAILED


def _cache():
    return caches["default"]


def _fresh_version() -> int:
    return int(time.time() * 1000)


def tree_version(cache=None) -> int:
    cache = cache or _cache()
    version = cache.get(VERSION_KEY)
    if version is None:
        cache.add(VERSION_KEY, _fresh_version(), timeout=None)
        version = cache.get(VERSION_KEY)
    return version


def invalidate_menu_trees(cache=None) -> None:
    """Retire every cached tree snapshot at once."""
    cache = cache or _cache()
    try:
        cache.incr(VERSION_KEY)
    except ValueError:
        cache.set(VERSION_KEY, _fresh_version(), timeout=None)


class MenuTreeProvider:
    """Per-user snapshot of the permitted menu tree.

    A snapshot lives in the cache for ``MENU_TREE_CACHE_SECONDS``. While one
    request builds a user's tree, other requests for the same user are told
    the tree is loading rather than starting a second build.
    """

    def __init__(
        self,
        cache=None,
        *,
        timeout: int | None = None,
        lock_timeout: int | None = None,
        loader: Callable[..., tuple[MenuNode, ...]] = load_user_menu_tree,
    ):
        self.cache = cache or _cache()
        self.timeout = timeout if timeout is not None else settings.MENU_TREE_CACHE_SECONDS
        self.lock_timeout = lock_timeout if lock_timeout is not None else settings.MENU_TREE_LOCK_SECONDS
        self.loader = loader

    def tree_key(self, user_id: int) -> str:
        return f"menus:user-tree:{tree_version(self.cache)}:{user_id}"

    def lock_key(self, user_id: int) -> str:
        return f"menus:user-tree:loading:{user_id}"

    def get(self, user) -> MenuTreeState:
        if user is None or not getattr(user, "is_authenticated", False):
            return MenuTreeState(MenuTreeStatus.READY)

        key = self.tree_key(user.pk)
        cached = self.cache.get(key)
        if cached is not None:
            return MenuTreeState(MenuTreeStatus.READY, cached)

        lock_key = self.lock_key(user.pk)
        if not self.cache.add(lock_key, True, timeout=self.lock_timeout):
            logger.debug("Menu tree for user %s is already being built.", user.pk)
            return MenuTreeState(MenuTreeStatus.LOADING)

        try:
            nodes = tuple(self.loader(user))
        except DatabaseError:
            logger.exception("Could not load the menu tree for user %s.", user.pk)
            return MenuTreeState(MenuTreeStatus.FAILED)
        finally:
            self.cache.delete(lock_key)

        self.cache.set(key, nodes, timeout=self.timeout)
        logger.debug("Menu tree for user %s loaded with %s root entries.", user.pk, len(nodes))
        return MenuTreeState(MenuTreeStatus.READY, nodes)

    def discard(self, user_id: int) -> None:
        self.cache.delete(self.tree_key(user_id))
        self.cache.delete(self.lock_key(user_id))
