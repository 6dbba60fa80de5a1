from __future__ import annotations

from django.contrib.auth import logout

from menus.provider import MenuTreeProvider, MenuTreeState


class ConsoleSession:
    """Per-request view of who is signed in and what they may open.

    Built by ``ConsoleSessionMiddleware`` from the Django session and torn
    down explicitly on logout.
    """

    def __init__(self, user, provider: MenuTreeProvider | None = None):
        self.user = user
        self.provider = provider or MenuTreeProvider()
        self._menu_state: MenuTreeState | None = None

    @classmethod
    def hydrate(cls, request) -> ConsoleSession:
        return cls(getattr(request, "user", None))

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and bool(getattr(self.user, "is_authenticated", False))

    @property
    def current_user_id(self) -> int | None:
        if not self.is_authenticated:
            return None
        return self.user.pk

    def menu_state(self) -> MenuTreeState:
        if self._menu_state is None:
            self._menu_state = self.provider.get(self.user if self.is_authenticated else None)
        return self._menu_state

    def refresh(self) -> MenuTreeState:
        if self.current_user_id is not None:
            self.provider.discard(self.current_user_id)
        self._menu_state = None
        return self.menu_state()

    def teardown(self, request) -> None:
        user_id = self.current_user_id
        if user_id is not None:
            self.provider.discard(user_id)
        self._menu_state = None
        logout(request)
        self.user = request.user


def get_console_session(request) -> ConsoleSession:
    console = getattr(request, "console", None)
    if console is None:
        console = ConsoleSession.hydrate(request)
        request.console = console
    return console
