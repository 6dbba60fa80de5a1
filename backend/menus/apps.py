from django.apps import AppConfig


class MenusConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "menus"

    def ready(self):
        from django.core import checks

        from . import signals  # noqa: F401
        from .registry import check_page_registry

        checks.register(check_page_registry)
