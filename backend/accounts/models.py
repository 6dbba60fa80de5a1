from django.contrib.auth.models import AbstractUser
from django.db import models


class Permission(models.Model):
    class PermissionType(models.TextChoices):
        MENU = "menu", "Menu"
        API = "api", "API"
        BUTTON = "button", "Button"

    name = models.CharField(max_length=100)
    code = models.CharField(max_length=100, unique=True)
    permission_type = models.CharField(
        max_length=16,
        choices=PermissionType.choices,
        default=PermissionType.BUTTON,
    )
    description = models.CharField(max_length=255, blank=True)
    module = models.CharField(max_length=64, blank=True)
    api_path = models.CharField(max_length=200, blank=True)
    api_method = models.CharField(max_length=10, blank=True)
    menu = models.ForeignKey(
        "menus.Menu",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="permissions",
    )
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["module", "code"]

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class Role(models.Model):
    name = models.CharField(max_length=64)
    code = models.CharField(max_length=64, unique=True)
    description = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    menus = models.ManyToManyField("menus.Menu", blank=True, related_name="roles")
    permissions = models.ManyToManyField(Permission, blank=True, related_name="roles")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    full_name = models.CharField(max_length=150, blank=True)
    roles = models.ManyToManyField(Role, blank=True, related_name="users")

    @property
    def display_name(self) -> str:
        return self.full_name or self.get_full_name() or self.username

    def permission_codes(self) -> frozenset[str]:
        cached = getattr(self, "_permission_codes", None)
        if cached is None:
            cached = frozenset(
                Permission.objects.filter(
                    is_active=True,
                    roles__users=self,
                    roles__is_active=True,
                ).values_list("code", flat=True)
            )
            self._permission_codes = cached
        return cached

    def has_permission_code(self, code: str) -> bool:
        if not self.is_active:
            return False
        if self.is_superuser:
            return True
        return code in self.permission_codes()
