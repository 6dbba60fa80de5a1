from __future__ import annotations

from django.db import models


def normalize_menu_path(path: str | None) -> str:
    """Leading slash, no trailing slash. A blank path stays blank."""
    cleaned = (path or "").strip()
    if not cleaned:
        return ""
    if not cleaned.startswith("/"):
        cleaned = f"/{cleaned}"
    if len(cleaned) > 1:
        cleaned = cleaned.rstrip("/") or "/"
    return cleaned


class Menu(models.Model):
    class MenuType(models.TextChoices):
        MENU = "menu", "Menu"
        BUTTON = "button", "Button"

    name = models.CharField(max_length=100, unique=True)
    title = models.CharField(max_length=100)
    path = models.CharField(max_length=200, blank=True)
    icon = models.CharField(max_length=64, blank=True)
    component = models.CharField(
        max_length=100,
        blank=True,
        help_text="Symbolic page component, e.g. InfluencerManagement.",
    )
    description = models.CharField(max_length=255, blank=True)
    menu_type = models.CharField(max_length=16, choices=MenuType.choices, default=MenuType.MENU)
    parent = models.ForeignKey(
        "self",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="children",
    )
    sort_order = models.IntegerField(default=0)
    is_hidden = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["sort_order", "id"]
        indexes = [
            models.Index(fields=["parent", "sort_order"], name="menus_menu_parent_sort_idx"),
        ]

    def save(self, *args, **kwargs):
        self.path = normalize_menu_path(self.path)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        if self.path:
            return f"{self.title} ({self.path})"
        return self.title

    def ancestor_ids(self) -> list[int]:
        ids: list[int] = []
        seen: set[int] = {self.pk}
        current = self.parent
        while current is not None and current.pk not in seen:
            ids.append(current.pk)
            seen.add(current.pk)
            current = current.parent
        return ids
