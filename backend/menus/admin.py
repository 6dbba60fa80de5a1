from django.contrib import admin

from .models import Menu


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    list_display = ("title", "name", "path", "component", "menu_type", "parent", "sort_order", "is_hidden", "is_active")
    list_filter = ("menu_type", "is_hidden", "is_active")
    search_fields = ("name", "title", "path", "component")
