from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .models import Permission, Role, User


@admin.register(User)
class CustomUserAdmin(UserAdmin):
    fieldsets = UserAdmin.fieldsets + (("Console", {"fields": ("full_name", "roles")}),)
    add_fieldsets = UserAdmin.add_fieldsets + (("Console", {"fields": ("full_name", "roles")}),)
    list_display = ("username", "full_name", "email", "is_active", "is_superuser")
    list_filter = ("roles", "is_active", "is_superuser")
    filter_horizontal = ("roles", "groups", "user_permissions")


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "code", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "code")
    filter_horizontal = ("menus", "permissions")


@admin.register(Permission)
class PermissionAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "permission_type", "module", "menu", "is_active")
    list_filter = ("permission_type", "module", "is_active")
    search_fields = ("code", "name", "api_path")
