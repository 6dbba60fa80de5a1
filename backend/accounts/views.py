from __future__ import annotations

from django.contrib import messages
from django.contrib.auth import login
from django.core.paginator import Paginator
from django.db.models import Count, Q
from django.db.models.deletion import ProtectedError
from django.shortcuts import get_object_or_404, redirect, render
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods

from menus.guards import page_action, page_url
from menus.registry import PageComponent

from .forms import LoginForm, PermissionForm, RoleForm, UserCreateForm, UserUpdateForm
from .models import Permission, Role, User
from .permissions import PERMISSION_MANAGE, ROLE_MANAGE, USER_MANAGE, has_permission, require_permission
from .session import get_console_session


def _safe_next(request) -> str | None:
    next_url = request.POST.get("next") or request.GET.get("next")
    if next_url and url_has_allowed_host_and_scheme(
        next_url,
        allowed_hosts={request.get_host()},
        require_https=request.is_secure(),
    ):
        return next_url
    return None


@require_http_methods(["GET", "POST"])
def login_view(request):
    if request.user.is_authenticated:
        return redirect(_safe_next(request) or "menus:home")

    form = LoginForm(request, data=request.POST or None)
    if request.method == "POST" and form.is_valid():
        login(request, form.get_user())
        return redirect(_safe_next(request) or "menus:home")

    return render(request, "accounts/login.html", {"form": form, "next": _safe_next(request) or ""})


@require_http_methods(["GET", "POST"])
def logout_view(request):
    get_console_session(request).teardown(request)
    messages.info(request, "You have been signed out.")
    return redirect("accounts:login")


def _get_user_sorting(sort_key: str, direction: str):
    sort_map = {
        "username": "username",
        "name": "full_name",
        "email": "email",
        "status": "is_active",
        "joined": "date_joined",
    }
    resolved_key = sort_key if sort_key in sort_map else "username"
    resolved_direction = direction if direction in {"asc", "desc"} else "asc"
    order_field = sort_map[resolved_key]
    if resolved_direction == "desc":
        order_field = f"-{order_field}"
    return resolved_key, resolved_direction, order_field


@require_http_methods(["GET", "POST"])
def user_list_create(request):
    page = page_url(request, PageComponent.USER_MANAGEMENT)
    form = UserCreateForm(request.POST or None)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, USER_MANAGE, redirect_to=page, area="users")
        if denied:
            return denied

        if form.is_valid():
            user = form.save()
            messages.success(request, f"User {user.username} created successfully.")
            return redirect(page)
        show_create_modal = True

    sort_key, sort_direction, order_field = _get_user_sorting(
        request.GET.get("sort", ""),
        request.GET.get("direction", ""),
    )
    q_filter = request.GET.get("q", "").strip()
    role_filter = request.GET.get("role", "").strip()

    users_qs = User.objects.prefetch_related("roles")
    if q_filter:
        users_qs = users_qs.filter(
            Q(username__icontains=q_filter) | Q(full_name__icontains=q_filter) | Q(email__icontains=q_filter)
        )
    if role_filter.isdigit():
        users_qs = users_qs.filter(roles__id=int(role_filter))

    paginator = Paginator(users_qs.order_by(order_field, "id").distinct(), 25)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "form": form,
        "users": page_obj.object_list,
        "page_obj": page_obj,
        "roles": Role.objects.order_by("id"),
        "can_manage": has_permission(request.user, USER_MANAGE),
        "show_create_modal": show_create_modal,
        "sort_key": sort_key,
        "sort_direction": sort_direction,
        "filter_values": {"q": q_filter, "role": role_filter},
    }
    return render(request, "accounts/users.html", context)


@page_action(PageComponent.USER_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def user_edit(request, user_id: int):
    page = page_url(request, PageComponent.USER_MANAGEMENT)
    denied = require_permission(request, USER_MANAGE, redirect_to=page, area="users")
    if denied:
        return denied

    user = get_object_or_404(User, pk=user_id)
    form = UserUpdateForm(request.POST or None, instance=user)
    if request.method == "POST" and form.is_valid():
        if user.pk == request.user.pk and not form.cleaned_data["is_active"]:
            form.add_error("is_active", "You cannot deactivate your own account.")
        else:
            form.save()
            messages.success(request, "User updated successfully.")
            return redirect(page)

    return render(request, "accounts/user_edit.html", {"form": form, "edited_user": user, "page_path": page})


@page_action(PageComponent.USER_MANAGEMENT)
@require_http_methods(["POST"])
def deactivate_user(request, user_id: int):
    page = page_url(request, PageComponent.USER_MANAGEMENT)
    denied = require_permission(request, USER_MANAGE, redirect_to=page, area="users")
    if denied:
        return denied

    user = get_object_or_404(User, pk=user_id)
    if user.id == request.user.id:
        messages.error(request, "You cannot deactivate your own account.")
        return redirect(page)

    user.is_active = False
    user.save(update_fields=["is_active"])
    messages.success(request, "User deactivated.")
    return redirect(page)


@page_action(PageComponent.USER_MANAGEMENT)
@require_http_methods(["POST"])
def delete_user(request, user_id: int):
    page = page_url(request, PageComponent.USER_MANAGEMENT)
    denied = require_permission(request, USER_MANAGE, redirect_to=page, area="users")
    if denied:
        return denied

    user = get_object_or_404(User, pk=user_id)
    if user.id == request.user.id:
        messages.error(request, "You cannot delete your own account.")
        return redirect(page)

    username = user.username
    try:
        user.delete()
        messages.success(request, f"User {username} deleted.")
    except ProtectedError:
        messages.error(request, "User cannot be deleted because it is linked to existing records. Deactivate it instead.")
    return redirect(page)


@require_http_methods(["GET", "POST"])
def role_list_create(request):
    page = page_url(request, PageComponent.ROLE_MANAGEMENT)
    form = RoleForm(request.POST or None)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, ROLE_MANAGE, redirect_to=page, area="roles")
        if denied:
            return denied

        if form.is_valid():
            role = form.save()
            messages.success(request, f"Role {role.name} created successfully.")
            return redirect(page)
        show_create_modal = True

    q_filter = request.GET.get("q", "").strip()
    roles_qs = Role.objects.annotate(
        user_count=Count("users", distinct=True),
        menu_count=Count("menus", distinct=True),
        permission_count=Count("permissions", distinct=True),
    )
    if q_filter:
        roles_qs = roles_qs.filter(Q(name__icontains=q_filter) | Q(code__icontains=q_filter))

    context = {
        "form": form,
        "roles": roles_qs.order_by("id"),
        "can_manage": has_permission(request.user, ROLE_MANAGE),
        "show_create_modal": show_create_modal,
        "filter_values": {"q": q_filter},
    }
    return render(request, "accounts/roles.html", context)


@page_action(PageComponent.ROLE_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def role_edit(request, role_id: int):
    page = page_url(request, PageComponent.ROLE_MANAGEMENT)
    denied = require_permission(request, ROLE_MANAGE, redirect_to=page, area="roles")
    if denied:
        return denied

    role = get_object_or_404(Role, pk=role_id)
    form = RoleForm(request.POST or None, instance=role)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Role updated successfully.")
        return redirect(page)

    return render(request, "accounts/role_edit.html", {"form": form, "role": role, "page_path": page})


@page_action(PageComponent.ROLE_MANAGEMENT)
@require_http_methods(["POST"])
def role_delete(request, role_id: int):
    page = page_url(request, PageComponent.ROLE_MANAGEMENT)
    denied = require_permission(request, ROLE_MANAGE, redirect_to=page, area="roles")
    if denied:
        return denied

    role = get_object_or_404(Role, pk=role_id)
    if role.users.exists():
        messages.error(request, "Role cannot be deleted while users are assigned to it.")
        return redirect(page)

    role.delete()
    messages.success(request, "Role deleted successfully.")
    return redirect(page)


@require_http_methods(["GET", "POST"])
def permission_list_create(request):
    page = page_url(request, PageComponent.PERMISSION_MANAGEMENT)
    form = PermissionForm(request.POST or None)
    show_create_modal = False

    if request.method == "POST":
        denied = require_permission(request, PERMISSION_MANAGE, redirect_to=page, area="permissions")
        if denied:
            return denied

        if form.is_valid():
            permission = form.save()
            messages.success(request, f"Permission {permission.code} created successfully.")
            return redirect(page)
        show_create_modal = True

    q_filter = request.GET.get("q", "").strip()
    type_filter = request.GET.get("permission_type", "").strip()
    module_filter = request.GET.get("module", "").strip()

    permissions_qs = Permission.objects.select_related("menu")
    if q_filter:
        permissions_qs = permissions_qs.filter(
            Q(name__icontains=q_filter) | Q(code__icontains=q_filter) | Q(description__icontains=q_filter)
        )
    if type_filter in Permission.PermissionType.values:
        permissions_qs = permissions_qs.filter(permission_type=type_filter)
    if module_filter:
        permissions_qs = permissions_qs.filter(module=module_filter)

    paginator = Paginator(permissions_qs.order_by("module", "code"), 25)
    page_obj = paginator.get_page(request.GET.get("page"))

    context = {
        "form": form,
        "permissions": page_obj.object_list,
        "page_obj": page_obj,
        "can_manage": has_permission(request.user, PERMISSION_MANAGE),
        "show_create_modal": show_create_modal,
        "permission_type_choices": Permission.PermissionType.choices,
        "modules": Permission.objects.exclude(module="").order_by("module").values_list("module", flat=True).distinct(),
        "filter_values": {"q": q_filter, "permission_type": type_filter, "module": module_filter},
    }
    return render(request, "accounts/permissions.html", context)


@page_action(PageComponent.PERMISSION_MANAGEMENT)
@require_http_methods(["GET", "POST"])
def permission_edit(request, permission_id: int):
    page = page_url(request, PageComponent.PERMISSION_MANAGEMENT)
    denied = require_permission(request, PERMISSION_MANAGE, redirect_to=page, area="permissions")
    if denied:
        return denied

    permission = get_object_or_404(Permission, pk=permission_id)
    form = PermissionForm(request.POST or None, instance=permission)
    if request.method == "POST" and form.is_valid():
        form.save()
        messages.success(request, "Permission updated successfully.")
        return redirect(page)

    return render(
        request,
        "accounts/permission_edit.html",
        {"form": form, "permission": permission, "page_path": page},
    )


@page_action(PageComponent.PERMISSION_MANAGEMENT)
@require_http_methods(["POST"])
def permission_delete(request, permission_id: int):
    page = page_url(request, PageComponent.PERMISSION_MANAGEMENT)
    denied = require_permission(request, PERMISSION_MANAGE, redirect_to=page, area="permissions")
    if denied:
        return denied

    permission = get_object_or_404(Permission, pk=permission_id)
    permission.delete()
    messages.success(request, "Permission deleted successfully.")
    return redirect(page)
