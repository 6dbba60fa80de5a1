from __future__ import annotations

from io import StringIO

from django.contrib.messages import get_messages
from django.core.cache import cache
from django.core.management import call_command
from django.template import Context, Template
from django.test import RequestFactory, TestCase
from django.urls import reverse

from contacts.models import ContactRecord
from cooperation.models import CooperationRecord
from influencers.models import Influencer
from menus.defaults import install_defaults
from menus.models import Menu

from .models import Permission, Role, User
from .permissions import INFLUENCER_MANAGE, USER_MANAGE, has_permission
from .templatetags.query_helpers import replace_query


def _messages(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


class LoginLogoutTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.user = User.objects.create_user(username="login_user", password="test12345")
        self.user.roles.add(Role.objects.get(code="operator"))

    def test_login_page_renders(self):
        response = self.client.get(reverse("accounts:login"), {"next": "/influencers"})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["next"], "/influencers")

    def test_login_returns_to_requested_page(self):
        response = self.client.post(
            reverse("accounts:login"),
            {"username": "login_user", "password": "test12345", "next": "/influencers"},
        )

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)

    def test_login_ignores_foreign_next(self):
        response = self.client.post(
            reverse("accounts:login"),
            {"username": "login_user", "password": "test12345", "next": "https://evil.example/steal"},
        )

        self.assertRedirects(response, reverse("menus:home"), fetch_redirect_response=False)

    def test_login_with_wrong_password_stays_on_form(self):
        response = self.client.post(reverse("accounts:login"), {"username": "login_user", "password": "nope"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["form"].errors)
        self.assertNotIn("_auth_user_id", self.client.session)

    def test_logout_ends_session(self):
        self.client.force_login(self.user)

        response = self.client.post(reverse("accounts:logout"))

        self.assertRedirects(response, reverse("accounts:login"), fetch_redirect_response=False)
        self.assertNotIn("_auth_user_id", self.client.session)
        self.assertIn("You have been signed out.", _messages(response))

        follow_up = self.client.get("/dashboard")
        self.assertRedirects(follow_up, "/login/?next=/dashboard", fetch_redirect_response=False)


class PermissionCodeTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.operator = User.objects.create_user(username="code_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))

    def test_role_permissions_grant_codes(self):
        user = User.objects.get(pk=self.operator.pk)

        self.assertTrue(user.has_permission_code(INFLUENCER_MANAGE))
        self.assertFalse(user.has_permission_code(USER_MANAGE))

    def test_inactive_role_or_permission_grants_nothing(self):
        Permission.objects.filter(code=INFLUENCER_MANAGE).update(is_active=False)
        self.assertFalse(User.objects.get(pk=self.operator.pk).has_permission_code(INFLUENCER_MANAGE))

        Role.objects.filter(code="operator").update(is_active=False)
        self.assertEqual(User.objects.get(pk=self.operator.pk).permission_codes(), frozenset())

    def test_superuser_and_inactive_user(self):
        admin = User.objects.create_superuser(username="code_admin", password="test12345")
        self.assertTrue(admin.has_permission_code("anything:at:all"))

        admin.is_active = False
        self.assertFalse(admin.has_permission_code("anything:at:all"))

    def test_anonymous_has_no_permission(self):
        self.assertFalse(has_permission(None, INFLUENCER_MANAGE))

    def test_template_filter(self):
        template = Template(
            "{% load query_helpers %}{% if account|has_permission:'influencer:manage' %}yes{% else %}no{% endif %}"
        )

        self.assertEqual(template.render(Context({"account": self.operator})), "yes")
        viewer = User.objects.create_user(username="code_viewer", password="test12345")
        self.assertEqual(template.render(Context({"account": viewer})), "no")

    def test_replace_query_drops_blank_values(self):
        request = RequestFactory().get("/influencers", {"q": "lin", "page": "3"})

        self.assertEqual(replace_query(request, page=""), "?q=lin")
        self.assertEqual(replace_query(request, q="", page=""), "")
        self.assertIn("sort=name", replace_query(request, sort="name"))


class UserManagementTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.admin = User.objects.create_superuser(username="users_admin", password="test12345")
        self.operator_role = Role.objects.get(code="operator")
        self.client.force_login(self.admin)

    def test_user_page_lists_accounts(self):
        response = self.client.get("/system/users", {"q": "users_admin"})

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "accounts/users.html")
        self.assertEqual([account.username for account in response.context["users"]], ["users_admin"])

    def test_create_user_with_roles(self):
        response = self.client.post(
            "/system/users",
            {
                "username": "new_operator",
                "full_name": "New Operator",
                "email": "",
                "roles": [self.operator_role.pk],
                "is_active": "on",
                "password": "secret123",
            },
        )

        self.assertRedirects(response, "/system/users", fetch_redirect_response=False)
        user = User.objects.get(username="new_operator")
        self.assertTrue(user.check_password("secret123"))
        self.assertEqual(list(user.roles.all()), [self.operator_role])

    def test_create_user_requires_user_permission(self):
        auditor = Role.objects.create(name="Auditor", code="auditor")
        auditor.menus.add(Menu.objects.get(name="system"), Menu.objects.get(name="users"))
        clerk = User.objects.create_user(username="clerk", password="test12345")
        clerk.roles.add(auditor)
        self.client.force_login(clerk)

        response = self.client.post(
            "/system/users",
            {"username": "sneaky", "is_active": "on", "password": "secret123"},
        )

        self.assertRedirects(response, "/system/users", fetch_redirect_response=False)
        self.assertFalse(User.objects.filter(username="sneaky").exists())
        self.assertIn("You do not have permission to manage users.", _messages(response))

    def test_cannot_deactivate_own_account_via_edit(self):
        response = self.client.post(
            reverse("accounts:user_edit", args=[self.admin.id]),
            {"full_name": "Admin", "email": "", "is_superuser": "on"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("is_active", response.context["form"].errors)
        self.admin.refresh_from_db()
        self.assertTrue(self.admin.is_active)

    def test_edit_user_changes_password(self):
        other = User.objects.create_user(username="other", password="test12345")

        response = self.client.post(
            reverse("accounts:user_edit", args=[other.id]),
            {"full_name": "Other", "email": "", "is_active": "on", "new_password": "changed123"},
        )

        self.assertRedirects(response, "/system/users", fetch_redirect_response=False)
        other.refresh_from_db()
        self.assertEqual(other.full_name, "Other")
        self.assertTrue(other.check_password("changed123"))

    def test_deactivate_other_user(self):
        other = User.objects.create_user(username="other", password="test12345")

        self.client.post(reverse("accounts:deactivate_user", args=[other.id]))

        other.refresh_from_db()
        self.assertFalse(other.is_active)

    def test_cannot_delete_own_account(self):
        response = self.client.post(reverse("accounts:delete_user", args=[self.admin.id]))

        self.assertIn("You cannot delete your own account.", _messages(response))
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_other_user(self):
        other = User.objects.create_user(username="other", password="test12345")

        self.client.post(reverse("accounts:delete_user", args=[other.id]))

        self.assertFalse(User.objects.filter(pk=other.pk).exists())


class RoleAndPermissionManagementTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.admin = User.objects.create_superuser(username="roles_admin", password="test12345")
        self.client.force_login(self.admin)

    def test_create_role_lowercases_code(self):
        dashboard = Menu.objects.get(name="dashboard")

        response = self.client.post(
            "/system/roles",
            {"name": "Auditor", "code": "AUDITOR", "description": "", "is_active": "on", "menus": [dashboard.pk]},
        )

        self.assertRedirects(response, "/system/roles", fetch_redirect_response=False)
        role = Role.objects.get(code="auditor")
        self.assertEqual(list(role.menus.all()), [dashboard])

    def test_role_page_counts_assignments(self):
        response = self.client.get("/system/roles")

        admin_role = next(role for role in response.context["roles"] if role.code == "admin")
        self.assertEqual(admin_role.menu_count, Menu.objects.count())

    def test_role_with_users_cannot_be_deleted(self):
        role = Role.objects.get(code="viewer")
        User.objects.create_user(username="assigned", password="test12345").roles.add(role)

        response = self.client.post(reverse("accounts:role_delete", args=[role.id]))

        self.assertIn("Role cannot be deleted while users are assigned to it.", _messages(response))
        self.assertTrue(Role.objects.filter(pk=role.pk).exists())

    def test_unassigned_role_is_deleted(self):
        role = Role.objects.get(code="viewer")

        self.client.post(reverse("accounts:role_delete", args=[role.id]))

        self.assertFalse(Role.objects.filter(pk=role.pk).exists())

    def test_api_permission_needs_path(self):
        response = self.client.post(
            "/system/permissions",
            {"name": "List users", "code": "api:users:list", "permission_type": "api", "is_active": "on"},
        )

        self.assertEqual(response.status_code, 200)
        self.assertIn("api_path", response.context["form"].errors)

    def test_create_api_permission_uppercases_method(self):
        self.client.post(
            "/system/permissions",
            {
                "name": "List users",
                "code": "api:users:list",
                "permission_type": "api",
                "module": "system",
                "api_path": "/api/users",
                "api_method": "get",
                "is_active": "on",
            },
        )

        self.assertEqual(Permission.objects.get(code="api:users:list").api_method, "GET")

    def test_permission_filters(self):
        response = self.client.get("/system/permissions", {"module": "contact"})

        codes = sorted(permission.code for permission in response.context["permissions"])
        self.assertEqual(codes, ["contact:export", "contact:manage"])

    def test_delete_permission(self):
        permission = Permission.objects.get(code="contact:export")

        self.client.post(reverse("accounts:permission_delete", args=[permission.id]))

        self.assertFalse(Permission.objects.filter(pk=permission.pk).exists())


class ManagementCommandTests(TestCase):
    def setUp(self):
        cache.clear()

    def test_bootstrap_console_creates_admin_once(self):
        out = StringIO()
        call_command("bootstrap_console", stdout=out)

        admin = User.objects.get(username="admin")
        self.assertTrue(admin.is_superuser)
        self.assertTrue(admin.check_password("admin123"))
        self.assertTrue(admin.roles.filter(code="admin").exists())
        self.assertTrue(Menu.objects.filter(path="/dashboard").exists())

        call_command("bootstrap_console", stdout=out)
        self.assertIn("Admin user already exists. Skipped.", out.getvalue())
        self.assertEqual(User.objects.filter(username="admin").count(), 1)

    def test_seed_demo_data(self):
        call_command("seed_demo_data", stdout=StringIO())
        call_command("seed_demo_data", stdout=StringIO())

        self.assertEqual(Influencer.objects.filter(name__startswith="Demo ").count(), 3)
        self.assertEqual(ContactRecord.objects.count(), 6)
        self.assertEqual(CooperationRecord.objects.count(), 3)
        self.assertTrue(User.objects.get(username="operator").check_password("operator123"))
