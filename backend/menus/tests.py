from __future__ import annotations

from django.contrib.auth.models import AnonymousUser
from django.contrib.messages import get_messages
from django.contrib.messages.middleware import MessageMiddleware
from django.contrib.sessions.middleware import SessionMiddleware
from django.core.cache import cache
from django.db import DatabaseError
from django.test import RequestFactory, SimpleTestCase, TestCase
from django.urls import reverse

from accounts.models import Role, User
from accounts.session import ConsoleSession
from dashboard.views import home as dashboard_home

from .defaults import install_defaults
from .forms import MenuForm
from .guards import page_url, require_menu_access, route_guard
from .models import Menu
from .navigation import DEFAULT_ICON, build_sidebar, resolve_icon
from .provider import MenuTreeProvider, MenuTreeState, MenuTreeStatus, invalidate_menu_trees
from .registry import PageComponent, check_page_registry, resolve_component
from .routing import (
    find_route,
    generate_routes_from_menus,
    get_default_route,
    normalize_path,
    resolve_page_path,
    validate_route_access,
)
from .tree import MenuNode, build_menu_tree, permitted_menu_queryset


def node(node_id, name, path=None, component=None, children=(), **extra):
    return MenuNode(
        id=node_id,
        name=name,
        title=name.title(),
        path=path,
        component=component,
        children=tuple(children),
        **extra,
    )


class StaticProvider:
    def __init__(self, state):
        self.state = state
        self.discarded = []

    def get(self, user):
        return self.state

    def discard(self, user_id):
        self.discarded.append(user_id)


class RouteGenerationTests(SimpleTestCase):
    def test_routes_follow_sort_order_with_parents_before_children(self):
        tree = (
            node(
                2,
                "system",
                sort_order=9,
                children=[
                    node(5, "menus", "/system/menus", "MenuManagement", sort_order=2),
                    node(4, "users", "/system/users", "UserManagement", sort_order=1),
                ],
            ),
            node(1, "dashboard", "/dashboard", "Dashboard", sort_order=1),
        )

        routes = generate_routes_from_menus(tree)

        self.assertEqual([route.path for route in routes], ["/dashboard", "/system/users", "/system/menus"])
        self.assertEqual(routes[1].component, PageComponent.USER_MANAGEMENT)
        self.assertEqual(routes[1].node_id, 4)

    def test_buttons_and_hidden_entries_are_pruned_with_their_subtree(self):
        tree = (
            node(
                1,
                "influencers",
                "/influencers",
                "InfluencerManagement",
                children=[node(2, "export", "/influencers/export", "Dashboard", menu_type=Menu.MenuType.BUTTON)],
            ),
            node(
                3,
                "hidden",
                "/hidden",
                "Dashboard",
                is_hidden=True,
                children=[node(4, "child", "/hidden/child", "Dashboard")],
            ),
            node(5, "inactive", "/inactive", "Dashboard", is_active=False),
        )

        routes = generate_routes_from_menus(tree)

        self.assertEqual([route.path for route in routes], ["/influencers"])

    def test_unknown_component_is_skipped_but_children_still_visited(self):
        tree = (
            node(
                1,
                "legacy",
                "/legacy",
                "NoSuchPage",
                children=[node(2, "dashboard", "/dashboard", "Dashboard")],
            ),
        )

        with self.assertLogs("menus.routing", level="WARNING") as captured:
            routes = generate_routes_from_menus(tree)

        self.assertEqual([route.path for route in routes], ["/dashboard"])
        self.assertIn("NoSuchPage", captured.output[0])

    def test_folder_without_path_contributes_no_route(self):
        tree = (node(1, "folder", children=[node(2, "roles", "/system/roles", "RoleManagement")]),)

        routes = generate_routes_from_menus(tree)

        self.assertEqual([route.path for route in routes], ["/system/roles"])

    def test_node_with_path_and_children_yields_both_routes(self):
        tree = (
            node(
                1,
                "influencers",
                "/influencers",
                "InfluencerManagement",
                children=[node(2, "experts", "/influencers/experts", "ExpertManagement")],
            ),
        )

        routes = generate_routes_from_menus(tree)

        self.assertEqual([route.path for route in routes], ["/influencers", "/influencers/experts"])
        self.assertEqual(routes[1].component, PageComponent.EXPERT_MANAGEMENT)

    def test_default_route_is_first_routable_entry(self):
        tree = (
            node(1, "folder", sort_order=1, children=[node(3, "users", "/system/users", "UserManagement")]),
            node(2, "broken", "/broken", "NoSuchPage", sort_order=0),
        )

        self.assertEqual(get_default_route(tree), "/system/users")

    def test_default_route_falls_back_when_nothing_is_routable(self):
        self.assertEqual(get_default_route(()), "/dashboard")
        self.assertEqual(get_default_route((node(1, "folder"),)), "/dashboard")

    def test_validate_route_access_matches_paths_exactly(self):
        tree = (node(1, "system", children=[node(2, "users", "/system/users", "UserManagement")]),)

        self.assertTrue(validate_route_access("/system/users", tree))
        self.assertFalse(validate_route_access("/system/users/1", tree))
        self.assertFalse(validate_route_access("/system", tree))
        self.assertFalse(validate_route_access("/dashboard", ()))

    def test_find_and_resolve_page_path(self):
        tree = (
            node(1, "influencers", "/influencers", "InfluencerManagement"),
            node(2, "experts", "/experts", "ExpertManagement"),
        )
        routes = generate_routes_from_menus(tree)

        self.assertEqual(find_route("/experts", routes).node_id, 2)
        self.assertIsNone(find_route("/missing", routes))
        self.assertEqual(
            resolve_page_path(tree, PageComponent.INFLUENCER_MANAGEMENT, PageComponent.EXPERT_MANAGEMENT),
            "/influencers",
        )
        self.assertIsNone(resolve_page_path(tree, PageComponent.MENU_MANAGEMENT))

    def test_normalize_path(self):
        self.assertEqual(normalize_path("influencers/"), "/influencers")
        self.assertEqual(normalize_path(" /system/users// "), "/system/users")
        self.assertEqual(normalize_path(""), "/")


class RegistryTests(SimpleTestCase):
    def test_resolve_component_returns_registered_view(self):
        self.assertIs(resolve_component("Dashboard"), dashboard_home)

    def test_resolve_component_unknown_or_empty(self):
        self.assertIsNone(resolve_component("NoSuchPage"))
        self.assertIsNone(resolve_component(""))
        self.assertIsNone(resolve_component(None))

    def test_every_component_has_an_importable_view(self):
        self.assertEqual(check_page_registry(), [])


class SidebarTests(SimpleTestCase):
    def test_sidebar_marks_active_entry_and_opens_its_folder(self):
        tree = (
            node(1, "dashboard", "/dashboard", "Dashboard", icon="DashboardOutlined", sort_order=1),
            node(
                2,
                "system",
                icon="SettingOutlined",
                sort_order=2,
                children=[
                    node(3, "users", "/system/users", "UserManagement"),
                    node(4, "export", menu_type=Menu.MenuType.BUTTON),
                ],
            ),
            node(5, "empty-folder", sort_order=3),
        )

        items = build_sidebar(tree, "/system/users/")

        self.assertEqual([item.label for item in items], ["Dashboard", "System"])
        dashboard, system = items
        self.assertEqual(dashboard.icon, "bi-speedometer2")
        self.assertFalse(dashboard.is_active)
        self.assertTrue(system.is_folder)
        self.assertTrue(system.is_open)
        self.assertEqual(system.key, "menu-2")
        self.assertEqual([child.path for child in system.children], ["/system/users"])
        self.assertTrue(system.children[0].is_active)

    def test_sidebar_sorts_siblings_and_drops_hidden_entries(self):
        tree = (
            node(10, "reports", "/reports", "Dashboard", sort_order=3),
            node(11, "secret", "/secret", "Dashboard", sort_order=0, is_hidden=True),
            node(
                12,
                "workspace",
                sort_order=1,
                children=[
                    node(13, "contacts", "/contact-records", "ContactRecordManagement", sort_order=5),
                    node(14, "influencers", "/influencers", "InfluencerManagement", sort_order=2),
                    node(15, "archived", "/archived", "Dashboard", sort_order=1, is_hidden=True),
                ],
            ),
            node(
                16,
                "hidden-folder",
                sort_order=2,
                is_hidden=True,
                children=[node(17, "visible-child", "/visible-child", "Dashboard")],
            ),
            node(18, "dashboard", "/dashboard", "Dashboard", sort_order=-1),
        )

        items = build_sidebar(tree, "/influencers")

        self.assertEqual([item.label for item in items], ["Dashboard", "Workspace", "Reports"])
        workspace = items[1]
        self.assertEqual([child.label for child in workspace.children], ["Influencers", "Contacts"])
        self.assertTrue(workspace.is_open)

        def paths(entries):
            for entry in entries:
                yield entry.path
                yield from paths(entry.children)

        rendered = set(paths(items))
        for hidden in ("/secret", "/archived", "/visible-child"):
            self.assertNotIn(hidden, rendered)

    def test_raw_payload_paths_match_guard_and_sidebar(self):
        tree = (MenuNode.from_dict({"id": 1, "name": "reports", "path": "reports/", "component": "Dashboard"}),)

        self.assertEqual(tree[0].path, "/reports")
        self.assertTrue(validate_route_access("/reports", tree))
        self.assertEqual([route.path for route in generate_routes_from_menus(tree)], ["/reports"])
        self.assertTrue(build_sidebar(tree, "/reports/")[0].is_active)

    def test_unknown_icon_uses_default(self):
        self.assertEqual(resolve_icon("NotAnIcon"), DEFAULT_ICON)
        self.assertEqual(resolve_icon(None), DEFAULT_ICON)


class MenuTreeTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.user = User.objects.create_user(username="tree_user", password="test12345")
        self.role = Role.objects.create(name="Narrow", code="narrow")
        self.role.menus.add(Menu.objects.get(name="influencers"))
        self.user.roles.add(self.role)

    def test_granted_menu_brings_its_ancestors(self):
        names = set(permitted_menu_queryset(self.user).values_list("name", flat=True))

        self.assertEqual(names, {"influencer-center", "influencers"})

    def test_inactive_ancestor_withholds_subtree(self):
        Menu.objects.filter(name="influencer-center").update(is_active=False)

        self.assertFalse(permitted_menu_queryset(self.user).exists())

    def test_inactive_role_grants_nothing(self):
        Role.objects.filter(pk=self.role.pk).update(is_active=False)

        self.assertFalse(permitted_menu_queryset(self.user).exists())

    def test_superuser_sees_every_active_menu(self):
        admin = User.objects.create_superuser(username="tree_admin", password="test12345")
        Menu.objects.filter(name="cooperation-products").update(is_active=False)

        names = set(permitted_menu_queryset(admin).values_list("name", flat=True))

        self.assertIn("menus", names)
        self.assertNotIn("cooperation-products", names)

    def test_build_menu_tree_nests_rows_in_sort_order(self):
        roots = build_menu_tree(Menu.objects.all())

        self.assertEqual([root.name for root in roots], ["dashboard", "influencer-center", "system"])
        self.assertEqual(
            [child.name for child in roots[1].children],
            ["influencers", "contact-records", "cooperation-records", "cooperation-products"],
        )

    def test_install_defaults_is_idempotent(self):
        before = Menu.objects.count()

        install_defaults()

        self.assertEqual(Menu.objects.count(), before)
        self.assertTrue(Role.objects.get(code="admin").menus.filter(name="menus").exists())


class MenuTreeProviderTests(TestCase):
    def setUp(self):
        cache.clear()
        self.user = User.objects.create_user(username="provider_user", password="test12345")
        self.calls = 0

    def _loader(self, user):
        self.calls += 1
        return (node(1, "dashboard", "/dashboard", "Dashboard"),)

    def test_tree_is_cached_until_discarded(self):
        provider = MenuTreeProvider(loader=self._loader)

        first = provider.get(self.user)
        second = provider.get(self.user)

        self.assertTrue(first.is_ready)
        self.assertEqual(second.nodes[0].path, "/dashboard")
        self.assertEqual(self.calls, 1)

        provider.discard(self.user.pk)
        provider.get(self.user)
        self.assertEqual(self.calls, 2)

    def test_invalidation_retires_cached_trees(self):
        provider = MenuTreeProvider(loader=self._loader)
        provider.get(self.user)

        invalidate_menu_trees()
        provider.get(self.user)

        self.assertEqual(self.calls, 2)

    def test_reports_loading_while_another_build_holds_the_lock(self):
        provider = MenuTreeProvider(loader=self._loader)
        cache.add(provider.lock_key(self.user.pk), True)

        state = provider.get(self.user)

        self.assertEqual(state.status, MenuTreeStatus.LOADING)
        self.assertEqual(state.nodes, ())
        self.assertEqual(self.calls, 0)

    def test_database_error_reports_failed_and_releases_lock(self):
        def broken_loader(user):
            raise DatabaseError("connection lost")

        provider = MenuTreeProvider(loader=broken_loader)

        with self.assertLogs("menus.provider", level="ERROR"):
            state = provider.get(self.user)

        self.assertTrue(state.has_failed)
        self.assertIsNone(cache.get(provider.lock_key(self.user.pk)))

    def test_anonymous_user_gets_empty_ready_tree(self):
        state = MenuTreeProvider(loader=self._loader).get(AnonymousUser())

        self.assertTrue(state.is_ready)
        self.assertEqual(state.nodes, ())
        self.assertEqual(self.calls, 0)


class RequireMenuAccessTests(TestCase):
    def setUp(self):
        cache.clear()
        self.factory = RequestFactory()
        self.user = User.objects.create_user(username="guard_user", password="test12345")
        self.tree = (
            node(1, "dashboard", "/dashboard", "Dashboard"),
            node(2, "influencers", "/influencers", "InfluencerManagement"),
        )

    def _request(self, path, state):
        request = self.factory.get(path)
        SessionMiddleware(lambda r: None).process_request(request)
        MessageMiddleware(lambda r: None).process_request(request)
        request.user = self.user
        request.console = ConsoleSession(self.user, provider=StaticProvider(state))
        return request

    def test_permitted_path_passes(self):
        request = self._request("/influencers", MenuTreeState(MenuTreeStatus.READY, self.tree))

        self.assertIsNone(require_menu_access(request))

    def test_denied_path_redirects_to_fallback_with_error(self):
        request = self._request("/system/users", MenuTreeState(MenuTreeStatus.READY, self.tree))

        response = require_menu_access(request)

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response["Location"], "/dashboard")
        self.assertEqual(
            [str(message) for message in get_messages(request)],
            ["You do not have permission to access this page."],
        )

    def test_custom_fallback_path(self):
        request = self._request("/system/users", MenuTreeState(MenuTreeStatus.READY, self.tree))

        response = require_menu_access(request, fallback_path="/influencers")

        self.assertEqual(response["Location"], "/influencers")

    def test_denied_fallback_renders_forbidden(self):
        request = self._request("/dashboard", MenuTreeState(MenuTreeStatus.READY, ()))

        response = require_menu_access(request)

        self.assertEqual(response.status_code, 403)

    def test_failed_tree_warns_and_denies(self):
        request = self._request("/influencers", MenuTreeState(MenuTreeStatus.FAILED))

        response = require_menu_access(request)

        self.assertEqual(response["Location"], "/dashboard")
        levels = [message.level_tag for message in get_messages(request)]
        self.assertIn("warning", levels)

    def test_loading_tree_answers_503(self):
        request = self._request("/influencers", MenuTreeState(MenuTreeStatus.LOADING))

        response = require_menu_access(request)

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response["Retry-After"], "1")

    def test_route_guard_checks_required_path(self):
        calls = []

        @route_guard(required_path="/influencers")
        def view(request):
            calls.append(request.path)
            return "ok"

        request = self._request("/influencers/anything", MenuTreeState(MenuTreeStatus.READY, self.tree))

        self.assertEqual(view(request), "ok")
        self.assertEqual(calls, ["/influencers/anything"])

    def test_page_url_prefers_request_page_path(self):
        request = self._request("/x", MenuTreeState(MenuTreeStatus.READY, self.tree))

        self.assertEqual(page_url(request, PageComponent.INFLUENCER_MANAGEMENT), "/influencers")
        self.assertEqual(page_url(request, PageComponent.MENU_MANAGEMENT), "/dashboard")
        request.page_path = "/experts"
        self.assertEqual(page_url(request, PageComponent.INFLUENCER_MANAGEMENT), "/experts")


class ConsoleNavigationTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.admin = User.objects.create_superuser(username="nav_admin", password="test12345")
        self.operator = User.objects.create_user(username="nav_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))
        self.viewer = User.objects.create_user(username="nav_viewer", password="test12345")
        self.viewer.roles.add(Role.objects.get(code="viewer"))
        self.nobody = User.objects.create_user(username="nav_nobody", password="test12345")

    def test_anonymous_page_request_redirects_to_login_with_next(self):
        response = self.client.get("/influencers")

        self.assertRedirects(response, "/login/?next=/influencers", fetch_redirect_response=False)

    def test_root_redirects_to_default_route(self):
        self.client.force_login(self.viewer)

        response = self.client.get(reverse("menus:home"))

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    def test_permitted_page_renders_through_dispatcher(self):
        self.client.force_login(self.operator)

        response = self.client.get("/influencers")

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "influencers/influencers.html")
        labels = [item.label for item in response.context["app_navigation"]]
        self.assertEqual(labels, ["Dashboard", "Influencers"])
        folder = response.context["app_navigation"][1]
        self.assertTrue(folder.is_open)
        self.assertEqual(folder.children[0].children, ())

    def test_trailing_slash_resolves_to_same_page(self):
        self.client.force_login(self.operator)

        response = self.client.get("/contact-records/")

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "contacts/contact_records.html")

    def test_page_outside_tree_redirects_to_dashboard(self):
        self.client.force_login(self.viewer)

        response = self.client.get("/system/users")

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    def test_unknown_path_is_treated_as_unauthorised(self):
        self.client.force_login(self.operator)

        response = self.client.get("/no/such/page")

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    def test_user_without_menus_gets_forbidden_page_for_dashboard(self):
        self.client.force_login(self.nobody)

        response = self.client.get("/dashboard")

        self.assertEqual(response.status_code, 403)
        self.assertTemplateUsed(response, "menus/forbidden.html")

    def test_permitted_path_without_component_is_404(self):
        Menu.objects.create(name="reports", title="Reports", path="/reports", sort_order=20)
        self.client.force_login(self.admin)

        response = self.client.get("/reports")

        self.assertEqual(response.status_code, 404)

    def test_menu_added_in_admin_is_reachable_with_either_slash_form(self):
        self.client.force_login(self.admin)

        created = self.client.post(
            "/admin/menus/menu/add/",
            {
                "name": "reports",
                "title": "Reports",
                "path": "reports/",
                "icon": "",
                "component": "Dashboard",
                "description": "",
                "menu_type": Menu.MenuType.MENU,
                "parent": "",
                "sort_order": "20",
                "is_active": "on",
            },
        )

        self.assertEqual(created.status_code, 302)
        self.assertEqual(Menu.objects.get(name="reports").path, "/reports")

        response = self.client.get("/reports")

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "dashboard/home.html")
        reports = next(item for item in response.context["app_navigation"] if item.label == "Reports")
        self.assertEqual(reports.path, "/reports")
        self.assertTrue(reports.is_active)

    def test_loading_tree_renders_retry_page(self):
        self.client.force_login(self.operator)
        provider = MenuTreeProvider()
        cache.add(provider.lock_key(self.operator.pk), True)

        response = self.client.get("/influencers")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response["Retry-After"], "1")
        self.assertTemplateUsed(response, "menus/loading.html")

    def test_sub_action_outside_tree_is_denied(self):
        menu = Menu.objects.get(name="dashboard")
        self.client.force_login(self.viewer)

        response = self.client.post(reverse("menus:delete", args=[menu.id]))

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)
        self.assertTrue(Menu.objects.filter(pk=menu.pk).exists())

    def test_role_change_refreshes_tree(self):
        self.client.force_login(self.viewer)
        before = self.client.get(reverse("menus:user_tree_api")).json()
        self.assertEqual([item["name"] for item in before["menus"]], ["dashboard", "influencer-center"])

        Role.objects.get(code="viewer").menus.add(Menu.objects.get(name="users"))
        after = self.client.get(reverse("menus:user_tree_api")).json()

        self.assertEqual([item["name"] for item in after["menus"]], ["dashboard", "influencer-center", "system"])

    def test_logout_discards_cached_tree(self):
        self.client.force_login(self.operator)
        self.client.get("/dashboard")
        provider = MenuTreeProvider()
        self.assertIsNotNone(cache.get(provider.tree_key(self.operator.pk)))

        self.client.post(reverse("accounts:logout"))

        self.assertIsNone(cache.get(provider.tree_key(self.operator.pk)))


class MenuApiTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.admin = User.objects.create_superuser(username="api_admin", password="test12345")
        self.operator = User.objects.create_user(username="api_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))

    def test_user_tree_requires_login(self):
        response = self.client.get(reverse("menus:user_tree_api"))

        self.assertEqual(response.status_code, 401)

    def test_user_tree_returns_permitted_menus(self):
        self.client.force_login(self.operator)

        payload = self.client.get(reverse("menus:user_tree_api")).json()

        self.assertEqual(payload["status"], "ready")
        self.assertEqual(payload["default_route"], "/dashboard")
        self.assertEqual([item["name"] for item in payload["menus"]], ["dashboard", "influencer-center"])
        center = payload["menus"][1]
        self.assertIn("cooperation-products", [child["name"] for child in center["children"]])

    def test_full_tree_requires_menu_permission(self):
        self.client.force_login(self.operator)

        response = self.client.get(reverse("menus:tree_api"))

        self.assertEqual(response.status_code, 403)

    def test_full_tree_for_admin(self):
        self.client.force_login(self.admin)

        payload = self.client.get(reverse("menus:tree_api")).json()

        self.assertEqual([item["name"] for item in payload["menus"]], ["dashboard", "influencer-center", "system"])


class MenuManagementTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.admin = User.objects.create_superuser(username="menu_admin", password="test12345")
        self.client.force_login(self.admin)

    def _payload(self, **overrides):
        payload = {
            "name": "reports",
            "title": "Reports",
            "parent": "",
            "path": "reports/",
            "component": "",
            "icon": "",
            "menu_type": Menu.MenuType.MENU,
            "sort_order": 5,
            "is_active": "on",
            "description": "",
        }
        payload.update(overrides)
        return payload

    def test_menu_page_lists_tree(self):
        response = self.client.get("/system/menus")

        self.assertEqual(response.status_code, 200)
        names = [row["node"].name for row in response.context["menu_rows"]]
        self.assertEqual(names[:3], ["dashboard", "influencer-center", "influencers"])

    def test_create_menu_normalises_path(self):
        response = self.client.post("/system/menus", self._payload())

        self.assertRedirects(response, "/system/menus", fetch_redirect_response=False)
        self.assertEqual(Menu.objects.get(name="reports").path, "/reports")

    def test_create_menu_rejects_reserved_path(self):
        response = self.client.post("/system/menus", self._payload(path="/admin/reports"))

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["show_create_modal"])
        self.assertFalse(Menu.objects.filter(name="reports").exists())

    def test_component_requires_path(self):
        form = MenuForm(data=self._payload(path="", component=PageComponent.DASHBOARD))

        self.assertFalse(form.is_valid())
        self.assertIn("path", form.errors)

    def test_menu_cannot_move_under_its_descendant(self):
        folder = Menu.objects.get(name="system")
        child = Menu.objects.get(name="users")
        form = MenuForm(
            data=self._payload(name="system", title="System", path="", parent=child.pk),
            instance=folder,
        )

        self.assertFalse(form.is_valid())
        self.assertIn("parent", form.errors)

    def test_edit_menu(self):
        menu = Menu.objects.get(name="dashboard")

        response = self.client.post(
            reverse("menus:edit", args=[menu.id]),
            self._payload(name="dashboard", title="Home", path="/dashboard", component=PageComponent.DASHBOARD),
        )

        self.assertRedirects(response, "/system/menus", fetch_redirect_response=False)
        menu.refresh_from_db()
        self.assertEqual(menu.title, "Home")

    def test_delete_folder_removes_children(self):
        folder = Menu.objects.get(name="influencer-center")

        response = self.client.post(reverse("menus:delete", args=[folder.id]))

        self.assertRedirects(response, "/system/menus", fetch_redirect_response=False)
        self.assertFalse(Menu.objects.filter(name="influencers").exists())
