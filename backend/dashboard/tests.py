from datetime import timedelta

from django.core.cache import cache
from django.test import TestCase
from django.utils import timezone

from accounts.models import Role, User
from contacts.models import ContactRecord
from cooperation.models import CooperationRecord
from influencers.models import Influencer
from menus.defaults import install_defaults


class DashboardTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.viewer = User.objects.create_user(username="dashboard_viewer", password="test12345")
        self.viewer.roles.add(Role.objects.get(code="viewer"))
        self.lin = Influencer.objects.create(name="Lin Xiao")
        self.zhou = Influencer.objects.create(name="Zhou Mei")
        today = timezone.localdate()
        self.overdue = ContactRecord.objects.create(
            influencer=self.lin,
            contact_content="Rates pending",
            follow_up_required=ContactRecord.FollowUp.YES,
            follow_up_date=today - timedelta(days=2),
        )
        self.upcoming = ContactRecord.objects.create(
            influencer=self.zhou,
            contact_content="Awaiting samples",
            follow_up_required=ContactRecord.FollowUp.YES,
            follow_up_date=today + timedelta(days=3),
        )
        ContactRecord.objects.create(
            influencer=self.zhou,
            contact_date=timezone.now() - timedelta(days=20),
            contact_content="Old chat",
        )
        CooperationRecord.objects.create(influencer=self.lin, cooperation_status=CooperationRecord.Status.IN_PROGRESS)
        CooperationRecord.objects.create(influencer=self.zhou, cooperation_status=CooperationRecord.Status.COMPLETED)

    def test_dashboard_summary(self):
        self.client.force_login(self.viewer)

        response = self.client.get("/dashboard")

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, "dashboard/home.html")
        self.assertEqual(response.context["total_influencers"], 2)
        self.assertEqual(response.context["new_influencers"], 2)
        self.assertEqual(response.context["contacts_this_week"], 2)
        self.assertEqual(response.context["pending_follow_up_count"], 2)
        self.assertEqual(response.context["overdue_follow_ups"], 1)
        self.assertEqual(response.context["active_cooperations"], 1)
        self.assertEqual(response.context["completed_cooperations"], 1)
        self.assertEqual(list(response.context["upcoming_follow_ups"]), [self.overdue, self.upcoming])

    def test_dashboard_highlights_dashboard_entry(self):
        self.client.force_login(self.viewer)

        response = self.client.get("/dashboard")

        dashboard_item = response.context["app_navigation"][0]
        self.assertEqual(dashboard_item.path, "/dashboard")
        self.assertTrue(dashboard_item.is_active)
        self.assertEqual(response.context["default_route"], "/dashboard")

    def test_dashboard_requires_login(self):
        response = self.client.get("/dashboard")

        self.assertRedirects(response, "/login/?next=/dashboard", fetch_redirect_response=False)
