from __future__ import annotations

from decimal import Decimal
from io import BytesIO

from django.contrib.messages import get_messages
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from openpyxl import load_workbook

from accounts.models import Role, User
from contacts.models import ContactRecord
from cooperation.models import CooperationRecord
from menus.defaults import install_defaults

from .models import Influencer


def _messages(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


class InfluencerTestMixin:
    def setUp(self):
        cache.clear()
        install_defaults()
        self.operator = User.objects.create_user(username="influencer_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))
        self.viewer = User.objects.create_user(username="influencer_viewer", password="test12345")
        self.viewer.roles.add(Role.objects.get(code="viewer"))
        self.lin = Influencer.objects.create(
            name="Lin Xiao",
            nickname="xiaolin",
            douyin_url="https://www.douyin.com/user/lin",
            douyin_followers=180000,
            cooperation_price=Decimal("8000.00"),
            cooperation_types=[Influencer.CooperationType.AD_PLACEMENT],
            is_refund=True,
        )
        self.zhou = Influencer.objects.create(
            name="Zhou Mei",
            wechat_channels_url="https://channels.weixin.qq.com/zhou",
            wechat_channels_followers=43000,
            cooperation_price=Decimal("3500.00"),
            cooperation_types=[Influencer.CooperationType.LIVE_COMMERCE, Influencer.CooperationType.PRODUCT_TRIAL],
        )


class InfluencerModelTests(InfluencerTestMixin, TestCase):
    def test_followers_platforms_and_labels(self):
        self.lin.xiaohongshu_url = "https://www.xiaohongshu.com/user/profile/lin"
        self.lin.xiaohongshu_followers = 20000

        self.assertEqual(self.lin.total_followers, 200000)
        self.assertEqual(self.lin.platforms, ["Douyin", "Xiaohongshu"])
        self.assertEqual(self.zhou.cooperation_type_labels, ["Live commerce", "Product trial"])
        self.assertEqual(str(self.lin), "Lin Xiao (xiaolin)")


class InfluencerListTests(InfluencerTestMixin, TestCase):
    def _names(self, response):
        return [influencer.name for influencer in response.context["influencers"]]

    def test_operator_creates_influencer(self):
        self.client.force_login(self.operator)

        response = self.client.post(
            "/influencers",
            {
                "name": "  Chen Hao ",
                "email": "chenhao@example.com",
                "douyin_url": "https://www.douyin.com/user/chen",
                "douyin_followers": "920000",
                "cooperation_price": "25000",
                "cooperation_types": [Influencer.CooperationType.ENDORSEMENT, Influencer.CooperationType.EVENT],
            },
        )

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)
        influencer = Influencer.objects.get(name="Chen Hao")
        self.assertEqual(influencer.created_by, self.operator)
        self.assertEqual(influencer.cooperation_types, ["endorsement", "event"])

    def test_followers_need_account_link(self):
        self.client.force_login(self.operator)

        response = self.client.post("/influencers", {"name": "No Link", "xiaohongshu_followers": "100"})

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["show_create_modal"])
        self.assertIn("xiaohongshu_url", response.context["form"].errors)

    def test_negative_price_is_rejected(self):
        self.client.force_login(self.operator)

        response = self.client.post("/influencers", {"name": "Cheap", "cooperation_price": "-1"})

        self.assertIn("cooperation_price", response.context["form"].errors)
        self.assertFalse(Influencer.objects.filter(name="Cheap").exists())

    def test_viewer_cannot_create(self):
        self.client.force_login(self.viewer)

        response = self.client.post("/influencers", {"name": "Blocked"})

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)
        self.assertIn("You do not have permission to manage influencers.", _messages(response))
        self.assertFalse(Influencer.objects.filter(name="Blocked").exists())

    def test_viewer_sees_list_without_manage_controls(self):
        self.client.force_login(self.viewer)

        response = self.client.get("/influencers")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.context["can_manage"])
        self.assertFalse(response.context["can_export"])

    def test_filters(self):
        self.client.force_login(self.operator)

        self.assertEqual(self._names(self.client.get("/influencers", {"platform": "douyin"})), ["Lin Xiao"])
        self.assertEqual(
            self._names(self.client.get("/influencers", {"cooperation_type": "product_trial"})),
            ["Zhou Mei"],
        )
        self.assertEqual(self._names(self.client.get("/influencers", {"refund": "yes"})), ["Lin Xiao"])
        self.assertEqual(self._names(self.client.get("/influencers", {"q": "xiaolin"})), ["Lin Xiao"])

    def test_sorting_by_price(self):
        self.client.force_login(self.operator)

        response = self.client.get("/influencers", {"sort": "price", "direction": "asc"})

        self.assertEqual(self._names(response), ["Zhou Mei", "Lin Xiao"])
        self.assertEqual(response.context["sort_state"]["price"]["next"], "desc")

    def test_contact_count_is_annotated(self):
        ContactRecord.objects.create(influencer=self.lin, contact_content="Hello")
        self.client.force_login(self.operator)

        response = self.client.get("/influencers", {"q": "Lin"})

        self.assertEqual(response.context["influencers"][0].contact_count, 1)


class InfluencerActionTests(InfluencerTestMixin, TestCase):
    def test_detail_shows_history(self):
        ContactRecord.objects.create(
            influencer=self.lin,
            contact_content="Sent the brief",
            follow_up_required=ContactRecord.FollowUp.YES,
        )
        self.client.force_login(self.viewer)

        response = self.client.get(reverse("influencers:detail", args=[self.lin.id]))

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context["contact_stats"]["total"], 1)
        self.assertEqual(response.context["contact_stats"]["pending_follow_up"], 1)
        self.assertEqual(response.context["page_path"], "/influencers")

    def test_detail_requires_influencer_page(self):
        nobody = User.objects.create_user(username="no_pages", password="test12345")
        self.client.force_login(nobody)

        response = self.client.get(reverse("influencers:detail", args=[self.lin.id]))

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    def test_edit(self):
        self.client.force_login(self.operator)

        response = self.client.post(
            reverse("influencers:edit", args=[self.zhou.id]),
            {
                "name": "Zhou Mei",
                "nickname": "meimei",
                "wechat_channels_url": "https://channels.weixin.qq.com/zhou",
                "wechat_channels_followers": "45000",
                "wechat_channels_has_shop": "on",
            },
        )

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)
        self.zhou.refresh_from_db()
        self.assertEqual(self.zhou.nickname, "meimei")
        self.assertTrue(self.zhou.wechat_channels_has_shop)

    def test_delete_is_blocked_by_cooperation(self):
        CooperationRecord.objects.create(influencer=self.lin)
        self.client.force_login(self.operator)

        response = self.client.post(reverse("influencers:delete", args=[self.lin.id]))

        self.assertIn("Influencer cannot be deleted because it has cooperation records.", _messages(response))
        self.assertTrue(Influencer.objects.filter(pk=self.lin.pk).exists())

    def test_delete_removes_contact_history(self):
        ContactRecord.objects.create(influencer=self.zhou, contact_content="Hi")
        self.client.force_login(self.operator)

        self.client.post(reverse("influencers:delete", args=[self.zhou.id]))

        self.assertFalse(Influencer.objects.filter(pk=self.zhou.pk).exists())
        self.assertFalse(ContactRecord.objects.exists())

    def test_batch_delete_skips_protected(self):
        CooperationRecord.objects.create(influencer=self.lin)
        extra = Influencer.objects.create(name="Extra")
        self.client.force_login(self.operator)

        response = self.client.post(
            reverse("influencers:batch_delete"),
            {"ids": [str(self.lin.id), str(self.zhou.id), str(extra.id), "oops"]},
        )

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)
        self.assertEqual(list(Influencer.objects.values_list("name", flat=True)), ["Lin Xiao"])
        self.assertIn("Deleted 2 influencer(s).", _messages(response))

    def test_batch_delete_needs_selection(self):
        self.client.force_login(self.operator)

        response = self.client.post(reverse("influencers:batch_delete"), {})

        self.assertIn("Select at least one influencer.", _messages(response))
        self.assertEqual(Influencer.objects.count(), 2)

    def test_export_applies_filters(self):
        self.client.force_login(self.operator)

        response = self.client.get(reverse("influencers:export"), {"platform": "wechat_channels"})

        self.assertEqual(
            response["Content-Type"],
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
        self.assertIn("attachment;", response["Content-Disposition"])
        sheet = load_workbook(BytesIO(response.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][1], "Name")
        self.assertEqual([row[1] for row in rows[1:]], ["Zhou Mei"])
        self.assertEqual(rows[1][13], "Live commerce, Product trial")

    def test_export_requires_export_permission(self):
        self.client.force_login(self.viewer)

        response = self.client.get(reverse("influencers:export"))

        self.assertRedirects(response, "/influencers", fetch_redirect_response=False)
        self.assertIn("You do not have permission to export influencers.", _messages(response))
