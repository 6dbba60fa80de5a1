from __future__ import annotations

from decimal import Decimal
from io import BytesIO

from django.contrib.messages import get_messages
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from openpyxl import load_workbook

from accounts.models import Role, User
from influencers.models import Influencer
from menus.defaults import install_defaults

from .models import CooperationProduct, CooperationRecord


def _messages(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


def _formset_data(forms, *, initial=0):
    data = {
        "products-TOTAL_FORMS": str(len(forms)),
        "products-INITIAL_FORMS": str(initial),
        "products-MIN_NUM_FORMS": "0",
        "products-MAX_NUM_FORMS": "1000",
    }
    for index, values in enumerate(forms):
        for key, value in values.items():
            data[f"products-{index}-{key}"] = value
    return data


class CooperationModelTests(TestCase):
    def test_totals_and_commission(self):
        influencer = Influencer.objects.create(name="Lin Xiao")
        record = CooperationRecord.objects.create(influencer=influencer, cooperation_status=CooperationRecord.Status.COMPLETED)
        first = CooperationProduct.objects.create(
            cooperation_record=record,
            product_name="Serum",
            price=Decimal("199.00"),
            commission_rate=Decimal("20.00"),
        )
        CooperationProduct.objects.create(cooperation_record=record, product_name="Sample kit")

        self.assertEqual(record.total_amount, Decimal("199.00"))
        self.assertEqual(first.commission_amount, Decimal("39.80"))
        self.assertTrue(record.is_closed)
        self.assertEqual(str(record), f"COOP-{record.id} (Lin Xiao)")


class CooperationViewTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.operator = User.objects.create_user(username="coop_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))
        self.viewer = User.objects.create_user(username="coop_viewer", password="test12345")
        self.viewer.roles.add(Role.objects.get(code="viewer"))
        self.influencer = Influencer.objects.create(name="Zhou Mei")
        self.record = CooperationRecord.objects.create(
            influencer=self.influencer,
            cooperation_status=CooperationRecord.Status.IN_PROGRESS,
            notes="Spring launch <live>",
            created_by=self.operator,
        )
        self.product = CooperationProduct.objects.create(
            cooperation_record=self.record,
            product_name="Serum",
            product_code="SKU-1",
            price=Decimal("199.00"),
            commission_rate=Decimal("20.00"),
            cooperation_platform=CooperationProduct.Platform.DOUYIN,
            order_number="ORD-1",
        )

    def test_create_record_with_products(self):
        self.client.force_login(self.operator)
        data = {
            "influencer": self.influencer.id,
            "cooperation_status": CooperationRecord.Status.CONFIRMED,
            "notes": "Autumn campaign",
        }
        data.update(
            _formset_data(
                [
                    {"product_name": "Cleanser", "price": "89.00", "commission_rate": "15", "cooperation_platform": "xiaohongshu"},
                    {"product_name": "Toner", "price": "59.00", "cooperation_platform": "douyin"},
                ]
            )
        )

        response = self.client.post("/cooperation-records", data)

        self.assertRedirects(response, "/cooperation-records", fetch_redirect_response=False)
        record = CooperationRecord.objects.get(notes="Autumn campaign")
        self.assertEqual(record.created_by, self.operator)
        self.assertEqual([product.product_name for product in record.products.all()], ["Cleanser", "Toner"])
        self.assertEqual(record.total_amount, Decimal("148.00"))

    def test_invalid_product_keeps_modal_open(self):
        self.client.force_login(self.operator)
        data = {"influencer": self.influencer.id, "cooperation_status": "0", "notes": "Broken"}
        data.update(_formset_data([{"product_name": "Bad", "commission_rate": "150"}]))

        response = self.client.post("/cooperation-records", data)

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.context["show_create_modal"])
        self.assertFalse(CooperationRecord.objects.filter(notes="Broken").exists())

    def test_list_shows_status_distribution(self):
        self.client.force_login(self.operator)

        response = self.client.get("/cooperation-records", {"status": "2"})

        self.assertEqual(list(response.context["records"]), [self.record])
        in_progress = next(
            bucket for bucket in response.context["status_distribution"] if bucket["value"] == CooperationRecord.Status.IN_PROGRESS
        )
        self.assertEqual(in_progress["count"], 1)

    def test_viewer_has_no_cooperation_page(self):
        self.client.force_login(self.viewer)

        response = self.client.get("/cooperation-records")

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)

    def test_edit_updates_and_removes_products(self):
        self.client.force_login(self.operator)
        data = {
            "influencer": self.influencer.id,
            "cooperation_status": CooperationRecord.Status.COMPLETED,
            "notes": "Done",
        }
        data.update(
            _formset_data(
                [
                    {"id": str(self.product.id), "product_name": "Serum", "price": "199.00", "DELETE": "on"},
                    {"product_name": "Mask", "price": "39.00"},
                ],
                initial=1,
            )
        )

        response = self.client.post(reverse("cooperation:edit", args=[self.record.id]), data)

        self.assertRedirects(response, "/cooperation-records", fetch_redirect_response=False)
        self.record.refresh_from_db()
        self.assertEqual(self.record.cooperation_status, CooperationRecord.Status.COMPLETED)
        self.assertEqual([product.product_name for product in self.record.products.all()], ["Mask"])

    def test_delete_record_removes_products(self):
        self.client.force_login(self.operator)

        self.client.post(reverse("cooperation:delete", args=[self.record.id]))

        self.assertFalse(CooperationRecord.objects.exists())
        self.assertFalse(CooperationProduct.objects.exists())

    def test_export_excel(self):
        self.client.force_login(self.operator)

        response = self.client.get(reverse("cooperation:export_excel", args=[self.record.id]))

        self.assertIn(f'filename="cooperation_{self.record.id}.xlsx"', response["Content-Disposition"])
        sheet = load_workbook(BytesIO(response.content)).active
        self.assertEqual(sheet["A1"].value, f"Cooperation #{self.record.id}")
        self.assertEqual(sheet["B4"].value, "In progress")
        values = [cell for row in sheet.iter_rows(values_only=True) for cell in row]
        self.assertIn("Serum", values)

    def test_export_pdf(self):
        self.client.force_login(self.operator)

        response = self.client.get(reverse("cooperation:export_pdf", args=[self.record.id]))

        self.assertEqual(response["Content-Type"], "application/pdf")
        self.assertTrue(response.content.startswith(b"%PDF"))

    def test_export_outside_tree_is_denied(self):
        self.client.force_login(self.viewer)

        response = self.client.get(reverse("cooperation:export_pdf", args=[self.record.id]))

        self.assertRedirects(response, "/dashboard", fetch_redirect_response=False)


class CooperationProductViewTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.operator = User.objects.create_user(username="product_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))
        influencer = Influencer.objects.create(name="Chen Hao")
        record = CooperationRecord.objects.create(influencer=influencer)
        self.serum = CooperationProduct.objects.create(
            cooperation_record=record,
            product_name="Serum",
            cooperation_platform=CooperationProduct.Platform.DOUYIN,
        )
        self.toner = CooperationProduct.objects.create(
            cooperation_record=record,
            product_name="Toner",
            cooperation_platform=CooperationProduct.Platform.XIAOHONGSHU,
            order_number="ORD-77",
        )
        self.client.force_login(self.operator)

    def test_product_list_filters(self):
        by_platform = self.client.get("/cooperation-products", {"platform": "douyin"})
        by_order = self.client.get("/cooperation-products", {"q": "ORD-77"})
        by_influencer = self.client.get("/cooperation-products", {"q": "chen"})

        self.assertTemplateUsed(by_platform, "cooperation/cooperation_products.html")
        self.assertEqual(list(by_platform.context["products"]), [self.serum])
        self.assertEqual(list(by_order.context["products"]), [self.toner])
        self.assertEqual(len(by_influencer.context["products"]), 2)

    def test_delete_product(self):
        response = self.client.post(reverse("cooperation:delete_product", args=[self.serum.id]))

        self.assertRedirects(response, "/cooperation-products", fetch_redirect_response=False)
        self.assertIn("Cooperation product deleted successfully.", _messages(response))
        self.assertFalse(CooperationProduct.objects.filter(pk=self.serum.pk).exists())
