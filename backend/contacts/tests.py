from __future__ import annotations

from datetime import timedelta
from io import BytesIO

from django.contrib.messages import get_messages
from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from openpyxl import load_workbook

from accounts.models import Role, User
from influencers.models import Influencer
from menus.defaults import install_defaults

from .models import ContactRecord, contact_record_stats, mark_follow_up_completed


def _messages(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


class ContactRecordModelTests(TestCase):
    def setUp(self):
        self.influencer = Influencer.objects.create(name="Lin Xiao")

    def test_overdue_follow_up(self):
        record = ContactRecord.objects.create(
            influencer=self.influencer,
            contact_content="Waiting on rates",
            follow_up_required=ContactRecord.FollowUp.YES,
            follow_up_date=timezone.localdate() - timedelta(days=1),
        )

        self.assertTrue(record.is_follow_up_pending)
        self.assertTrue(record.is_follow_up_overdue)

    def test_mark_follow_up_completed_appends_notes(self):
        record = ContactRecord.objects.create(
            influencer=self.influencer,
            contact_content="Waiting on rates",
            follow_up_required=ContactRecord.FollowUp.YES,
            follow_up_date=timezone.localdate(),
            follow_up_notes="Call on Monday",
        )

        mark_follow_up_completed(record, notes="Rates received")

        record.refresh_from_db()
        self.assertEqual(record.follow_up_required, ContactRecord.FollowUp.COMPLETED)
        self.assertEqual(record.follow_up_notes, "Call on Monday\nRates received")
        self.assertFalse(record.is_follow_up_pending)

    def test_stats(self):
        ContactRecord.objects.create(influencer=self.influencer, contact_content="a")
        ContactRecord.objects.create(
            influencer=self.influencer,
            contact_content="b",
            contact_type=ContactRecord.ContactType.NEGOTIATION,
            contact_result=ContactRecord.ContactResult.SUCCESSFUL,
            follow_up_required=ContactRecord.FollowUp.YES,
        )

        stats = contact_record_stats(ContactRecord.objects.all())

        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["by_type"]["initial"], 1)
        self.assertEqual(stats["by_type"]["negotiation"], 1)
        self.assertEqual(stats["by_result"]["successful"], 1)
        self.assertEqual(stats["by_result"]["no_response"], 0)
        self.assertEqual(stats["pending_follow_up"], 1)


class ContactRecordViewTests(TestCase):
    def setUp(self):
        cache.clear()
        install_defaults()
        self.operator = User.objects.create_user(username="contact_operator", password="test12345")
        self.operator.roles.add(Role.objects.get(code="operator"))
        self.viewer = User.objects.create_user(username="contact_viewer", password="test12345")
        self.viewer.roles.add(Role.objects.get(code="viewer"))
        self.lin = Influencer.objects.create(name="Lin Xiao")
        self.zhou = Influencer.objects.create(name="Zhou Mei")
        self.pending = ContactRecord.objects.create(
            influencer=self.lin,
            contact_content="Asked for the media kit",
            contact_person="Agent Wu",
            follow_up_required=ContactRecord.FollowUp.YES,
            follow_up_date=timezone.localdate(),
        )
        self.closed = ContactRecord.objects.create(
            influencer=self.zhou,
            contact_date=timezone.now() - timedelta(days=30),
            contact_content="Declined for now",
            contact_result=ContactRecord.ContactResult.FAILED,
        )

    def _payload(self, **overrides):
        payload = {
            "influencer": self.zhou.id,
            "contact_date": "2026-10-01 10:30",
            "contact_type": ContactRecord.ContactType.FOLLOW_UP,
            "contact_method": ContactRecord.ContactMethod.PHONE,
            "contact_person": "",
            "contact_content": "Checked availability for November",
            "contact_result": ContactRecord.ContactResult.PENDING,
            "follow_up_required": ContactRecord.FollowUp.NO,
            "follow_up_date": "",
            "follow_up_notes": "",
        }
        payload.update(overrides)
        return payload

    def test_create_records_author(self):
        self.client.force_login(self.operator)

        response = self.client.post("/contact-records", self._payload())

        self.assertRedirects(response, "/contact-records", fetch_redirect_response=False)
        record = ContactRecord.objects.get(contact_content="Checked availability for November")
        self.assertEqual(record.created_by, self.operator)

    def test_follow_up_needs_date(self):
        self.client.force_login(self.operator)

        response = self.client.post("/contact-records", self._payload(follow_up_required=ContactRecord.FollowUp.YES))

        self.assertEqual(response.status_code, 200)
        self.assertIn("follow_up_date", response.context["form"].errors)

    def test_viewer_cannot_create(self):
        self.client.force_login(self.viewer)

        response = self.client.post("/contact-records", self._payload())

        self.assertIn("You do not have permission to manage contact records.", _messages(response))
        self.assertEqual(ContactRecord.objects.count(), 2)

    def test_list_prefills_influencer_and_filters(self):
        self.client.force_login(self.operator)

        response = self.client.get("/contact-records", {"influencer": self.lin.id})

        self.assertEqual(response.context["form"].initial["influencer"], self.lin.id)
        self.assertEqual(list(response.context["records"]), [self.pending])
        self.assertEqual(response.context["stats"]["total"], 1)

    def test_filters(self):
        self.client.force_login(self.operator)

        pending = self.client.get("/contact-records", {"pending": "1"})
        failed = self.client.get("/contact-records", {"contact_result": "failed"})
        searched = self.client.get("/contact-records", {"q": "agent wu"})
        recent = self.client.get(
            "/contact-records",
            {"date_from": (timezone.localdate() - timedelta(days=7)).isoformat()},
        )

        self.assertEqual(list(pending.context["records"]), [self.pending])
        self.assertEqual(list(failed.context["records"]), [self.closed])
        self.assertEqual(list(searched.context["records"]), [self.pending])
        self.assertEqual(list(recent.context["records"]), [self.pending])

    def test_edit(self):
        self.client.force_login(self.operator)

        response = self.client.post(
            reverse("contacts:edit", args=[self.closed.id]),
            self._payload(contact_content="Declined, revisit in spring"),
        )

        self.assertRedirects(response, "/contact-records", fetch_redirect_response=False)
        self.closed.refresh_from_db()
        self.assertEqual(self.closed.contact_content, "Declined, revisit in spring")

    def test_delete(self):
        self.client.force_login(self.operator)

        self.client.post(reverse("contacts:delete", args=[self.closed.id]))

        self.assertFalse(ContactRecord.objects.filter(pk=self.closed.pk).exists())

    def test_complete_follow_up(self):
        self.client.force_login(self.operator)

        response = self.client.post(reverse("contacts:follow_up", args=[self.pending.id]), {"notes": "Kit received"})

        self.assertIn("Follow-up marked as completed.", _messages(response))
        self.pending.refresh_from_db()
        self.assertEqual(self.pending.follow_up_required, ContactRecord.FollowUp.COMPLETED)
        self.assertEqual(self.pending.follow_up_notes, "Kit received")

    def test_complete_follow_up_without_pending(self):
        self.client.force_login(self.operator)

        response = self.client.post(reverse("contacts:follow_up", args=[self.closed.id]))

        self.assertIn("This contact record has no pending follow-up.", _messages(response))
        self.closed.refresh_from_db()
        self.assertEqual(self.closed.follow_up_required, ContactRecord.FollowUp.NO)

    def test_export(self):
        self.client.force_login(self.operator)

        response = self.client.get(reverse("contacts:export"), {"influencer": self.zhou.id})

        self.assertEqual(response.status_code, 200)
        sheet = load_workbook(BytesIO(response.content)).active
        rows = list(sheet.iter_rows(values_only=True))
        self.assertEqual(rows[0][0], "Date")
        self.assertEqual(len(rows), 2)
        self.assertEqual(rows[1][1], "Zhou Mei")
        self.assertEqual(rows[1][6], "Failed")

    def test_export_requires_permission(self):
        self.client.force_login(self.viewer)

        response = self.client.get(reverse("contacts:export"))

        self.assertRedirects(response, "/contact-records", fetch_redirect_response=False)
