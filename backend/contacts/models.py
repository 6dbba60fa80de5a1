from django.conf import settings
from django.db import models
from django.utils import timezone

from influencers.models import Influencer


class ContactRecord(models.Model):
    class ContactType(models.TextChoices):
        INITIAL = "initial", "Initial contact"
        FOLLOW_UP = "follow_up", "Follow-up"
        NEGOTIATION = "negotiation", "Negotiation"
        CONTRACT = "contract", "Contract signing"
        COOPERATION = "cooperation", "Cooperation delivery"
        MAINTENANCE = "maintenance", "Relationship upkeep"

    class ContactMethod(models.TextChoices):
        WECHAT = "wechat", "WeChat"
        PHONE = "phone", "Phone"
        EMAIL = "email", "Email"
        QQ = "qq", "QQ"
        SMS = "sms", "SMS"
        IN_PERSON = "in_person", "In person"
        VIDEO_CALL = "video_call", "Video call"
        OTHER = "other", "Other"

    class ContactResult(models.TextChoices):
        SUCCESSFUL = "successful", "Successful"
        FAILED = "failed", "Failed"
        PENDING = "pending", "Awaiting reply"
        NO_RESPONSE = "no_response", "No response"

    class FollowUp(models.TextChoices):
        YES = "yes", "Follow-up needed"
        NO = "no", "No follow-up"
        COMPLETED = "completed", "Completed"

    influencer = models.ForeignKey(Influencer, on_delete=models.CASCADE, related_name="contact_records")
    contact_date = models.DateTimeField(default=timezone.now)
    contact_type = models.CharField(max_length=20, choices=ContactType.choices, default=ContactType.INITIAL)
    contact_method = models.CharField(max_length=20, choices=ContactMethod.choices, default=ContactMethod.WECHAT)
    contact_person = models.CharField(max_length=100, blank=True)
    contact_content = models.TextField()
    contact_result = models.CharField(max_length=20, choices=ContactResult.choices, default=ContactResult.PENDING)
    follow_up_required = models.CharField(max_length=16, choices=FollowUp.choices, default=FollowUp.NO)
    follow_up_date = models.DateField(null=True, blank=True)
    follow_up_notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="contact_records",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-contact_date", "-id"]
        indexes = [
            models.Index(fields=["follow_up_required", "follow_up_date"], name="contact_follow_up_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.influencer.name} {self.get_contact_type_display()} {self.contact_date:%Y-%m-%d}"

    @property
    def is_follow_up_pending(self) -> bool:
        return self.follow_up_required == self.FollowUp.YES

    @property
    def is_follow_up_overdue(self) -> bool:
        return (
            self.is_follow_up_pending
            and self.follow_up_date is not None
            and self.follow_up_date < timezone.localdate()
        )


def mark_follow_up_completed(record: ContactRecord, *, notes: str = "") -> ContactRecord:
    record.follow_up_required = ContactRecord.FollowUp.COMPLETED
    if notes:
        record.follow_up_notes = f"{record.follow_up_notes}\n{notes}".strip() if record.follow_up_notes else notes
    record.save(update_fields=["follow_up_required", "follow_up_notes", "updated_at"])
    return record


def contact_record_stats(queryset) -> dict:
    by_type = dict.fromkeys(ContactRecord.ContactType.values, 0)
    by_result = dict.fromkeys(ContactRecord.ContactResult.values, 0)
    for contact_type, contact_result in queryset.values_list("contact_type", "contact_result"):
        by_type[contact_type] = by_type.get(contact_type, 0) + 1
        by_result[contact_result] = by_result.get(contact_result, 0) + 1
    return {
        "total": queryset.count(),
        "by_type": by_type,
        "by_result": by_result,
        "pending_follow_up": queryset.filter(follow_up_required=ContactRecord.FollowUp.YES).count(),
    }
