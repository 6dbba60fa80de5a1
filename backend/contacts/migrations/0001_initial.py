import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("influencers", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ContactRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("contact_date", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "contact_type",
                    models.CharField(
                        choices=[
                            ("initial", "Initial contact"),
                            ("follow_up", "Follow-up"),
                            ("negotiation", "Negotiation"),
                            ("contract", "Contract signing"),
                            ("cooperation", "Cooperation delivery"),
                            ("maintenance", "Relationship upkeep"),
                        ],
                        default="initial",
                        max_length=20,
                    ),
                ),
                (
                    "contact_method",
                    models.CharField(
                        choices=[
                            ("wechat", "WeChat"),
                            ("phone", "Phone"),
                            ("email", "Email"),
                            ("qq", "QQ"),
                            ("sms", "SMS"),
                            ("in_person", "In person"),
                            ("video_call", "Video call"),
                            ("other", "Other"),
                        ],
                        default="wechat",
                        max_length=20,
                    ),
                ),
                ("contact_person", models.CharField(blank=True, max_length=100)),
                ("contact_content", models.TextField()),
                (
                    "contact_result",
                    models.CharField(
                        choices=[
                            ("successful", "Successful"),
                            ("failed", "Failed"),
                            ("pending", "Awaiting reply"),
                            ("no_response", "No response"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "follow_up_required",
                    models.CharField(
                        choices=[("yes", "Follow-up needed"), ("no", "No follow-up"), ("completed", "Completed")],
                        default="no",
                        max_length=16,
                    ),
                ),
                ("follow_up_date", models.DateField(blank=True, null=True)),
                ("follow_up_notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="contact_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="contact_records",
                        to="influencers.influencer",
                    ),
                ),
            ],
            options={
                "ordering": ["-contact_date", "-id"],
                "indexes": [models.Index(fields=["follow_up_required", "follow_up_date"], name="contact_follow_up_idx")],
            },
        ),
    ]
