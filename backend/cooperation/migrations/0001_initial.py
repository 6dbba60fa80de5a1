import decimal

import django.core.validators
import django.db.models.deletion
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
            name="CooperationRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "cooperation_status",
                    models.PositiveSmallIntegerField(
                        choices=[
                            (0, "Pending confirmation"),
                            (1, "Confirmed"),
                            (2, "In progress"),
                            (3, "Completed"),
                            (4, "Cancelled"),
                        ],
                        default=0,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cooperation_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "influencer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cooperation_records",
                        to="influencers.influencer",
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
            },
        ),
        migrations.CreateModel(
            name="CooperationProduct",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=150)),
                ("product_code", models.CharField(blank=True, max_length=64)),
                ("price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                (
                    "commission_rate",
                    models.DecimalField(
                        blank=True,
                        decimal_places=2,
                        help_text="Percent of the sale price.",
                        max_digits=5,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(decimal.Decimal("0")),
                            django.core.validators.MaxValueValidator(decimal.Decimal("100")),
                        ],
                    ),
                ),
                (
                    "cooperation_platform",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("douyin", "Douyin"),
                            ("xiaohongshu", "Xiaohongshu"),
                            ("wechat_channels", "WeChat Channels"),
                            ("other", "Other"),
                        ],
                        max_length=20,
                    ),
                ),
                ("order_number", models.CharField(blank=True, max_length=64)),
                ("external_number", models.CharField(blank=True, max_length=64)),
                ("cooperation_time", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "cooperation_record",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="products",
                        to="cooperation.cooperationrecord",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
