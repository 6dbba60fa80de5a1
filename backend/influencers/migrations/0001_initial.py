import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Influencer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("nickname", models.CharField(blank=True, max_length=100)),
                ("email", models.EmailField(blank=True, max_length=254)),
                ("wechat", models.CharField(blank=True, max_length=64)),
                ("douyin_url", models.URLField(blank=True)),
                ("douyin_followers", models.PositiveIntegerField(blank=True, null=True)),
                ("xiaohongshu_url", models.URLField(blank=True)),
                ("xiaohongshu_followers", models.PositiveIntegerField(blank=True, null=True)),
                ("wechat_channels_url", models.URLField(blank=True)),
                ("wechat_channels_followers", models.PositiveIntegerField(blank=True, null=True)),
                ("wechat_channels_has_shop", models.BooleanField(default=False)),
                ("cooperation_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("cooperation_types", models.JSONField(blank=True, default=list)),
                ("is_refund", models.BooleanField(default=False)),
                ("description", models.TextField(blank=True)),
                ("internal_notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_influencers",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-id"],
                "indexes": [models.Index(fields=["name"], name="influencer_name_idx")],
            },
        ),
    ]
