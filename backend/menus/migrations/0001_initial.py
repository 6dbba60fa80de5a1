import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Menu",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("title", models.CharField(max_length=100)),
                ("path", models.CharField(blank=True, max_length=200)),
                ("icon", models.CharField(blank=True, max_length=64)),
                (
                    "component",
                    models.CharField(
                        blank=True,
                        help_text="Symbolic page component, e.g. InfluencerManagement.",
                        max_length=100,
                    ),
                ),
                ("description", models.CharField(blank=True, max_length=255)),
                (
                    "menu_type",
                    models.CharField(
                        choices=[("menu", "Menu"), ("button", "Button")],
                        default="menu",
                        max_length=16,
                    ),
                ),
                ("sort_order", models.IntegerField(default=0)),
                ("is_hidden", models.BooleanField(default=False)),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="children",
                        to="menus.menu",
                    ),
                ),
            ],
            options={
                "ordering": ["sort_order", "id"],
                "indexes": [models.Index(fields=["parent", "sort_order"], name="menus_menu_parent_sort_idx")],
            },
        ),
    ]
