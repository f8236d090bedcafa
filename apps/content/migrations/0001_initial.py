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
            name="PageElement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("page", models.SlugField(max_length=64)),
                ("key", models.SlugField(max_length=64)),
                ("text", models.TextField(blank=True)),
                ("color", models.CharField(blank=True, max_length=7)),
                ("background_color", models.CharField(blank=True, max_length=7)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="page_edits",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Page element",
                "verbose_name_plural": "Page elements",
                "ordering": ["page", "key"],
                "constraints": [
                    models.UniqueConstraint(fields=("page", "key"), name="content_unique_page_element"),
                ],
            },
        ),
    ]
