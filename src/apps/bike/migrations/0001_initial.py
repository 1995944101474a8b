import django.db.models.functions.text
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Bike",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ref_no", models.CharField(db_index=True, max_length=32)),
                ("brand", models.CharField(db_index=True, max_length=64)),
                ("model", models.CharField(db_index=True, max_length=64)),
                (
                    "size",
                    models.CharField(
                        choices=[("S", "S"), ("M", "M"), ("L", "L"), ("XL", "XL")],
                        db_index=True,
                        max_length=2,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("available", "Available"),
                            ("rented", "Rented"),
                            ("in_maintenance", "In Maintenance"),
                        ],
                        db_index=True,
                        default="available",
                        max_length=20,
                    ),
                ),
                ("entry_date", models.DateField()),
                ("image_url", models.TextField(blank=True, default="")),
            ],
            options={
                "indexes": [
                    models.Index(
                        fields=["brand", "model"], name="bike_brand_model_idx"
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Upper("ref_no"),
                        name="unique_bike_ref_no_ci",
                    )
                ],
            },
        ),
    ]
