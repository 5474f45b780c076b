from decimal import Decimal

import django.db.models.deletion
import uuid6
from django.db import migrations, models


def _base_fields():
    return [
        (
            "id",
            models.UUIDField(
                default=uuid6.uuid7,
                editable=False,
                primary_key=True,
                serialize=False,
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True)),
        ("updated_at", models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("products", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WeeklySalesReport",
            fields=_base_fields()
            + [
                ("period_key", models.CharField(max_length=10, unique=True)),
                ("week_start", models.DateField()),
                ("week_end", models.DateField()),
                ("total_orders", models.PositiveIntegerField(default=0)),
                ("total_units", models.PositiveIntegerField(default=0)),
                (
                    "total_revenue",
                    models.DecimalField(
                        decimal_places=2, default=Decimal("0.00"), max_digits=14
                    ),
                ),
                (
                    "best_selling_category",
                    models.CharField(
                        blank=True,
                        choices=[
                            ("MEDICINE", "Medicamento"),
                            ("COSMETIC", "Cosmético"),
                            ("HYGIENE", "Higiene personal"),
                            ("SUPPLEMENT", "Suplemento"),
                            ("OTHER", "Otro"),
                        ],
                        default="",
                        max_length=20,
                    ),
                ),
                (
                    "best_selling_product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="products.product",
                    ),
                ),
            ],
            options={
                "db_table": "weekly_sales_reports",
                "ordering": ["-week_start"],
            },
        ),
        migrations.CreateModel(
            name="WeeklySalesReportItem",
            fields=_base_fields()
            + [
                ("units_sold", models.PositiveIntegerField()),
                ("revenue", models.DecimalField(decimal_places=2, max_digits=14)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="+",
                        to="products.product",
                    ),
                ),
                (
                    "report",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="reports.weeklysalesreport",
                    ),
                ),
            ],
            options={
                "db_table": "weekly_sales_report_items",
                "ordering": ["-units_sold", "product_id"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("report", "product"),
                        name="report_items_unique_product",
                    ),
                ],
            },
        ),
    ]
