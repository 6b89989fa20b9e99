# Generated manually for standalone django-purchasables package

import django.db.models.deletion
import django.db.models.functions.text
from django.conf import settings
from django.db import migrations, models

import django_purchasables.conf


def _timestamps():
    return [
        (
            "id",
            models.BigAutoField(
                auto_created=True,
                primary_key=True,
                serialize=False,
                verbose_name="ID",
            ),
        ),
        ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
        ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
    ]


def _category_fields():
    return _timestamps() + [
        ("name", models.CharField(max_length=255, verbose_name="name")),
        ("handle", models.SlugField(max_length=255, unique=True, verbose_name="handle")),
        ("is_default", models.BooleanField(db_index=True, default=False, verbose_name="is default")),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Product",
            fields=_timestamps() + [
                ("title", models.CharField(max_length=255, verbose_name="title")),
            ],
            options={
                "verbose_name": "product",
                "verbose_name_plural": "products",
                "ordering": ["title"],
            },
        ),
        migrations.CreateModel(
            name="ShippingCategory",
            fields=_category_fields(),
            options={
                "verbose_name": "shipping category",
                "verbose_name_plural": "shipping categories",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="TaxCategory",
            fields=_category_fields(),
            options={
                "verbose_name": "tax category",
                "verbose_name_plural": "tax categories",
                "ordering": ["name"],
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="Store",
            fields=_timestamps() + [
                ("name", models.CharField(max_length=255, verbose_name="name")),
                (
                    "handle",
                    models.SlugField(
                        help_text="Stable identifier, also used as the price cache key",
                        max_length=255,
                        unique=True,
                        verbose_name="handle",
                    ),
                ),
                (
                    "currency",
                    models.CharField(
                        default=django_purchasables.conf.get_default_currency,
                        help_text="ISO 4217 currency code for prices in this store",
                        max_length=3,
                        verbose_name="currency",
                    ),
                ),
                ("is_primary", models.BooleanField(db_index=True, default=False, verbose_name="is primary")),
                ("sort_order", models.PositiveIntegerField(default=0, verbose_name="sort order")),
            ],
            options={
                "verbose_name": "store",
                "verbose_name_plural": "stores",
                "ordering": ["sort_order", "name"],
            },
        ),
        migrations.CreateModel(
            name="Purchasable",
            fields=_timestamps() + [
                ("title", models.CharField(blank=True, max_length=255, verbose_name="title")),
                (
                    "sku",
                    models.CharField(
                        blank=True,
                        db_index=True,
                        help_text="Unique (case-insensitive) among enabled purchasables",
                        max_length=255,
                        verbose_name="SKU",
                    ),
                ),
                (
                    "enabled",
                    models.BooleanField(
                        db_index=True,
                        default=True,
                        help_text="Enabled purchasables must have a SKU, price and stock",
                        verbose_name="enabled",
                    ),
                ),
                ("width", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True, verbose_name="width")),
                ("height", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True, verbose_name="height")),
                ("length", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True, verbose_name="length")),
                ("weight", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True, verbose_name="weight")),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="variants",
                        to="django_purchasables.product",
                        verbose_name="product",
                    ),
                ),
                (
                    "shipping_category",
                    models.ForeignKey(
                        blank=True,
                        help_text="Falls back to the default shipping category",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchasables",
                        to="django_purchasables.shippingcategory",
                        verbose_name="shipping category",
                    ),
                ),
                (
                    "tax_category",
                    models.ForeignKey(
                        blank=True,
                        help_text="Falls back to the default tax category",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="purchasables",
                        to="django_purchasables.taxcategory",
                        verbose_name="tax category",
                    ),
                ),
            ],
            options={
                "verbose_name": "purchasable",
                "verbose_name_plural": "purchasables",
                "ordering": ["sku"],
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower("sku"),
                        condition=models.Q(("enabled", True)),
                        name="unique_live_purchasable_sku",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="PurchasableStore",
            fields=_timestamps() + [
                ("price", models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True, verbose_name="price")),
                (
                    "promotional_price",
                    models.DecimalField(
                        blank=True,
                        decimal_places=4,
                        help_text="Only applied when lower than the price",
                        max_digits=14,
                        null=True,
                        verbose_name="promotional price",
                    ),
                ),
                ("stock", models.IntegerField(blank=True, null=True, verbose_name="stock")),
                ("has_unlimited_stock", models.BooleanField(default=False, verbose_name="has unlimited stock")),
                ("min_qty", models.PositiveIntegerField(blank=True, null=True, verbose_name="minimum quantity")),
                ("max_qty", models.PositiveIntegerField(blank=True, null=True, verbose_name="maximum quantity")),
                (
                    "promotable",
                    models.BooleanField(
                        default=True,
                        help_text="Whether sales and discounts can apply",
                        verbose_name="promotable",
                    ),
                ),
                ("available_for_purchase", models.BooleanField(default=True, verbose_name="available for purchase")),
                ("free_shipping", models.BooleanField(default=False, verbose_name="free shipping")),
                (
                    "purchasable",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="purchasable_stores",
                        to="django_purchasables.purchasable",
                        verbose_name="purchasable",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="purchasable_stores",
                        to="django_purchasables.store",
                        verbose_name="store",
                    ),
                ),
            ],
            options={
                "verbose_name": "purchasable store",
                "verbose_name_plural": "purchasable stores",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("purchasable", "store"),
                        name="unique_purchasable_store",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CatalogPrice",
            fields=_timestamps() + [
                ("price", models.DecimalField(decimal_places=4, max_digits=14, verbose_name="price")),
                ("is_promotional", models.BooleanField(db_index=True, default=False, verbose_name="is promotional")),
                ("date_from", models.DateTimeField(blank=True, null=True, verbose_name="date from")),
                ("date_to", models.DateTimeField(blank=True, null=True, verbose_name="date to")),
                (
                    "purchasable",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="catalog_prices",
                        to="django_purchasables.purchasable",
                        verbose_name="purchasable",
                    ),
                ),
                (
                    "store",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="catalog_prices",
                        to="django_purchasables.store",
                        verbose_name="store",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        blank=True,
                        help_text="Leave blank for prices that apply to everyone",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "catalog price",
                "verbose_name_plural": "catalog prices",
                "indexes": [
                    models.Index(
                        fields=["purchasable", "store", "is_promotional"],
                        name="purchasables_catprice_lookup",
                    ),
                ],
            },
        ),
    ]
