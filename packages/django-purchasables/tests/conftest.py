from decimal import Decimal

import django
import pytest
from django.conf import settings


def pytest_configure():
    if not settings.configured:
        settings.configure(
            DEBUG=True,
            SECRET_KEY="test-secret-key-for-purchasables",
            DATABASES={
                "default": {
                    "ENGINE": "django.db.backends.sqlite3",
                    "NAME": ":memory:",
                }
            },
            INSTALLED_APPS=[
                "django.contrib.contenttypes",
                "django.contrib.auth",
                "django_purchasables",
            ],
            DEFAULT_AUTO_FIELD="django.db.models.BigAutoField",
            USE_TZ=True,
        )
    django.setup()


class FakeCatalogPricing:
    """Catalog pricing stub that records every call."""

    def __init__(self, prices=None, error=None):
        # (purchasable_id, store_id, promotional) -> price
        self.prices = prices or {}
        self.error = error
        self.calls = []

    def get_price(self, purchasable_id, store_id, user_id=None, promotional=False):
        self.calls.append((purchasable_id, store_id, user_id, promotional))
        if self.error:
            raise self.error
        return self.prices.get((purchasable_id, store_id, promotional))


class FakeSales:
    """Sales stub returning a fixed sale price."""

    def __init__(self, sale_price=None, sales=None, error=None, related=None):
        self.sale_price = sale_price
        self.sales = sales or []
        self.error = error
        self.calls = 0
        # purchasable pk -> sales attached to it
        self.related = related or {}

    def get_sales_for(self, purchasable, store):
        self.calls += 1
        if self.error:
            raise self.error
        return list(self.sales)

    def get_sale_price_for(self, purchasable, store):
        return self.sale_price

    def get_sales_related_to(self, purchasable):
        return list(self.related.get(purchasable.pk, []))


@pytest.fixture
def store(db):
    """Create the primary store."""
    from django_purchasables.models import Store
    return Store.objects.create(name='Main', handle='main', currency='USD', is_primary=True)


@pytest.fixture
def other_store(db):
    """Create a secondary store."""
    from django_purchasables.models import Store
    return Store.objects.create(name='Outlet', handle='outlet', currency='EUR', sort_order=1)


@pytest.fixture
def tax_category(db):
    """Create the default tax category."""
    from django_purchasables.models import TaxCategory
    return TaxCategory.objects.create(name='General', handle='general', is_default=True)


@pytest.fixture
def shipping_category(db):
    """Create the default shipping category."""
    from django_purchasables.models import ShippingCategory
    return ShippingCategory.objects.create(name='Standard', handle='standard', is_default=True)


@pytest.fixture
def make_purchasable(store, other_store, tax_category, shipping_category):
    """Factory saving a purchasable with values in every store.

    Each store gets price 100.00 and stock 10 unless overridden via
    `values={store: {...}}`.
    """
    from django_purchasables.models import Purchasable
    from django_purchasables.services import save_purchasable

    def _make(sku='SKU-1', values=None, **kwargs):
        purchasable = Purchasable(sku=sku, **kwargs)
        for each in (store, other_store):
            purchasable.set_base_price(Decimal('100.00'), each)
            purchasable.set_stock(10, each)
            for key, value in (values or {}).get(each, {}).items():
                purchasable.set_store_value(key, value, each)
        return save_purchasable(purchasable)

    return _make


@pytest.fixture
def catalog_pricing():
    return FakeCatalogPricing()


@pytest.fixture
def sales():
    return FakeSales()


@pytest.fixture
def user(django_user_model):
    """Create a test user."""
    return django_user_model.objects.create_user(username='shopper', password='test')
