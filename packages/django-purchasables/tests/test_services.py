"""Tests for purchasable services.

These tests cover validation, persistence and the default collaborators.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from django_purchasables.exceptions import ConfigurationError
from django_purchasables.models import (
    CatalogPrice,
    Purchasable,
    PurchasableStore,
    Store,
    TaxCategory,
)
from django_purchasables.services import (
    ModelCatalogPricingService,
    ModelStoreDirectory,
    NoSalesService,
    delete_purchasable,
    load_service,
    save_purchasable,
    validate_purchasable,
)
from django_purchasables.utils import generate_temp_sku


def _purchasable_for(stores, sku='SKU-1', price=Decimal('10.00'), stock=5, **kwargs):
    purchasable = Purchasable(sku=sku, **kwargs)
    for store in stores:
        purchasable.set_base_price(price, store)
        purchasable.set_stock(stock, store)
    return purchasable


@pytest.mark.django_db
class TestValidatePurchasable:
    """Tests for validate_purchasable."""

    def test_valid_purchasable(self, store):
        validate_purchasable(_purchasable_for([store]), [store])

    def test_sku_required_for_enabled(self, store):
        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(_purchasable_for([store], sku=''), [store])

        assert 'sku' in excinfo.value.message_dict

    def test_temp_sku_counts_as_missing(self, store):
        purchasable = _purchasable_for([store], sku=generate_temp_sku())

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'sku' in excinfo.value.message_dict

    def test_sku_max_length(self, store):
        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(_purchasable_for([store], sku='X' * 256), [store])

        assert 'sku' in excinfo.value.message_dict

    def test_sku_unique_case_insensitive(self, make_purchasable, store, other_store):
        make_purchasable(sku='MUG-BLUE')

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(_purchasable_for([store, other_store], sku='mug-blue'), [store, other_store])

        assert 'sku' in excinfo.value.message_dict

    def test_duplicate_sku_allowed_when_disabled(self, make_purchasable, store):
        make_purchasable(sku='MUG-BLUE')
        purchasable = _purchasable_for([store], sku='MUG-BLUE', enabled=False)

        validate_purchasable(purchasable, [store])

    def test_resaving_keeps_own_sku(self, make_purchasable, store, other_store):
        purchasable = make_purchasable(sku='MUG-BLUE')

        validate_purchasable(purchasable, [store, other_store])

    def test_price_required_for_enabled(self, store):
        purchasable = _purchasable_for([store], price=None)

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'price' in excinfo.value.message_dict
        assert 'Main' in excinfo.value.message_dict['price'][0]

    def test_zero_stock_without_unlimited_fails(self, store):
        purchasable = _purchasable_for([store], stock=0)

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'stock' in excinfo.value.message_dict

    def test_missing_stock_with_unlimited_passes(self, store):
        purchasable = _purchasable_for([store], stock=None)
        purchasable.set_has_unlimited_stock(True, store)

        validate_purchasable(purchasable, [store])

    def test_disabled_purchasable_skips_required_rules(self, store):
        purchasable = _purchasable_for([store], sku='', price=None, stock=None, enabled=False)

        validate_purchasable(purchasable, [store])

    def test_numeric_store_values_must_parse(self, store):
        purchasable = _purchasable_for([store], price='ten')
        purchasable.set_base_promotional_price('cheap', store)

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'price' in excinfo.value.message_dict
        assert 'promotional_price' in excinfo.value.message_dict

    def test_stock_must_parse(self, store):
        purchasable = _purchasable_for([store], stock='lots')

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'stock' in excinfo.value.message_dict

    def test_dimensions_must_parse(self, store):
        purchasable = _purchasable_for([store], weight='heavy', width='wide')

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert 'weight' in excinfo.value.message_dict
        assert 'width' in excinfo.value.message_dict

    def test_numeric_strings_are_cleaned(self, store):
        purchasable = _purchasable_for([store], price='12.5', stock='3', weight='1.25')

        validate_purchasable(purchasable, [store])

        assert purchasable.get_base_price(store) == Decimal('12.5')
        assert purchasable.get_stock(store) == 3
        assert purchasable.weight == Decimal('1.25')

    def test_errors_are_collected(self, store):
        purchasable = _purchasable_for([store], sku='', price=None, stock=0)

        with pytest.raises(ValidationError) as excinfo:
            validate_purchasable(purchasable, [store])

        assert {'sku', 'price', 'stock'} <= set(excinfo.value.message_dict)


@pytest.mark.django_db
class TestSavePurchasable:
    """Tests for save_purchasable."""

    def test_saves_purchasable_and_store_values(self, store, other_store, tax_category, shipping_category):
        purchasable = _purchasable_for([store, other_store])

        saved = save_purchasable(purchasable)

        assert saved.pk is not None
        assert saved.tax_category_id == tax_category.pk
        assert saved.shipping_category_id == shipping_category.pk
        assert PurchasableStore.objects.filter(purchasable=saved).count() == 2

    def test_resave_updates_existing_rows(self, make_purchasable, store):
        purchasable = make_purchasable()
        purchasable.set_base_price(Decimal('55.00'), store)

        save_purchasable(purchasable)

        row = PurchasableStore.objects.get(purchasable=purchasable, store=store)
        assert row.price == Decimal('55.00')
        assert PurchasableStore.objects.filter(purchasable=purchasable).count() == 2

    def test_validation_failure_saves_nothing(self, store, other_store, tax_category, shipping_category):
        """Stock 0 without unlimited stock aborts the save."""
        purchasable = _purchasable_for([store, other_store], stock=0)

        with pytest.raises(ValidationError) as excinfo:
            save_purchasable(purchasable)

        assert 'stock' in excinfo.value.message_dict
        assert Purchasable.objects.count() == 0
        assert PurchasableStore.objects.count() == 0

    def test_missing_store_values_raise(self, store, other_store, tax_category, shipping_category):
        purchasable = _purchasable_for([store])

        with pytest.raises(ConfigurationError, match='outlet'):
            save_purchasable(purchasable)

        assert Purchasable.objects.count() == 0

    def test_missing_default_category_saves_nothing(self, store, shipping_category):
        purchasable = _purchasable_for([store])

        with pytest.raises(ConfigurationError):
            save_purchasable(purchasable)

        assert Purchasable.objects.count() == 0
        assert PurchasableStore.objects.count() == 0

    def test_explicit_store_directory(self, store, other_store, tax_category, shipping_category):
        class OnlyMain:
            def current_store(self):
                return store

            def all_stores(self):
                return [store]

        saved = save_purchasable(_purchasable_for([store]), store_directory=OnlyMain())

        assert list(PurchasableStore.objects.filter(purchasable=saved).values_list('store', flat=True)) == [store.pk]

    def test_explicit_tax_category_kept(self, store, other_store, tax_category, shipping_category):
        reduced = TaxCategory.objects.create(name='Reduced', handle='reduced')
        purchasable = _purchasable_for([store, other_store], tax_category=reduced)

        saved = save_purchasable(purchasable)

        assert saved.tax_category == reduced


@pytest.mark.django_db
class TestDeletePurchasable:
    """Tests for delete_purchasable."""

    def test_delete_cascades(self, make_purchasable, store):
        purchasable = make_purchasable()
        CatalogPrice.objects.create(purchasable=purchasable, store=store, price=Decimal('9.00'))

        delete_purchasable(purchasable)

        assert Purchasable.objects.count() == 0
        assert PurchasableStore.objects.count() == 0
        assert CatalogPrice.objects.count() == 0

    def test_deleting_store_removes_its_values(self, make_purchasable, other_store):
        purchasable = make_purchasable()

        other_store.delete()

        assert PurchasableStore.objects.filter(purchasable=purchasable).count() == 1


@pytest.mark.django_db
class TestModelCatalogPricingService:
    """Tests for the CatalogPrice-backed catalog pricing."""

    def test_no_prices(self, make_purchasable, store):
        purchasable = make_purchasable()
        assert ModelCatalogPricingService().get_price(purchasable.pk, store.pk) is None

    def test_lowest_current_price(self, make_purchasable, store):
        purchasable = make_purchasable()
        now = timezone.now()
        CatalogPrice.objects.create(purchasable=purchasable, store=store, price=Decimal('90.00'))
        CatalogPrice.objects.create(purchasable=purchasable, store=store, price=Decimal('88.00'))
        CatalogPrice.objects.create(
            purchasable=purchasable, store=store, price=Decimal('50.00'),
            date_to=now - timedelta(days=1),
        )
        CatalogPrice.objects.create(
            purchasable=purchasable, store=store, price=Decimal('40.00'),
            date_from=now + timedelta(days=1),
        )

        assert ModelCatalogPricingService().get_price(purchasable.pk, store.pk) == Decimal('88.00')

    def test_promotional_prices_are_separate(self, make_purchasable, store):
        purchasable = make_purchasable()
        CatalogPrice.objects.create(purchasable=purchasable, store=store, price=Decimal('90.00'))
        CatalogPrice.objects.create(
            purchasable=purchasable, store=store, price=Decimal('70.00'), is_promotional=True,
        )
        service = ModelCatalogPricingService()

        assert service.get_price(purchasable.pk, store.pk, promotional=False) == Decimal('90.00')
        assert service.get_price(purchasable.pk, store.pk, promotional=True) == Decimal('70.00')

    def test_user_prices_only_for_that_user(self, make_purchasable, store, user, django_user_model):
        purchasable = make_purchasable()
        stranger = django_user_model.objects.create_user(username='stranger', password='test')
        CatalogPrice.objects.create(purchasable=purchasable, store=store, price=Decimal('90.00'))
        CatalogPrice.objects.create(
            purchasable=purchasable, store=store, user=user, price=Decimal('80.00'),
        )
        service = ModelCatalogPricingService()

        assert service.get_price(purchasable.pk, store.pk, user.pk) == Decimal('80.00')
        assert service.get_price(purchasable.pk, store.pk, stranger.pk) == Decimal('90.00')
        assert service.get_price(purchasable.pk, store.pk, None) == Decimal('90.00')

    def test_scoped_to_store(self, make_purchasable, store, other_store):
        purchasable = make_purchasable()
        CatalogPrice.objects.create(purchasable=purchasable, store=other_store, price=Decimal('60.00'))

        assert ModelCatalogPricingService().get_price(purchasable.pk, store.pk) is None

    def test_unsaved_purchasable(self, store):
        assert ModelCatalogPricingService().get_price(None, store.pk) is None


@pytest.mark.django_db
class TestModelStoreDirectory:
    """Tests for the Store-backed directory."""

    def test_current_store_is_primary(self, store, other_store):
        assert ModelStoreDirectory().current_store() == store

    def test_no_primary_store_raises(self, other_store):
        with pytest.raises(ConfigurationError):
            ModelStoreDirectory().current_store()

    def test_all_stores_in_order(self, store, other_store):
        Store.objects.create(name='Wholesale', handle='wholesale', sort_order=5)

        handles = [s.handle for s in ModelStoreDirectory().all_stores()]

        assert handles == ['main', 'outlet', 'wholesale']


class TestLoadService:
    """Tests for loading services by dotted path."""

    def test_loads_and_instantiates(self):
        service = load_service('django_purchasables.services.NoSalesService')
        assert isinstance(service, NoSalesService)

    def test_bad_path_raises(self):
        with pytest.raises(ConfigurationError, match='nowhere'):
            load_service('nowhere.Service')

    def test_no_sales_service(self):
        service = NoSalesService()
        assert service.get_sales_for(None, None) == []
        assert service.get_sale_price_for(None, None) is None
        assert service.get_sales_related_to(None) == []
