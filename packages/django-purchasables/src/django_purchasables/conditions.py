"""Product query conditions on variant data."""

from django.utils.translation import gettext_lazy as _

from django_purchasables.models import Purchasable


class HasUnlimitedStockConditionRule:
    """Matches products with a variant whose unlimited-stock flag equals `value`.

    Variants without values for the store count as not having unlimited
    stock, both in queries and in memory.

    Usage:
        rule = HasUnlimitedStockConditionRule(True, store=store)
        products = rule.modify_query(Product.objects.all())
        rule.matches(product)
    """

    label = _('Variant Has Unlimited Stock')
    exclusive_query_params = ('variant_stock',)

    def __init__(self, value: bool = True, *, store):
        self.value = bool(value)
        self.store = store

    def match_value(self, value) -> bool:
        return bool(value) == self.value

    def modify_query(self, queryset):
        """Narrow a Product queryset to products with a matching variant."""
        product_ids = (
            Purchasable.objects.filter(product__isnull=False)
            .has_unlimited_stock(self.value, store=self.store)
            .values('product_id')
        )
        return queryset.filter(pk__in=product_ids)

    def matches(self, product) -> bool:
        """Check a product in memory, stopping at the first matching variant."""
        for variant in product.variants.all():
            if self.match_value(variant.get_has_unlimited_stock(self.store)):
                return True
        return False
