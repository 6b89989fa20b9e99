"""SKU helpers."""

import uuid

TEMP_SKU_PREFIX = '__temp_'


def generate_temp_sku() -> str:
    """Generate a placeholder SKU for drafts that have not been given one."""
    return f"{TEMP_SKU_PREFIX}{uuid.uuid4().hex}"


def is_temp_sku(sku) -> bool:
    """Check if a SKU is a generated placeholder."""
    return bool(sku) and str(sku).startswith(TEMP_SKU_PREFIX)
