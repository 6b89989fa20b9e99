"""Exceptions for django-purchasables."""


class PurchasableError(Exception):
    """Base exception for purchasable errors."""

    pass


class ConfigurationError(PurchasableError):
    """Raised when required configuration is missing or invalid.

    Covers missing default tax/shipping categories, missing stores and
    unloadable service classes. Not recoverable by the caller.
    """

    pass


class InvalidStoreFieldError(ConfigurationError):
    """Raised when a per-store value is accessed with an unknown key."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Invalid purchasable store key: {key}")
