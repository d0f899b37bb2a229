"""
Yardman configuration.

Usage in settings.py:
    YARDMAN = {
        "CATALOG_BACKEND": "shop.inventory.ProductCatalog",
        "LEDGER_BACKEND": "shop.inventory.StockLedger",
        "CART_BACKEND": "shop.inventory.CartStore",
        "POLICY_METADATA_KEY": "inventory",
        "DEFAULT_LOCATION_ID": "sloc_main",
        "INCLUDE_INCOMING_IN_ATS": False,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class YardmanSettings:
    """Yardman configuration settings."""

    # Collaborator backends (dotted paths, instantiated without arguments)
    CATALOG_BACKEND: str = ""
    LEDGER_BACKEND: str = ""
    CART_BACKEND: str = ""

    # Metadata key holding the quantity policy on variants/products
    POLICY_METADATA_KEY: str = "inventory"

    # Stock location used when checkout doesn't pass one ("" = none)
    DEFAULT_LOCATION_ID: str = ""

    # Count incoming stock as available-to-sell
    INCLUDE_INCOMING_IN_ATS: bool = False


def get_yardman_settings() -> YardmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "YARDMAN", {})
    return YardmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in YardmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_yardman_settings(), name)


yardman_settings = _LazySettings()
