"""
Yardman backends — loads the configured collaborators from settings.

Usage:
    from yardman.adapters import get_catalog, get_ledger, get_cart

    ledger = get_ledger()
    ledger.create_reservations([...])

Settings:
    YARDMAN = {
        "CATALOG_BACKEND": "shop.inventory.ProductCatalog",
        "LEDGER_BACKEND": "shop.inventory.StockLedger",
        "CART_BACKEND": "shop.inventory.CartStore",
    }

A backend that is not configured raises ImproperlyConfigured on first use.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from yardman.conf import yardman_settings

if TYPE_CHECKING:
    from yardman.protocols import Catalog, CartStore, Ledger

logger = logging.getLogger(__name__)


# Cached backend instances, keyed by setting name
_lock = threading.Lock()
_backends: dict[str, Any] = {}


def _load(setting: str) -> Any:
    """
    Return the backend configured under YARDMAN[setting].

    Raises:
        ImproperlyConfigured: If the setting is empty or import fails
    """
    backend = _backends.get(setting)
    if backend is None:
        with _lock:
            backend = _backends.get(setting)
            if backend is None:  # double-checked
                path = getattr(yardman_settings, setting)

                if not path:
                    raise ImproperlyConfigured(
                        f"YARDMAN['{setting}'] must be configured. "
                        "Example: 'yardman.adapters.memory.InMemoryLedger'"
                    )

                try:
                    backend_class = import_string(path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import {setting} '{path}': {e}"
                    ) from e

                backend = backend_class()
                _backends[setting] = backend
                logger.debug("Loaded %s: %s", setting, path)

    return backend


def get_catalog() -> Catalog:
    """Return the configured catalog backend."""
    return _load("CATALOG_BACKEND")


def get_ledger() -> Ledger:
    """Return the configured ledger backend."""
    return _load("LEDGER_BACKEND")


def get_cart() -> CartStore:
    """Return the configured cart backend."""
    return _load("CART_BACKEND")


def reset_backends() -> None:
    """Reset the cached backends. Useful for testing."""
    with _lock:
        _backends.clear()
