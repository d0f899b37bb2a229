"""
Yardman Adapters.

Backend loading and stub implementations of the collaborator protocols.
"""

from yardman.adapters.backends import (
    get_cart,
    get_catalog,
    get_ledger,
    reset_backends,
)

__all__ = [
    "get_cart",
    "get_catalog",
    "get_ledger",
    "reset_backends",
]
