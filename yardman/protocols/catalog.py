"""
Catalog Protocol — Interface for variant and policy lookups.

Yardman defines this protocol, the product catalog implements it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from yardman.policy import QuantityPolicy


@dataclass(frozen=True)
class VariantInfo:
    """What Yardman needs to know about a variant."""

    id: str
    manage_inventory: bool = True
    inventory_item_id: str | None = None
    product_id: str | None = None
    sku: str | None = None
    title: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class Catalog(Protocol):
    """
    Protocol for catalog lookups.

    Implementations may raise on transport errors. Yardman treats any
    exception from resolve_variant() during checkout as fatal for the
    whole reservation batch.
    """

    def resolve_variant(self, variant_id: str) -> VariantInfo | None:
        """
        Get variant information.

        Args:
            variant_id: Variant identifier

        Returns:
            VariantInfo or None if not found
        """
        ...

    def resolve_quantity_policy(self, variant_id: str) -> QuantityPolicy | None:
        """
        Get the variant's quantity policy.

        Variant metadata wins; otherwise the parent product's policy
        applies. See yardman.policy.resolve_policy().

        Args:
            variant_id: Variant identifier

        Returns:
            QuantityPolicy or None if neither defines one
        """
        ...
