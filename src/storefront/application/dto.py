"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class CartLineSpec:
    """Input: what the customer asked for (product id, quantity, option choices)."""

    product_id: str
    quantity: int
    options: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OrderReceipt:
    """Output: a successfully placed order as displayed to the user.

    ``verified`` is None when verification was skipped or could not run.
    """

    reference: str
    order_id: int
    item_count: int
    subtotal: str  # formatted, e.g. "$15.00"
    shipping: str
    tax: str
    total: str
    verified: bool | None = None
