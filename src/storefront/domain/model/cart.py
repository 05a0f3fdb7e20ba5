"""Cart aggregate — the line items of the active shopping session.

Totals are always derived from the current lines, never stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.product import Product, ProductOption
from storefront.domain.model.value_objects import Money, Quantity


@dataclass
class CartItem:
    """A product snapshot plus how many of it the customer wants.

    ``id`` is the line identity assigned by the cart: the product id, or
    the product id plus the chosen option ids when the cart distinguishes
    variants.
    """

    id: str
    product: Product
    quantity: Quantity
    selected_options: dict[str, ProductOption] = field(default_factory=dict)
    added_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def unit_price(self) -> Money:
        return self.product.price

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value

    @property
    def variant_title(self) -> str:
        """Human-readable chosen options, e.g. ``"M, Red"``."""
        return ", ".join(opt.display_value for opt in self.selected_options.values())


class Cart:
    """Aggregate root for the shopping cart.

    By default lines are keyed by product id alone, so adding the same
    product with different options merges into one line carrying the
    most recent selection.  ``distinguish_variants=True`` gives each
    option combination its own line instead.
    """

    def __init__(self, currency: str = "USD", distinguish_variants: bool = False) -> None:
        self.currency = currency
        self.distinguish_variants = distinguish_variants
        self._items: dict[str, CartItem] = {}

    # --- Mutations ------------------------------------------------------------

    def add_item(
        self,
        product: Product,
        quantity: int = 1,
        selected_options: dict[str, ProductOption] | None = None,
    ) -> CartItem:
        """Add *quantity* of *product*, merging into an existing line if any."""
        added = Quantity(quantity)
        if product.price.currency != self.currency:
            raise ValidationError(
                f"Cannot add {product.price.currency} product to a {self.currency} cart"
            )
        options = dict(selected_options or {})
        line_id = self.line_id(product.id, options)

        existing = self._items.get(line_id)
        if existing is not None:
            existing.quantity = existing.quantity + added
            if options:
                existing.selected_options = options
            return existing

        item = CartItem(
            id=line_id,
            product=product,
            quantity=added,
            selected_options=options,
        )
        self._items[line_id] = item
        return item

    def set_quantity(self, line_id: str, new_quantity: int) -> None:
        """Set a line's quantity exactly; zero or less removes the line."""
        item = self._get(line_id)
        if new_quantity <= 0:
            del self._items[line_id]
            return
        item.quantity = Quantity(new_quantity)

    def increment(self, line_id: str) -> None:
        item = self._get(line_id)
        self.set_quantity(line_id, item.quantity.value + 1)

    def decrement(self, line_id: str) -> None:
        item = self._get(line_id)
        self.set_quantity(line_id, item.quantity.value - 1)

    def remove_item(self, line_id: str) -> None:
        self._items.pop(line_id, None)

    def clear(self) -> None:
        self._items.clear()

    # --- Queries --------------------------------------------------------------

    @property
    def items(self) -> list[CartItem]:
        return list(self._items.values())

    @property
    def item_count(self) -> int:
        return sum(item.quantity.value for item in self._items.values())

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.currency)
        for item in self._items.values():
            result = result + item.line_total
        return result

    @property
    def is_empty(self) -> bool:
        return not self._items

    def contains(self, product_id: str) -> bool:
        return any(item.product.id == product_id for item in self._items.values())

    def get(self, line_id: str) -> CartItem | None:
        return self._items.get(line_id)

    def __len__(self) -> int:
        return len(self._items)

    # --- Line identity --------------------------------------------------------

    def line_id(self, product_id: str, selected_options: dict[str, ProductOption]) -> str:
        if not self.distinguish_variants or not selected_options:
            return product_id
        parts = sorted(f"{title}={opt.id}" for title, opt in selected_options.items())
        return f"{product_id}|{';'.join(parts)}"

    # --- Internal helpers -----------------------------------------------------

    def _get(self, line_id: str) -> CartItem:
        item = self._items.get(line_id)
        if item is None:
            raise EntityNotFoundError(f"No cart line '{line_id}'")
        return item
