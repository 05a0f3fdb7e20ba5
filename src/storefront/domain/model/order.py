"""Order draft — the write-once record assembled from a cart at checkout.

The client never mutates an order after submitting it.  An ``OrderDraft``
captures everything that will be written (reference code, customer,
totals, per-line snapshots) so a retried submission writes exactly the
same data under the same reference code.
"""

from __future__ import annotations

import secrets
import string
import time
from dataclasses import dataclass, field
from decimal import Decimal

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import Money

ADDRESS_NOT_PROVIDED = "Address not provided"

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits


def generate_reference(now_ms: int | None = None) -> str:
    """Return a practically-unique order reference, e.g. ``ORD-1718000000000-k3j9x0a2b``.

    Millisecond timestamp plus a 9-character random suffix.  There is
    no collision detection; the idempotent header insert rejects reuse.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(_SUFFIX_ALPHABET) for _ in range(9))
    return f"ORD-{now_ms}-{suffix}"


@dataclass(frozen=True)
class Address:
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    def format(self) -> str:
        parts = [
            p.strip()
            for p in (self.street, self.city, self.state, self.zip_code, self.country)
            if p and p.strip()
        ]
        return ", ".join(parts) or ADDRESS_NOT_PROVIDED


@dataclass(frozen=True)
class CustomerInfo:
    """What the customer typed into the checkout form.

    ``tax_identifier`` is a government tax registration number (e.g. an
    Indian GSTIN).  It is stored as-is and never used as an amount.
    """

    name: str
    email: str
    phone: str = ""
    tax_identifier: str = ""
    shipping_address: Address | None = None
    billing_address: Address | None = None
    customer_id: str | None = None

    @property
    def shipping_text(self) -> str:
        return (self.shipping_address or Address()).format()

    @property
    def billing_text(self) -> str:
        return (self.billing_address or self.shipping_address or Address()).format()


@dataclass(frozen=True)
class OrderTotals:
    subtotal: Money
    shipping: Money
    tax_amount: Money
    tax_rate: Decimal

    @property
    def total(self) -> Money:
        return self.subtotal + self.shipping + self.tax_amount

    @property
    def free_shipping(self) -> bool:
        return self.shipping.is_zero


@dataclass(frozen=True)
class PricingPolicy:
    """Shipping and tax rules applied at checkout.

    Shipping is free when the subtotal reaches the threshold (inclusive).
    """

    free_shipping_threshold: Money = field(default_factory=lambda: Money.of("75.00"))
    shipping_fee: Money = field(default_factory=lambda: Money.of("9.99"))
    tax_rate: Decimal = Decimal("0")

    def __post_init__(self) -> None:
        if not Decimal("0") <= self.tax_rate <= Decimal("1"):
            raise ValidationError(f"Tax rate must be between 0 and 1, got {self.tax_rate}")

    def shipping_for(self, subtotal: Money) -> Money:
        if subtotal >= self.free_shipping_threshold:
            return Money.zero(subtotal.currency)
        return self.shipping_fee

    def totals_for(self, subtotal: Money) -> OrderTotals:
        return OrderTotals(
            subtotal=subtotal,
            shipping=self.shipping_for(subtotal),
            tax_amount=subtotal.scaled(self.tax_rate),
            tax_rate=self.tax_rate,
        )


@dataclass(frozen=True)
class OrderLine:
    """Denormalized snapshot of one cart line, as written to the order items table."""

    title: str
    variant_title: str
    sku: str
    quantity: int
    unit_price: Money
    line_total: Money
    tax_rate: Decimal
    tax_amount: Money


@dataclass(frozen=True)
class OrderDraft:
    reference: str
    customer: CustomerInfo
    lines: tuple[OrderLine, ...]
    totals: OrderTotals
    currency: str = "USD"
    status: str = "pending"
    fulfillment_status: str = "pending"
    discount: Money = field(default_factory=Money.zero)

    @staticmethod
    def from_cart(
        cart: Cart,
        customer: CustomerInfo,
        policy: PricingPolicy,
        reference: str | None = None,
    ) -> OrderDraft:
        """Snapshot the cart into a draft.  The cart itself is not modified."""
        if cart.is_empty:
            raise ValidationError("Cart is empty")

        lines = tuple(
            OrderLine(
                title=item.product.name,
                variant_title=item.variant_title,
                sku=item.product.id,
                quantity=item.quantity.value,
                unit_price=item.unit_price,
                line_total=item.line_total,
                tax_rate=policy.tax_rate,
                tax_amount=item.line_total.scaled(policy.tax_rate),
            )
            for item in cart.items
        )
        return OrderDraft(
            reference=reference or generate_reference(),
            customer=customer,
            lines=lines,
            totals=policy.totals_for(cart.subtotal),
            currency=cart.currency,
            discount=Money.zero(cart.currency),
        )

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)
