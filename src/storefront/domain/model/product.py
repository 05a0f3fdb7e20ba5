"""Product aggregate.

Products are read-only on the client: they are fetched from the remote
catalog, mapped once, and then snapshotted into cart lines by value.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass(frozen=True)
class ProductOption:
    """One selectable variant value, e.g. title="Size", value="M".

    ``identifier_value`` is what gets shown to the customer and written
    to the order item's variant title.
    """

    id: str
    title: str
    value: str
    identifier_value: str
    identifier_type: str = "text"
    group: str = "default"

    @property
    def display_value(self) -> str:
        return self.identifier_value or self.value


@dataclass
class Product:
    """A product in the catalog.

    ``price`` is what the customer pays.  When the product is on sale
    ``original_price`` holds the list price; otherwise it is None.
    ``rating`` is None when the product is unrated.
    """

    id: str
    name: str
    price: Money
    images: list[str]
    description: str = ""
    original_price: Money | None = None
    category: str = ""
    category_id: str = ""
    collection: str | None = None
    brand: str = "Unknown"
    vendor: str | None = None
    rating: float | None = None
    review_count: int = 0
    stock_quantity: int = 0
    tags: list[str] = field(default_factory=list)
    options: list[ProductOption] = field(default_factory=list)
    specifications: dict[str, str] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    @property
    def on_sale(self) -> bool:
        return self.original_price is not None

    @property
    def primary_image(self) -> str:
        return self.images[0]

    def option_groups(self) -> dict[str, list[ProductOption]]:
        """Group options by their title, keeping first-seen order."""
        groups: dict[str, list[ProductOption]] = {}
        for option in self.options:
            groups.setdefault(option.title, []).append(option)
        return groups

    def select_options(self, choices: dict[str, str]) -> dict[str, ProductOption]:
        """Resolve ``{"Size": "M"}`` into one chosen option per group.

        A choice matches an option by its value or its display identifier.
        """
        groups = self.option_groups()
        selected: dict[str, ProductOption] = {}
        for title, wanted in choices.items():
            if title not in groups:
                raise ValidationError(
                    f"Product '{self.name}' has no option group '{title}'"
                )
            match = next(
                (
                    opt
                    for opt in groups[title]
                    if wanted in (opt.value, opt.identifier_value)
                ),
                None,
            )
            if match is None:
                raise ValidationError(
                    f"'{wanted}' is not a valid {title} for '{self.name}'"
                )
            selected[title] = match
        return selected
