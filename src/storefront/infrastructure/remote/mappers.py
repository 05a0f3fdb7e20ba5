"""Decoded catalog rows to domain entities.

Product rows carry three JSON-encoded text columns (``medias``,
``options``, ``metafields``).  Each is parsed on its own; a malformed
value yields that field's empty default instead of failing the row.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal, InvalidOperation
from typing import Any

from storefront.domain.model.catalog import Category, Collection
from storefront.domain.model.product import Product, ProductOption
from storefront.domain.model.value_objects import Money

PLACEHOLDER_IMAGE = "https://via.placeholder.com/400x400?text=No+Image"
DEFAULT_BRAND = "Unknown"

_WHITESPACE = re.compile(r"\s+")


# --- Coercion helpers ---------------------------------------------------------


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _optional_text(value: Any) -> str | None:
    text = _text(value).strip()
    return text or None


def _as_int(value: Any) -> int:
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _money(value: Any, currency: str) -> Money:
    """Parse a price; anything non-finite or negative becomes zero."""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return Money.zero(currency)
    if not amount.is_finite() or amount < 0:
        return Money.zero(currency)
    return Money(amount, currency)


def _parse_json(raw: Any, expected: type, fallback: Any) -> Any:
    if not raw or not isinstance(raw, str):
        return fallback
    try:
        value = json.loads(raw)
    except ValueError:
        return fallback
    return value if isinstance(value, expected) else fallback


def slugify(name: str) -> str:
    """``"Silver Rings"`` -> ``"silver-rings"``."""
    return _WHITESPACE.sub("-", name.strip().lower())


# --- Product ------------------------------------------------------------------


def _images(record: dict[str, Any]) -> list[str]:
    medias = _parse_json(record.get("medias"), list, [])
    candidates = [record.get("image"), *medias]
    images = [c.strip() for c in candidates if isinstance(c, str) and c.strip()]
    return images or [PLACEHOLDER_IMAGE]


def _options(record: dict[str, Any], product_id: str) -> list[ProductOption]:
    options: list[ProductOption] = []
    for index, raw in enumerate(_parse_json(record.get("options"), list, [])):
        if not isinstance(raw, dict):
            continue
        value = _text(raw.get("value"))
        option_id = _text(raw.get("id")) or f"{product_id}-opt-{index}"
        options.append(
            ProductOption(
                id=option_id,
                title=_text(raw.get("title")),
                value=value,
                identifier_value=_text(raw.get("identifierValue")) or value,
                identifier_type=_text(raw.get("identifierType")) or "text",
                group=_text(raw.get("group")) or "default",
            )
        )
    return options


def _specifications(record: dict[str, Any]) -> dict[str, str]:
    metafields = _parse_json(record.get("metafields"), dict, {})
    return {str(key): _text(value) for key, value in metafields.items()}


def _tags(record: dict[str, Any]) -> list[str]:
    raw = _text(record.get("tags"))
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _pricing(record: dict[str, Any], currency: str) -> tuple[Money, Money | None]:
    """Sale price wins only when it is a real discount off the list price."""
    list_price = _money(record.get("price"), currency)
    sale_price = _money(record.get("saleprice"), currency)
    if not sale_price.is_zero and sale_price < list_price:
        return sale_price, list_price
    return list_price, None


def map_product(record: dict[str, Any], currency: str = "USD") -> Product:
    product_id = _text(record.get("id"))
    category = _text(record.get("category")).strip()
    price, original_price = _pricing(record, currency)

    return Product(
        id=product_id,
        name=_text(record.get("title")),
        description=_text(record.get("excerpt")) or _text(record.get("notes")),
        price=price,
        original_price=original_price,
        images=_images(record),
        category=category,
        category_id=slugify(category),
        collection=_optional_text(record.get("collection")),
        brand=_optional_text(record.get("brand")) or DEFAULT_BRAND,
        vendor=_optional_text(record.get("vendor")),
        rating=None,
        review_count=0,
        stock_quantity=_as_int(record.get("stock")),
        tags=_tags(record),
        options=_options(record, product_id),
        specifications=_specifications(record),
        created_at=_text(record.get("createdat")),
        updated_at=_text(record.get("updatedat")),
    )


# --- Collection / Category ----------------------------------------------------


def map_collection(record: dict[str, Any]) -> Collection:
    return Collection(
        id=_text(record.get("id")),
        name=_text(record.get("name")),
        image=_optional_text(record.get("image")),
        notes=_optional_text(record.get("notes")) or _optional_text(record.get("description")),
    )


def map_category(record: dict[str, Any]) -> Category:
    parent = record.get("parent_id")
    return Category(
        id=_text(record.get("id")),
        name=_text(record.get("name")),
        description=_optional_text(record.get("description")) or _optional_text(record.get("notes")),
        image=_optional_text(record.get("image")),
        parent_id=_text(parent) if parent not in (None, "", 0, "0") else None,
        created_at=_text(record.get("created_at")),
    )
