"""JSON-file-backed implementation of FavoritesRepository.

Favorites are stored as full product snapshots so they can be shown
without a network round trip.
"""

from __future__ import annotations

import json
from decimal import Decimal
from pathlib import Path
from typing import Any

from storefront.domain.model.product import Product, ProductOption
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.favorites_repository import FavoritesRepository


class JsonFavoritesRepository(FavoritesRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- FavoritesRepository interface ----------------------------------------

    def list_all(self) -> list[Product]:
        raw = json.loads(self._file_path.read_text(encoding="utf-8"))
        return [self._from_record(item) for item in raw]

    def save_all(self, products: list[Product]) -> None:
        raw = [self._to_record(p) for p in products]
        self._file_path.write_text(
            json.dumps(raw, indent=2) + "\n", encoding="utf-8"
        )

    # --- Serialization helpers ------------------------------------------------

    @staticmethod
    def _to_record(p: Product) -> dict[str, Any]:
        return {
            "id": p.id,
            "name": p.name,
            "description": p.description,
            "price": str(p.price.amount),
            "original_price": str(p.original_price.amount) if p.original_price else None,
            "currency": p.price.currency,
            "images": p.images,
            "category": p.category,
            "category_id": p.category_id,
            "collection": p.collection,
            "brand": p.brand,
            "vendor": p.vendor,
            "stock_quantity": p.stock_quantity,
            "tags": p.tags,
            "options": [
                {
                    "id": o.id,
                    "title": o.title,
                    "value": o.value,
                    "identifier_value": o.identifier_value,
                    "identifier_type": o.identifier_type,
                    "group": o.group,
                }
                for o in p.options
            ],
            "specifications": p.specifications,
            "created_at": p.created_at,
            "updated_at": p.updated_at,
        }

    @staticmethod
    def _from_record(item: dict[str, Any]) -> Product:
        currency = item.get("currency", "USD")
        original = item.get("original_price")
        return Product(
            id=item["id"],
            name=item["name"],
            description=item.get("description", ""),
            price=Money(Decimal(item["price"]), currency),
            original_price=Money(Decimal(original), currency) if original else None,
            images=item["images"],
            category=item.get("category", ""),
            category_id=item.get("category_id", ""),
            collection=item.get("collection"),
            brand=item.get("brand", "Unknown"),
            vendor=item.get("vendor"),
            stock_quantity=item.get("stock_quantity", 0),
            tags=item.get("tags", []),
            options=[ProductOption(**o) for o in item.get("options", [])],
            specifications=item.get("specifications", {}),
            created_at=item.get("created_at", ""),
            updated_at=item.get("updated_at", ""),
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
