"""Pipeline-backed implementation of CatalogRepository."""

from __future__ import annotations

from typing import Any

from storefront.domain.model.catalog import Category, Collection
from storefront.domain.model.product import Product
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.infrastructure.remote.mappers import (
    map_category,
    map_collection,
    map_product,
)
from storefront.infrastructure.remote.pipeline_client import PipelineClient

_VISIBLE = "publish IN ('published', 'draft')"


def _id_arg(entity_id: str) -> int | str:
    """Numeric ids are bound as integers so they match INTEGER keys exactly."""
    return int(entity_id) if entity_id.isdigit() else entity_id


class RemoteCatalogRepository(CatalogRepository):

    def __init__(self, client: PipelineClient, currency: str = "USD") -> None:
        self._client = client
        self._currency = currency

    # --- CatalogRepository interface ------------------------------------------

    async def list_products(self) -> list[Product]:
        return await self._products(f"SELECT * FROM products WHERE {_VISIBLE}")

    async def list_featured_products(self, limit: int = 10) -> list[Product]:
        return await self._products(
            f"SELECT * FROM products WHERE featured = 1 AND {_VISIBLE} LIMIT ?",
            [limit],
        )

    async def get_product(self, product_id: str) -> Product | None:
        products = await self._products(
            "SELECT * FROM products WHERE id = ? LIMIT 1",
            [_id_arg(product_id)],
        )
        return products[0] if products else None

    async def list_collections(self) -> list[Collection]:
        result = await self._client.query("SELECT * FROM collections ORDER BY name ASC")
        return [map_collection(r) for r in result.records()]

    async def get_collection(self, collection_id: str) -> Collection | None:
        result = await self._client.query(
            "SELECT * FROM collections WHERE id = ? LIMIT 1",
            [_id_arg(collection_id)],
        )
        record = result.first()
        return map_collection(record) if record is not None else None

    async def list_products_in_collection(self, collection_name: str) -> list[Product]:
        return await self._products(
            f"SELECT * FROM products WHERE collection = ? AND {_VISIBLE} ORDER BY title ASC",
            [collection_name],
        )

    async def list_categories(self) -> list[Category]:
        result = await self._client.query("SELECT * FROM categories ORDER BY name ASC")
        return [map_category(r) for r in result.records()]

    # --- Internal helpers -----------------------------------------------------

    async def _products(self, sql: str, args: list[Any] | None = None) -> list[Product]:
        result = await self._client.query(sql, args)
        return [map_product(r, self._currency) for r in result.records()]
