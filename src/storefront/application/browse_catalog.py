"""Application service: catalog browsing with a time-based cache.

Product, featured-product, collection and category lists are kept for
``ttl`` seconds before being fetched again.  Failed fetches are never
cached; the error propagates to the caller.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.catalog import (
    Category,
    CategoryNode,
    Collection,
    build_category_tree,
)
from storefront.domain.model.product import Product
from storefront.domain.repository.catalog_repository import CatalogRepository

logger = structlog.get_logger(__name__)


@dataclass
class _CacheEntry:
    value: Any
    fetched_at: float


class CatalogService:

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        ttl: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._ttl = ttl
        self._clock = clock
        self._cache: dict[str, _CacheEntry] = {}

    # --- Cached lists ---------------------------------------------------------

    async def products(self, refresh: bool = False) -> list[Product]:
        return await self._cached("products", self._catalog_repo.list_products, refresh)

    async def featured_products(self, refresh: bool = False) -> list[Product]:
        return await self._cached(
            "featured", self._catalog_repo.list_featured_products, refresh
        )

    async def collections(self, refresh: bool = False) -> list[Collection]:
        return await self._cached("collections", self._catalog_repo.list_collections, refresh)

    async def categories(self, refresh: bool = False) -> list[Category]:
        return await self._cached("categories", self._catalog_repo.list_categories, refresh)

    async def category_tree(self) -> list[CategoryNode]:
        return build_category_tree(await self.categories())

    async def refresh(self) -> None:
        """Reload products and featured products together.

        Both fetches run to completion; the first failure is then raised.
        """
        results = await asyncio.gather(
            self.products(refresh=True),
            self.featured_products(refresh=True),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

    def get_cached_product(self, product_id: str) -> Product | None:
        """Look a product up in the cached list without a network call."""
        entry = self._cache.get("products")
        if entry is None:
            return None
        return next((p for p in entry.value if p.id == product_id), None)

    # --- Direct lookups -------------------------------------------------------

    async def product(self, product_id: str) -> Product:
        product = await self._catalog_repo.get_product(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")
        return product

    async def collection(self, collection_id: str) -> Collection:
        collection = await self._catalog_repo.get_collection(collection_id)
        if collection is None:
            raise EntityNotFoundError(f"Collection not found: '{collection_id}'")
        return collection

    async def products_in_collection(self, collection_name: str) -> list[Product]:
        return await self._catalog_repo.list_products_in_collection(collection_name)

    # --- Internal helpers -----------------------------------------------------

    async def _cached(
        self,
        key: str,
        fetch: Callable[[], Awaitable[list[Any]]],
        refresh: bool,
    ) -> list[Any]:
        entry = self._cache.get(key)
        now = self._clock()
        if not refresh and entry is not None and now - entry.fetched_at < self._ttl:
            return entry.value

        value = await fetch()
        self._cache[key] = _CacheEntry(value, now)
        logger.debug("catalog_fetched", kind=key, count=len(value))
        return value
