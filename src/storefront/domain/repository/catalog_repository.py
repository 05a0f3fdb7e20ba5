"""Abstract repository for the read-only catalog.

Defined in the domain layer so the domain never depends on
infrastructure.  The remote SQL implementation lives in the
infrastructure layer; tests use an in-memory fake.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.catalog import Category, Collection
from storefront.domain.model.product import Product


class CatalogRepository(ABC):

    @abstractmethod
    async def list_products(self) -> list[Product]:
        """Return every published or draft product."""

    @abstractmethod
    async def list_featured_products(self, limit: int = 10) -> list[Product]:
        """Return up to *limit* featured products."""

    @abstractmethod
    async def get_product(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    async def list_collections(self) -> list[Collection]:
        """Return every collection, ordered by name."""

    @abstractmethod
    async def get_collection(self, collection_id: str) -> Collection | None:
        """Return a collection by its ID, or None if not found."""

    @abstractmethod
    async def list_products_in_collection(self, collection_name: str) -> list[Product]:
        """Return products whose collection is *collection_name*, ordered by title."""

    @abstractmethod
    async def list_categories(self) -> list[Category]:
        """Return every category, ordered by name."""
