"""Abstract repository for the customer's favorite products."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.product import Product


class FavoritesRepository(ABC):

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every favorite, in the order they were added."""

    @abstractmethod
    def save_all(self, products: list[Product]) -> None:
        """Replace the stored favorites with *products*."""
