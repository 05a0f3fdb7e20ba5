"""Application service: the customer's favorites list."""

from __future__ import annotations

from storefront.domain.model.product import Product
from storefront.domain.repository.favorites_repository import FavoritesRepository


class FavoritesService:

    def __init__(self, favorites_repo: FavoritesRepository) -> None:
        self._favorites_repo = favorites_repo

    def list_all(self) -> list[Product]:
        return self._favorites_repo.list_all()

    def is_favorite(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self._favorites_repo.list_all())

    def add(self, product: Product) -> None:
        """Add *product*; adding one that is already a favorite does nothing."""
        favorites = self._favorites_repo.list_all()
        if any(p.id == product.id for p in favorites):
            return
        favorites.append(product)
        self._favorites_repo.save_all(favorites)

    def remove(self, product_id: str) -> None:
        favorites = self._favorites_repo.list_all()
        remaining = [p for p in favorites if p.id != product_id]
        if len(remaining) != len(favorites):
            self._favorites_repo.save_all(remaining)

    def toggle(self, product: Product) -> bool:
        """Flip the favorite state; returns True if it is now a favorite."""
        if self.is_favorite(product.id):
            self.remove(product.id)
            return False
        self.add(product)
        return True

    def clear(self) -> None:
        self._favorites_repo.save_all([])
