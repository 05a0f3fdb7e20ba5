"""Tests for the FavoritesService."""

from storefront.application.favorites import FavoritesService
from tests.fakes import FakeFavoritesRepository, make_product


def _setup(*product_ids: str):
    repo = FakeFavoritesRepository([make_product(pid) for pid in product_ids])
    return FavoritesService(repo), repo


class TestFavorites:

    def test_add(self):
        service, _ = _setup()
        service.add(make_product("1"))
        assert service.is_favorite("1")
        assert [p.id for p in service.list_all()] == ["1"]

    def test_add_twice_is_idempotent(self):
        service, repo = _setup()
        service.add(make_product("1"))
        service.add(make_product("1"))
        assert len(service.list_all()) == 1
        assert repo.saves == 1

    def test_remove(self):
        service, _ = _setup("1", "2")
        service.remove("1")
        assert [p.id for p in service.list_all()] == ["2"]

    def test_remove_missing_does_not_save(self):
        service, repo = _setup("1")
        service.remove("9")
        assert repo.saves == 0

    def test_toggle(self):
        service, _ = _setup()
        product = make_product("5")
        assert service.toggle(product) is True
        assert service.is_favorite("5")
        assert service.toggle(product) is False
        assert not service.is_favorite("5")

    def test_clear(self):
        service, _ = _setup("1", "2")
        service.clear()
        assert service.list_all() == []
