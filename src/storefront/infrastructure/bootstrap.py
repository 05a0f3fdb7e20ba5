"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.  The pipeline client is
created here and passed in explicitly; nothing holds it globally.
"""

from __future__ import annotations

from storefront.application.browse_catalog import CatalogService
from storefront.application.favorites import FavoritesService
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import PricingPolicy
from storefront.domain.model.value_objects import Money
from storefront.infrastructure.config import StorefrontConfig
from storefront.infrastructure.persistence.json_favorites_repository import (
    JsonFavoritesRepository,
)
from storefront.infrastructure.remote.pipeline_client import PipelineClient
from storefront.infrastructure.remote.remote_catalog_repository import (
    RemoteCatalogRepository,
)
from storefront.infrastructure.remote.remote_order_repository import (
    RemoteOrderRepository,
)


def load_config() -> StorefrontConfig:
    return StorefrontConfig.from_env()


def pipeline_client(config: StorefrontConfig) -> PipelineClient:
    token = config.auth_token.get_secret_value() if config.auth_token else None
    return PipelineClient(config.require_pipeline_url(), token, timeout=config.timeout)


def catalog_service(client: PipelineClient, config: StorefrontConfig) -> CatalogService:
    repo = RemoteCatalogRepository(client, currency=config.currency)
    return CatalogService(repo, ttl=config.catalog_cache_ttl)


def order_repository(client: PipelineClient) -> RemoteOrderRepository:
    return RemoteOrderRepository(client)


def pricing_policy(config: StorefrontConfig) -> PricingPolicy:
    return PricingPolicy(
        free_shipping_threshold=Money(config.free_shipping_threshold, config.currency),
        shipping_fee=Money(config.shipping_fee, config.currency),
        tax_rate=config.tax_rate,
    )


def place_order_handler(
    client: PipelineClient,
    config: StorefrontConfig,
    preflight: bool = False,
) -> PlaceOrderHandler:
    return PlaceOrderHandler(
        order_repository(client),
        pricing_policy(config),
        strict_validation=config.strict_customer_validation,
        atomic=config.atomic_order_writes,
        verify=config.verify_orders,
        preflight=preflight,
    )


def new_cart(config: StorefrontConfig) -> Cart:
    return Cart(currency=config.currency, distinguish_variants=config.distinguish_variants)


def favorites_service(config: StorefrontConfig) -> FavoritesService:
    return FavoritesService(JsonFavoritesRepository(config.favorites_path))
