"""Storefront configuration.

Values come from ``STOREFRONT_*`` environment variables via
``StorefrontConfig.from_env()``, or are passed explicitly in tests.

Example:
    >>> config = StorefrontConfig(pipeline_url="https://db.example.io/v2/pipeline")
    >>> config.free_shipping_threshold
    Decimal('75.00')
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator

ENV_PREFIX = "STOREFRONT_"


class ConfigurationError(Exception):
    """A setting required by the requested operation is missing."""


class StorefrontConfig(BaseModel):
    """Runtime settings for the storefront client.

    Attributes:
        pipeline_url: Full URL of the remote SQL pipeline endpoint.
        auth_token: Bearer token for the endpoint.
        timeout: HTTP timeout in seconds (None disables it).
        currency: Currency code for all prices.
        free_shipping_threshold: Subtotal at or above which shipping is free.
        shipping_fee: Flat shipping fee below the threshold.
        tax_rate: Fraction of the subtotal charged as tax (0 = none).
        strict_customer_validation: Require phone, address and GSTIN at checkout.
        atomic_order_writes: Write each order as one transactional batch.
        verify_orders: Re-read each order after writing it.
        distinguish_variants: Give each option combination its own cart line.
        catalog_cache_ttl: Seconds a fetched catalog list stays fresh.
        favorites_path: JSON file holding the favorites list.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    pipeline_url: str | None = Field(
        default=None,
        description="Remote SQL pipeline endpoint (http or https)",
    )
    auth_token: SecretStr | None = Field(default=None, description="Bearer token")
    timeout: float | None = Field(default=30.0, gt=0, le=600)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    free_shipping_threshold: Decimal = Field(default=Decimal("75.00"), ge=0)
    shipping_fee: Decimal = Field(default=Decimal("9.99"), ge=0)
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=1)
    strict_customer_validation: bool = False
    atomic_order_writes: bool = False
    verify_orders: bool = True
    distinguish_variants: bool = False
    catalog_cache_ttl: float = Field(default=300.0, ge=0)
    favorites_path: Path = Field(
        default_factory=lambda: Path.home() / ".storefront" / "favorites.json"
    )
    log_level: str = Field(default="INFO")
    log_json: bool = False

    @field_validator("pipeline_url")
    @classmethod
    def _http_url(cls, value: str | None) -> str | None:
        if value is not None and not value.startswith(("http://", "https://")):
            raise ValueError("pipeline_url must start with http:// or https://")
        return value

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, value: str) -> str:
        return value.upper()

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level {value!r}")
        return level

    def require_pipeline_url(self) -> str:
        if not self.pipeline_url:
            raise ConfigurationError(f"{ENV_PREFIX}PIPELINE_URL is not set")
        return self.pipeline_url

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> StorefrontConfig:
        """Build a config from ``STOREFRONT_*`` variables; unset ones keep defaults."""
        env = os.environ if environ is None else environ
        values: dict[str, str] = {}
        for name, var in _ENV_FIELDS.items():
            raw = env.get(ENV_PREFIX + var)
            if raw is not None and raw != "":
                values[name] = raw
        return cls(**values)


_ENV_FIELDS = {
    "pipeline_url": "PIPELINE_URL",
    "auth_token": "AUTH_TOKEN",
    "timeout": "TIMEOUT",
    "currency": "CURRENCY",
    "free_shipping_threshold": "FREE_SHIPPING_THRESHOLD",
    "shipping_fee": "SHIPPING_FEE",
    "tax_rate": "TAX_RATE",
    "strict_customer_validation": "STRICT_VALIDATION",
    "atomic_order_writes": "ATOMIC_ORDERS",
    "verify_orders": "VERIFY_ORDERS",
    "distinguish_variants": "DISTINGUISH_VARIANTS",
    "catalog_cache_ttl": "CATALOG_CACHE_TTL",
    "favorites_path": "FAVORITES_PATH",
    "log_level": "LOG_LEVEL",
    "log_json": "LOG_JSON",
}
