"""Tests for StorefrontConfig."""

from decimal import Decimal
from pathlib import Path

import pydantic
import pytest

from storefront.infrastructure.config import ConfigurationError, StorefrontConfig


class TestDefaults:

    def test_defaults(self):
        config = StorefrontConfig()
        assert config.pipeline_url is None
        assert config.currency == "USD"
        assert config.free_shipping_threshold == Decimal("75.00")
        assert config.shipping_fee == Decimal("9.99")
        assert config.tax_rate == Decimal("0")
        assert config.strict_customer_validation is False
        assert config.atomic_order_writes is False
        assert config.verify_orders is True
        assert config.catalog_cache_ttl == 300.0
        assert config.favorites_path.name == "favorites.json"

    def test_frozen(self):
        config = StorefrontConfig()
        with pytest.raises(pydantic.ValidationError):
            config.currency = "EUR"

    def test_unknown_field_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            StorefrontConfig(colour="blue")


class TestValidation:

    def test_url_scheme(self):
        with pytest.raises(pydantic.ValidationError, match="http:// or https://"):
            StorefrontConfig(pipeline_url="libsql://db.example.io")

    def test_currency_uppercased(self):
        assert StorefrontConfig(currency="inr").currency == "INR"

    def test_tax_rate_range(self):
        with pytest.raises(pydantic.ValidationError):
            StorefrontConfig(tax_rate=Decimal("1.5"))

    def test_log_level(self):
        assert StorefrontConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(pydantic.ValidationError, match="unknown log level"):
            StorefrontConfig(log_level="chatty")

    def test_require_pipeline_url(self):
        with pytest.raises(ConfigurationError, match="STOREFRONT_PIPELINE_URL"):
            StorefrontConfig().require_pipeline_url()
        url = "https://db.example.io/v2/pipeline"
        assert StorefrontConfig(pipeline_url=url).require_pipeline_url() == url

    def test_auth_token_hidden_in_repr(self):
        config = StorefrontConfig(auth_token="s3cret")
        assert "s3cret" not in repr(config)
        assert config.auth_token.get_secret_value() == "s3cret"


class TestFromEnv:

    def test_reads_prefixed_variables(self):
        config = StorefrontConfig.from_env({
            "STOREFRONT_PIPELINE_URL": "https://db.example.io/v2/pipeline",
            "STOREFRONT_AUTH_TOKEN": "tok",
            "STOREFRONT_FREE_SHIPPING_THRESHOLD": "50",
            "STOREFRONT_TAX_RATE": "0.18",
            "STOREFRONT_STRICT_VALIDATION": "true",
            "STOREFRONT_ATOMIC_ORDERS": "1",
            "STOREFRONT_VERIFY_ORDERS": "false",
            "STOREFRONT_FAVORITES_PATH": "/tmp/favs.json",
        })
        assert config.pipeline_url == "https://db.example.io/v2/pipeline"
        assert config.auth_token.get_secret_value() == "tok"
        assert config.free_shipping_threshold == Decimal("50")
        assert config.tax_rate == Decimal("0.18")
        assert config.strict_customer_validation is True
        assert config.atomic_order_writes is True
        assert config.verify_orders is False
        assert config.favorites_path == Path("/tmp/favs.json")

    def test_empty_variables_keep_defaults(self):
        config = StorefrontConfig.from_env({"STOREFRONT_CURRENCY": "", "OTHER": "x"})
        assert config.currency == "USD"

    def test_invalid_value(self):
        with pytest.raises(pydantic.ValidationError):
            StorefrontConfig.from_env({"STOREFRONT_TIMEOUT": "soon"})

    def test_reads_process_environment(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_CURRENCY", "eur")
        assert StorefrontConfig.from_env().currency == "EUR"
