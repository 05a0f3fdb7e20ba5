"""Shared plumbing for CLI commands: config, logging, and the event loop."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click
import pydantic

from storefront.domain.exceptions import DomainException, RemoteStoreError, ValidationError
from storefront.infrastructure import bootstrap
from storefront.infrastructure.config import ConfigurationError, StorefrontConfig
from storefront.infrastructure.logging import configure_logging
from storefront.infrastructure.remote.pipeline_client import PipelineClient

T = TypeVar("T")


def load_config() -> StorefrontConfig:
    try:
        config = bootstrap.load_config()
    except pydantic.ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}")
    configure_logging(log_level=config.log_level, json_format=config.log_json)
    return config


def error_message(exc: Exception) -> str:
    if isinstance(exc, ValidationError) and exc.errors:
        lines = [str(exc)] + [f"  {field}: {msg}" for field, msg in exc.errors.items()]
        return "\n".join(lines)
    return str(exc)


def run_with_client(
    action: Callable[[PipelineClient, StorefrontConfig], Awaitable[T]],
) -> T:
    """Run *action* with a fresh pipeline client, mapping failures to CLI errors."""
    config = load_config()

    async def _main() -> T:
        async with bootstrap.pipeline_client(config) as client:
            return await action(client, config)

    try:
        return asyncio.run(_main())
    except (DomainException, RemoteStoreError, ConfigurationError) as exc:
        raise click.ClickException(error_message(exc))
