"""Abstract repository for submitted orders.

Writes are split into header and item operations so the application
layer controls sequencing, compensation and verification.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from storefront.domain.model.order import OrderDraft, OrderLine


class OrderRepository(ABC):

    @abstractmethod
    async def insert_header(self, draft: OrderDraft) -> int:
        """Write the order header and return its generated row id.

        Raises ``DuplicateOrderError`` if the reference already exists.
        """

    @abstractmethod
    async def insert_item(self, order_id: int, line: OrderLine) -> None:
        """Write one order item row referencing *order_id*."""

    @abstractmethod
    async def delete_order(self, order_id: int) -> None:
        """Remove a header and any item rows already written for it."""

    @abstractmethod
    async def insert_atomically(self, draft: OrderDraft) -> int:
        """Write header and all items as one all-or-nothing unit."""

    @abstractmethod
    async def find_header(self, reference: str) -> dict[str, Any] | None:
        """Return the decoded header row for *reference*, or None."""

    @abstractmethod
    async def count_items(self, reference: str) -> int:
        """Return how many item rows exist for the order *reference*."""

    @abstractmethod
    async def recent_orders(self, limit: int = 10) -> list[dict[str, Any]]:
        """Return the newest header rows, newest first."""

    @abstractmethod
    async def ping(self) -> bool:
        """Return True if the store answers a trivial query."""

    @abstractmethod
    async def order_tables_exist(self) -> bool:
        """Return True if both the orders and order items tables exist."""
