"""Pipeline-backed implementation of OrderRepository.

Table layout (remote, pre-existing):

    orders      (id, referid, customerid, name, email, phone, status, fulfill,
                 currency, subtotal, total, tax, taxid, discount, shipping,
                 shipaddrs, billaddrs)
    orderitems  (id, orderid, title, varianttitle, sku, qty, price, total,
                 taxrate, taxamt)
"""

from __future__ import annotations

from typing import Any

import structlog

from storefront.domain.exceptions import DuplicateOrderError
from storefront.domain.model.order import OrderDraft, OrderLine
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.remote.errors import GatewayError, ProtocolError
from storefront.infrastructure.remote.pipeline_client import (
    BatchStep,
    PipelineClient,
    Statement,
    step_not,
    step_ok,
)

logger = structlog.get_logger(__name__)

_HEADER_COLUMNS = (
    "referid, customerid, name, email, phone, status, fulfill, currency, "
    "subtotal, total, tax, taxid, discount, shipping, shipaddrs, billaddrs"
)
_HEADER_PLACEHOLDERS = ", ".join("?" * 16)

# Inserts nothing when the reference is already taken, so a retried
# submission of the same draft cannot create a second header.
INSERT_HEADER_SQL = (
    f"INSERT INTO orders ({_HEADER_COLUMNS}) "
    f"SELECT {_HEADER_PLACEHOLDERS} "
    "WHERE NOT EXISTS (SELECT 1 FROM orders WHERE referid = ?)"
)

_ITEM_COLUMNS = "orderid, title, varianttitle, sku, qty, price, total, taxrate, taxamt"

INSERT_ITEM_SQL = f"INSERT INTO orderitems ({_ITEM_COLUMNS}) VALUES ({', '.join('?' * 9)})"

# Batched variant: the item finds its header by reference, since the
# header's row id is not known until the batch has run.
INSERT_ITEM_BY_REFERENCE_SQL = (
    f"INSERT INTO orderitems ({_ITEM_COLUMNS}) "
    f"VALUES ((SELECT id FROM orders WHERE referid = ?), {', '.join('?' * 8)})"
)


def _header_args(draft: OrderDraft) -> list[Any]:
    customer = draft.customer
    totals = draft.totals
    return [
        draft.reference,
        customer.customer_id,
        customer.name.strip(),
        customer.email.strip(),
        customer.phone.strip(),
        draft.status,
        draft.fulfillment_status,
        draft.currency,
        totals.subtotal.amount,
        totals.total.amount,
        totals.tax_amount.amount,
        customer.tax_identifier.strip().upper(),
        draft.discount.amount,
        totals.shipping.amount,
        customer.shipping_text,
        customer.billing_text,
        draft.reference,
    ]


def _line_args(line: OrderLine) -> list[Any]:
    return [
        line.title,
        line.variant_title,
        line.sku,
        line.quantity,
        line.unit_price.amount,
        line.line_total.amount,
        line.tax_rate,
        line.tax_amount.amount,
    ]


class RemoteOrderRepository(OrderRepository):

    def __init__(self, client: PipelineClient) -> None:
        self._client = client

    # --- Writes ---------------------------------------------------------------

    async def insert_header(self, draft: OrderDraft) -> int:
        result = await self._client.query(INSERT_HEADER_SQL, _header_args(draft))
        if result.affected_row_count == 0:
            raise DuplicateOrderError(
                f"Order {draft.reference} has already been placed",
                draft.reference,
            )
        if result.last_insert_rowid is None:
            raise ProtocolError("Order insert returned no row id")
        return result.last_insert_rowid

    async def insert_item(self, order_id: int, line: OrderLine) -> None:
        await self._client.query(INSERT_ITEM_SQL, [order_id, *_line_args(line)])

    async def delete_order(self, order_id: int) -> None:
        await self._client.query("DELETE FROM orderitems WHERE orderid = ?", [order_id])
        await self._client.query("DELETE FROM orders WHERE id = ?", [order_id])

    async def insert_atomically(self, draft: OrderDraft) -> int:
        """Write the whole order in one transactional batch.

        Steps: BEGIN, header, each item, COMMIT, then ROLLBACK if COMMIT
        did not run.  Every step after BEGIN requires the one before it.
        """
        if await self.find_header(draft.reference) is not None:
            raise DuplicateOrderError(
                f"Order {draft.reference} has already been placed",
                draft.reference,
            )

        steps = [
            BatchStep(Statement("BEGIN")),
            BatchStep(Statement(INSERT_HEADER_SQL, tuple(_header_args(draft))), step_ok(0)),
        ]
        for line in draft.lines:
            steps.append(
                BatchStep(
                    Statement(
                        INSERT_ITEM_BY_REFERENCE_SQL,
                        (draft.reference, *_line_args(line)),
                    ),
                    step_ok(len(steps) - 1),
                )
            )
        commit_step = len(steps)
        steps.append(BatchStep(Statement("COMMIT"), step_ok(commit_step - 1)))
        steps.append(BatchStep(Statement("ROLLBACK"), step_not(step_ok(commit_step))))

        outcome = await self._client.batch(steps)
        if not outcome.succeeded(commit_step):
            failure = outcome.first_error()
            detail = f"step {failure[0]}: {failure[1]}" if failure else "not committed"
            raise ProtocolError(f"Order batch rolled back ({detail})")

        header = outcome.step_results[1]
        if header is None or header.last_insert_rowid is None:
            raise ProtocolError("Order batch returned no row id")
        return header.last_insert_rowid

    # --- Reads ----------------------------------------------------------------

    async def find_header(self, reference: str) -> dict[str, Any] | None:
        result = await self._client.query(
            "SELECT * FROM orders WHERE referid = ? LIMIT 1", [reference]
        )
        return result.first()

    async def count_items(self, reference: str) -> int:
        result = await self._client.query(
            "SELECT COUNT(*) AS item_count FROM orderitems "
            "WHERE orderid = (SELECT id FROM orders WHERE referid = ?)",
            [reference],
        )
        record = result.first()
        return int(record["item_count"]) if record else 0

    async def recent_orders(self, limit: int = 10) -> list[dict[str, Any]]:
        result = await self._client.query(
            "SELECT * FROM orders ORDER BY id DESC LIMIT ?", [limit]
        )
        return result.records()

    # --- Diagnostics ----------------------------------------------------------

    async def ping(self) -> bool:
        try:
            await self._client.query("SELECT 1 AS ok")
        except GatewayError as exc:
            logger.warning("database_ping_failed", error=str(exc))
            return False
        return True

    async def order_tables_exist(self) -> bool:
        try:
            result = await self._client.query(
                "SELECT name FROM sqlite_master "
                "WHERE type = 'table' AND name IN ('orders', 'orderitems')"
            )
        except GatewayError as exc:
            logger.warning("order_table_check_failed", error=str(exc))
            return False
        names = {r["name"] for r in result.records()}
        logger.debug("order_tables_found", tables=sorted(names))
        return {"orders", "orderitems"} <= names
