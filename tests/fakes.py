"""Fakes for testing.

In-memory repositories implement the same abstract interfaces as the
remote ones but keep everything in dicts.  ``PipelineStub`` stands in
for the remote SQL endpoint behind ``httpx.MockTransport``: it answers
with scripted envelopes and records every request body.
"""

from __future__ import annotations

import asyncio
import json
from decimal import Decimal
from typing import Any

import httpx

from storefront.domain.exceptions import DuplicateOrderError
from storefront.domain.model.catalog import Category, Collection
from storefront.domain.model.order import OrderDraft, OrderLine
from storefront.domain.model.product import Product, ProductOption
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.catalog_repository import CatalogRepository
from storefront.domain.repository.favorites_repository import FavoritesRepository
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.remote.errors import ProtocolError, TransportError
from storefront.infrastructure.remote.pipeline_client import PipelineClient

PIPELINE_URL = "https://db.test/v2/pipeline"


# --- Builders -----------------------------------------------------------------


def make_product(
    product_id: str = "1",
    name: str = "Silver Ring",
    price: str = "10.00",
    options: list[ProductOption] | None = None,
    **kwargs: Any,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        price=Money.of(price),
        images=["https://img.test/ring.jpg"],
        options=options or [],
        **kwargs,
    )


def make_option(option_id: str, title: str, value: str, identifier: str = "") -> ProductOption:
    return ProductOption(
        id=option_id,
        title=title,
        value=value,
        identifier_value=identifier or value,
    )


# --- Pipeline envelopes -------------------------------------------------------


def cell(value: Any) -> dict[str, Any]:
    if value is None:
        return {"type": "null"}
    if isinstance(value, bool):
        return {"type": "integer", "value": "1" if value else "0"}
    if isinstance(value, int):
        return {"type": "integer", "value": str(value)}
    if isinstance(value, (float, Decimal)):
        return {"type": "float", "value": float(value)}
    return {"type": "text", "value": str(value)}


def result_body(
    columns: list[str] | None = None,
    rows: list[list[Any]] | None = None,
    *,
    last_insert_rowid: int | None = None,
    affected_row_count: int = 0,
) -> dict[str, Any]:
    return {
        "cols": [{"name": c, "decltype": None} for c in columns or []],
        "rows": [[cell(v) for v in row] for row in rows or []],
        "affected_row_count": affected_row_count,
        "last_insert_rowid": str(last_insert_rowid) if last_insert_rowid is not None else None,
        "replication_index": None,
    }


def ok_envelope(
    columns: list[str] | None = None,
    rows: list[list[Any]] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    return {
        "baton": None,
        "base_url": None,
        "results": [
            {
                "type": "ok",
                "response": {"type": "execute", "result": result_body(columns, rows, **kwargs)},
            }
        ],
    }


def error_envelope(message: str = "no such table: orders") -> dict[str, Any]:
    return {
        "baton": None,
        "base_url": None,
        "results": [{"type": "error", "error": {"message": message, "code": "SQLITE_ERROR"}}],
    }


def batch_envelope(
    step_results: list[dict[str, Any] | None],
    step_errors: list[dict[str, Any] | None] | None = None,
) -> dict[str, Any]:
    return {
        "baton": None,
        "base_url": None,
        "results": [
            {
                "type": "ok",
                "response": {
                    "type": "batch",
                    "result": {
                        "step_results": step_results,
                        "step_errors": step_errors or [None] * len(step_results),
                    },
                },
            }
        ],
    }


class PipelineStub:
    """Scripted pipeline endpoint.

    Replies are consumed in order; each is an envelope dict (sent with
    status 200) or a ready-made ``httpx.Response``.  Once the script
    runs out, every request gets an empty ok result.
    """

    def __init__(self, replies: list[dict[str, Any] | httpx.Response] | None = None) -> None:
        self._replies = list(replies or [])
        self.bodies: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(json.loads(request.content))
        self.headers.append(request.headers)
        reply = self._replies.pop(0) if self._replies else ok_envelope()
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)

    def queue(self, *replies: dict[str, Any] | httpx.Response) -> None:
        self._replies.extend(replies)

    def client(self, auth_token: str | None = "secret-token") -> PipelineClient:
        return PipelineClient(PIPELINE_URL, auth_token, transport=httpx.MockTransport(self))

    @property
    def call_count(self) -> int:
        return len(self.bodies)

    @property
    def statements(self) -> list[dict[str, Any]]:
        """The ``stmt`` of every execute request, in order."""
        return [
            req["stmt"]
            for body in self.bodies
            for req in body["requests"]
            if req["type"] == "execute"
        ]

    @property
    def sql(self) -> list[str]:
        return [stmt["sql"] for stmt in self.statements]


# --- Repositories -------------------------------------------------------------


class FakeOrderRepository(OrderRepository):
    """Records every call; can be told to fail at specific steps.

    ``fail_on_item`` is the 1-based index of the item insert that fails.
    ``lose_header_reply`` stores the header and then raises, the way a
    read timeout after the server committed looks to the caller.
    """

    def __init__(
        self,
        *,
        fail_header: bool = False,
        lose_header_reply: bool = False,
        fail_on_item: int | None = None,
        fail_delete: bool = False,
        fail_batch: bool = False,
        fail_reads: bool = False,
        reachable: bool = True,
        tables_exist: bool = True,
    ) -> None:
        self.fail_header = fail_header
        self.lose_header_reply = lose_header_reply
        self.fail_on_item = fail_on_item
        self.fail_delete = fail_delete
        self.fail_batch = fail_batch
        self.fail_reads = fail_reads
        self.reachable = reachable
        self.tables_exist = tables_exist
        self.calls: list[tuple[str, Any]] = []
        self.headers: dict[str, dict[str, Any]] = {}
        self.items: dict[int, list[OrderLine]] = {}
        self._next_id = 1
        self._item_calls = 0

    @property
    def write_calls(self) -> list[tuple[str, Any]]:
        return [c for c in self.calls if c[0] in ("header", "item", "delete", "batch")]

    async def insert_header(self, draft: OrderDraft) -> int:
        self.calls.append(("header", draft.reference))
        # yield so concurrent submissions interleave as they would over HTTP
        await asyncio.sleep(0)
        if self.fail_header:
            raise TransportError(500, "header failed")
        if draft.reference in self.headers:
            raise DuplicateOrderError("duplicate", draft.reference)
        order_id = self._store_header(draft)
        if self.lose_header_reply:
            raise TransportError(None, "read timeout")
        return order_id

    async def insert_item(self, order_id: int, line: OrderLine) -> None:
        self._item_calls += 1
        self.calls.append(("item", line.sku))
        if self._item_calls == self.fail_on_item:
            raise TransportError(500, "item failed")
        self.items[order_id].append(line)

    async def delete_order(self, order_id: int) -> None:
        self.calls.append(("delete", order_id))
        if self.fail_delete:
            raise TransportError(503, "delete failed")
        self.items.pop(order_id, None)
        self.headers = {r: h for r, h in self.headers.items() if h["id"] != order_id}

    async def insert_atomically(self, draft: OrderDraft) -> int:
        self.calls.append(("batch", draft.reference))
        if self.fail_batch:
            raise ProtocolError("Order batch rolled back")
        if draft.reference in self.headers:
            raise DuplicateOrderError("duplicate", draft.reference)
        order_id = self._store_header(draft)
        self.items[order_id].extend(draft.lines)
        return order_id

    async def find_header(self, reference: str) -> dict[str, Any] | None:
        self.calls.append(("find", reference))
        if self.fail_reads:
            raise TransportError(None, "connection reset")
        return self.headers.get(reference)

    async def count_items(self, reference: str) -> int:
        self.calls.append(("count", reference))
        header = self.headers.get(reference)
        return len(self.items[header["id"]]) if header else 0

    async def recent_orders(self, limit: int = 10) -> list[dict[str, Any]]:
        return sorted(self.headers.values(), key=lambda h: h["id"], reverse=True)[:limit]

    async def ping(self) -> bool:
        self.calls.append(("ping", None))
        return self.reachable

    async def order_tables_exist(self) -> bool:
        self.calls.append(("tables", None))
        return self.tables_exist

    def _store_header(self, draft: OrderDraft) -> int:
        order_id = self._next_id
        self._next_id += 1
        self.headers[draft.reference] = {
            "id": order_id,
            "referid": draft.reference,
            "name": draft.customer.name,
            "total": float(draft.totals.total.amount),
        }
        self.items[order_id] = []
        return order_id


class FakeCatalogRepository(CatalogRepository):

    def __init__(
        self,
        products: list[Product] | None = None,
        collections: list[Collection] | None = None,
        categories: list[Category] | None = None,
        featured_ids: set[str] | None = None,
    ) -> None:
        self._products = list(products or [])
        self._collections = list(collections or [])
        self._categories = list(categories or [])
        self._featured_ids = featured_ids or set()
        self.fetches: dict[str, int] = {}

    def _count(self, name: str) -> None:
        self.fetches[name] = self.fetches.get(name, 0) + 1

    async def list_products(self) -> list[Product]:
        self._count("products")
        return list(self._products)

    async def list_featured_products(self, limit: int = 10) -> list[Product]:
        self._count("featured")
        return [p for p in self._products if p.id in self._featured_ids][:limit]

    async def get_product(self, product_id: str) -> Product | None:
        self._count("product")
        return next((p for p in self._products if p.id == product_id), None)

    async def list_collections(self) -> list[Collection]:
        self._count("collections")
        return list(self._collections)

    async def get_collection(self, collection_id: str) -> Collection | None:
        return next((c for c in self._collections if c.id == collection_id), None)

    async def list_products_in_collection(self, collection_name: str) -> list[Product]:
        return [p for p in self._products if p.collection == collection_name]

    async def list_categories(self) -> list[Category]:
        self._count("categories")
        return list(self._categories)


class FakeFavoritesRepository(FavoritesRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        self._store: list[Product] = list(products or [])
        self.saves = 0

    def list_all(self) -> list[Product]:
        return list(self._store)

    def save_all(self, products: list[Product]) -> None:
        self.saves += 1
        self._store = list(products)
