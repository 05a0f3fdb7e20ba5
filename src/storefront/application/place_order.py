"""Application service: Place Order use case.

Turns the cart plus the customer's checkout details into a persisted
order: an order header row followed by one row per cart line.

Flow:
    validate -> draft -> [preflight] -> write header -> write items
    -> clear cart -> [verify]

Any failure before the cart is cleared leaves the cart untouched and
raises.  Items are written one at a time in cart order.  If an item
write fails, the header and the items already written are deleted, so
a failed submission leaves nothing behind.  ``PartialWriteError`` is
raised only when that cleanup fails too.  With ``atomic=True`` the whole
order goes out as one transactional batch instead.

A draft keeps its reference code across retries.  The header insert
refuses a reference that already exists, so resubmitting the same
draft after an ambiguous failure cannot duplicate the order.  When the
stored order under that reference has fewer item rows than the draft,
the earlier attempt died after its header landed; the leftover is
deleted and the order written afresh.  Only a complete stored order is
rejected with ``DuplicateOrderError``.
"""

from __future__ import annotations

import structlog

from storefront.application.dto import OrderReceipt
from storefront.domain.exceptions import (
    DuplicateOrderError,
    OrderSubmissionError,
    PartialWriteError,
    RemoteStoreError,
)
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import CustomerInfo, OrderDraft, PricingPolicy
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.service.customer_validation import validate_customer

logger = structlog.get_logger(__name__)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        policy: PricingPolicy,
        *,
        strict_validation: bool = False,
        atomic: bool = False,
        verify: bool = True,
        preflight: bool = False,
    ) -> None:
        self._order_repo = order_repo
        self._policy = policy
        self._strict_validation = strict_validation
        self._atomic = atomic
        self._verify = verify
        self._preflight = preflight
        self._in_flight: set[str] = set()

    async def handle(self, cart: Cart, customer: CustomerInfo) -> OrderReceipt:
        """Validate, submit, and on success empty the cart."""
        draft = self.prepare(cart, customer)
        return await self.submit(draft, cart)

    def prepare(
        self,
        cart: Cart,
        customer: CustomerInfo,
        reference: str | None = None,
    ) -> OrderDraft:
        """Validate input and snapshot the cart.  No network calls."""
        validate_customer(customer, strict=self._strict_validation)
        draft = OrderDraft.from_cart(cart, customer, self._policy, reference)
        logger.info(
            "order_prepared",
            reference=draft.reference,
            lines=len(draft.lines),
            total=str(draft.totals.total),
        )
        return draft

    async def submit(self, draft: OrderDraft, cart: Cart | None = None) -> OrderReceipt:
        """Write *draft* and, once every row is stored, clear *cart*."""
        if draft.reference in self._in_flight:
            raise OrderSubmissionError(
                f"Order {draft.reference} is already being submitted",
                draft.reference,
            )

        self._in_flight.add(draft.reference)
        try:
            if self._preflight:
                await self._check_store(draft)
            if self._atomic:
                order_id = await self._write_batch(draft)
            else:
                order_id = await self._write_sequentially(draft)
        finally:
            self._in_flight.discard(draft.reference)

        logger.info("order_completed", reference=draft.reference, order_id=order_id)
        if cart is not None:
            cart.clear()

        verified = await self._verify_written(draft) if self._verify else None
        return self._to_receipt(draft, order_id, verified)

    # --- Write strategies -----------------------------------------------------

    async def _write_sequentially(self, draft: OrderDraft) -> int:
        try:
            try:
                order_id = await self._order_repo.insert_header(draft)
            except DuplicateOrderError:
                order_id = await self._replace_incomplete(draft)
        except RemoteStoreError as exc:
            raise OrderSubmissionError(
                f"Failed to create order: {exc}", draft.reference
            ) from exc
        logger.info("order_header_written", reference=draft.reference, order_id=order_id)

        total = len(draft.lines)
        for position, line in enumerate(draft.lines, start=1):
            try:
                await self._order_repo.insert_item(order_id, line)
            except RemoteStoreError as exc:
                logger.error(
                    "order_item_failed",
                    reference=draft.reference,
                    item=position,
                    of=total,
                    error=str(exc),
                )
                await self._roll_back(draft, order_id, position, exc)
            logger.debug("order_item_written", reference=draft.reference, item=position, of=total)

        return order_id

    async def _replace_incomplete(self, draft: OrderDraft) -> int:
        """Handle a header that already exists for this reference.

        A complete order is a real duplicate.  A header with fewer item
        rows than the draft is left over from an earlier attempt whose
        reply was lost; it is deleted and the header written again.
        """
        header = await self._order_repo.find_header(draft.reference)
        if header is not None:
            stored_items = await self._order_repo.count_items(draft.reference)
            if stored_items >= len(draft.lines):
                raise DuplicateOrderError(
                    f"Order {draft.reference} already exists", draft.reference
                )
            logger.warning(
                "order_incomplete_replaced",
                reference=draft.reference,
                order_id=header["id"],
                found_items=stored_items,
                expected_items=len(draft.lines),
            )
            await self._order_repo.delete_order(int(header["id"]))
        return await self._order_repo.insert_header(draft)

    async def _roll_back(
        self,
        draft: OrderDraft,
        order_id: int,
        position: int,
        cause: RemoteStoreError,
    ) -> None:
        """Delete a half-written order, then raise the submission failure."""
        try:
            await self._order_repo.delete_order(order_id)
        except RemoteStoreError as cleanup_exc:
            logger.error(
                "order_rollback_failed",
                reference=draft.reference,
                order_id=order_id,
                error=str(cleanup_exc),
            )
            raise PartialWriteError(
                f"Order {draft.reference} was only partly written "
                f"(item {position} of {len(draft.lines)} failed: {cause})",
                draft.reference,
                order_id,
            ) from cause

        logger.info("order_rolled_back", reference=draft.reference, order_id=order_id)
        raise OrderSubmissionError(
            f"Failed to create order item {position} of {len(draft.lines)}: {cause}",
            draft.reference,
        ) from cause

    async def _write_batch(self, draft: OrderDraft) -> int:
        try:
            order_id = await self._order_repo.insert_atomically(draft)
        except RemoteStoreError as exc:
            raise OrderSubmissionError(
                f"Failed to create order: {exc}", draft.reference
            ) from exc
        logger.info("order_batch_written", reference=draft.reference, order_id=order_id)
        return order_id

    # --- Diagnostics ----------------------------------------------------------

    async def _check_store(self, draft: OrderDraft) -> None:
        if not await self._order_repo.ping():
            raise OrderSubmissionError("Database connection failed", draft.reference)
        if not await self._order_repo.order_tables_exist():
            raise OrderSubmissionError(
                "Order tables do not exist in database", draft.reference
            )

    async def _verify_written(self, draft: OrderDraft) -> bool | None:
        """Re-read the order.  Reports mismatches, never fails the order."""
        try:
            header = await self._order_repo.find_header(draft.reference)
            item_rows = await self._order_repo.count_items(draft.reference) if header else 0
        except RemoteStoreError as exc:
            logger.warning("order_verification_skipped", reference=draft.reference, error=str(exc))
            return None

        if header is None:
            logger.warning("order_verification_mismatch", reference=draft.reference, header_found=False)
            return False
        if item_rows != len(draft.lines):
            logger.warning(
                "order_verification_mismatch",
                reference=draft.reference,
                expected_items=len(draft.lines),
                found_items=item_rows,
            )
            return False

        logger.info("order_verified", reference=draft.reference, items=item_rows)
        return True

    # --- Mapping --------------------------------------------------------------

    @staticmethod
    def _to_receipt(draft: OrderDraft, order_id: int, verified: bool | None) -> OrderReceipt:
        totals = draft.totals
        return OrderReceipt(
            reference=draft.reference,
            order_id=order_id,
            item_count=draft.item_count,
            subtotal=str(totals.subtotal),
            shipping=str(totals.shipping),
            tax=str(totals.tax_amount),
            total=str(totals.total),
            verified=verified,
        )

