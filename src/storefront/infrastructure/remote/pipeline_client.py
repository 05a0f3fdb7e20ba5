"""Query gateway for a libSQL/Hrana-style HTTP pipeline endpoint.

Every call POSTs a ``{"requests": [...]}`` envelope and returns the
decoded JSON response once its first result is known to be ``ok``.
Each call is independent: no retries, no session baton.

Example:
    >>> async with PipelineClient("https://db.example.io/v2/pipeline", token) as client:
    ...     result = await client.query("SELECT * FROM products WHERE id = ?", [12])
    ...     result.records()
    [{'id': 12, 'title': 'Silver Ring', ...}]
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

import httpx
import structlog

from storefront.infrastructure.remote.errors import ProtocolError, TransportError
from storefront.infrastructure.remote.rows import decode_rows

logger = structlog.get_logger(__name__)


def encode_value(value: Any) -> dict[str, Any]:
    """Wrap a Python scalar in the endpoint's tagged value format.

    Integers travel as decimal strings, floats as JSON numbers, and
    booleans as the integers 1 and 0.
    """
    if value is None:
        return {"type": "null"}
    if isinstance(value, bool):
        return {"type": "integer", "value": "1" if value else "0"}
    if isinstance(value, int):
        return {"type": "integer", "value": str(value)}
    if isinstance(value, (float, Decimal)):
        return {"type": "float", "value": float(value)}
    return {"type": "text", "value": str(value)}


@dataclass(frozen=True)
class Statement:
    sql: str
    args: tuple[Any, ...] = ()

    def to_wire(self) -> dict[str, Any]:
        stmt: dict[str, Any] = {"sql": self.sql}
        if self.args:
            stmt["args"] = [encode_value(arg) for arg in self.args]
        return stmt


@dataclass(frozen=True)
class ResultSet:
    """Columns, raw tagged rows, and write metadata of one statement."""

    columns: list[dict[str, Any]]
    rows: list[list[dict[str, Any] | None]]
    affected_row_count: int = 0
    last_insert_rowid: int | None = None

    @classmethod
    def from_result(cls, result: Any) -> ResultSet:
        if not isinstance(result, dict):
            raise ProtocolError("Pipeline result is missing")
        columns = result.get("cols")
        rows = result.get("rows")
        if not isinstance(columns, list) or not isinstance(rows, list):
            raise ProtocolError("Pipeline result has no columns or rows")

        rowid = result.get("last_insert_rowid")
        return cls(
            columns=columns,
            rows=rows,
            affected_row_count=int(result.get("affected_row_count") or 0),
            last_insert_rowid=int(rowid) if rowid not in (None, "") else None,
        )

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> ResultSet:
        response = envelope["results"][0].get("response") or {}
        return cls.from_result(response.get("result"))

    def records(self) -> list[dict[str, Any]]:
        return decode_rows(self.columns, self.rows)

    def first(self) -> dict[str, Any] | None:
        records = self.records()
        return records[0] if records else None


@dataclass(frozen=True)
class BatchStep:
    """A statement inside a batch, optionally gated on earlier steps."""

    statement: Statement
    condition: dict[str, Any] | None = None

    def to_wire(self) -> dict[str, Any]:
        step: dict[str, Any] = {"stmt": self.statement.to_wire()}
        if self.condition is not None:
            step["condition"] = self.condition
        return step


def step_ok(step: int) -> dict[str, Any]:
    return {"type": "ok", "step": step}


def step_not(condition: dict[str, Any]) -> dict[str, Any]:
    return {"type": "not", "cond": condition}


@dataclass(frozen=True)
class BatchResult:
    """Per-step outcome: a ResultSet, or None if the step failed or was skipped."""

    step_results: list[ResultSet | None]
    step_errors: list[str | None]

    def succeeded(self, step: int) -> bool:
        return self.step_results[step] is not None

    def first_error(self) -> tuple[int, str] | None:
        for index, message in enumerate(self.step_errors):
            if message:
                return index, message
        return None


class PipelineClient:
    """Async client for the remote SQL pipeline endpoint.

    Construct one per application and pass it to the repositories that
    need it.  ``transport`` lets tests substitute ``httpx.MockTransport``.
    """

    def __init__(
        self,
        url: str,
        auth_token: str | None = None,
        *,
        timeout: float | None = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if auth_token:
            headers["Authorization"] = f"Bearer {auth_token}"
        self._url = url
        self._client = httpx.AsyncClient(
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> PipelineClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # --- Public API -----------------------------------------------------------

    async def execute(self, sql: str, args: list[Any] | None = None) -> dict[str, Any]:
        """Run one statement and return the raw response envelope."""
        statement = Statement(sql, tuple(args or ()))
        logger.debug("pipeline_execute", sql=sql, arg_count=len(statement.args))
        return await self._send([{"type": "execute", "stmt": statement.to_wire()}])

    async def query(self, sql: str, args: list[Any] | None = None) -> ResultSet:
        """Run one statement and return its result set."""
        envelope = await self.execute(sql, args)
        return ResultSet.from_envelope(envelope)

    async def batch(self, steps: list[BatchStep]) -> BatchResult:
        """Run several statements in a single request.

        Steps run in order on one connection; a step whose condition is
        false is skipped.  Gate a trailing COMMIT on the previous steps
        to make the whole batch all-or-nothing.
        """
        logger.debug("pipeline_batch", step_count=len(steps))
        envelope = await self._send(
            [{"type": "batch", "batch": {"steps": [s.to_wire() for s in steps]}}]
        )
        response = envelope["results"][0].get("response") or {}
        result = response.get("result")
        if not isinstance(result, dict) or not isinstance(result.get("step_results"), list):
            raise ProtocolError("Batch response has no step results")

        raw_errors = result.get("step_errors") or []
        step_errors: list[str | None] = []
        for index in range(len(result["step_results"])):
            error = raw_errors[index] if index < len(raw_errors) else None
            step_errors.append(error.get("message", "unknown error") if error else None)

        return BatchResult(
            step_results=[
                ResultSet.from_result(r) if r is not None else None
                for r in result["step_results"]
            ],
            step_errors=step_errors,
        )

    # --- Internal helpers -----------------------------------------------------

    async def _send(self, requests: list[dict[str, Any]]) -> dict[str, Any]:
        try:
            response = await self._client.post(self._url, json={"requests": requests})
        except httpx.HTTPError as exc:
            logger.error("pipeline_unreachable", error=str(exc))
            raise TransportError(None, str(exc)) from exc

        if not response.is_success:
            logger.error(
                "pipeline_http_error",
                status=response.status_code,
                body=response.text,
            )
            raise TransportError(response.status_code, response.text)

        try:
            envelope = response.json()
        except ValueError as exc:
            raise ProtocolError("Pipeline response is not valid JSON") from exc

        results = envelope.get("results") if isinstance(envelope, dict) else None
        if not isinstance(results, list) or not results:
            raise ProtocolError("Pipeline response contains no results")

        first = results[0]
        if not isinstance(first, dict) or first.get("type") != "ok":
            message = "unknown error"
            if isinstance(first, dict) and isinstance(first.get("error"), dict):
                message = first["error"].get("message", message)
            raise ProtocolError(f"Pipeline statement failed: {message}")

        return envelope
