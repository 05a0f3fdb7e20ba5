"""Row decoding: tagged pipeline cells to plain Python values.

A result row arrives as a list of cells parallel to the column list,
each cell shaped like ``{"type": "integer", "value": "42"}``.  Decoding
never fails: anything missing or unparsable degrades to ``0`` for
numeric cells and ``""`` for everything else.
"""

from __future__ import annotations

from typing import Any


def _to_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        return int(value)
    except (TypeError, ValueError):
        pass
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0


def _to_float(value: Any) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def decode_cell(cell: Any) -> int | float | str:
    if not isinstance(cell, dict) or not cell:
        return ""
    kind = cell.get("type")
    value = cell.get("value")
    if kind == "integer":
        return _to_int(value)
    if kind == "float":
        return _to_float(value)
    if value is None:
        return ""
    return str(value)


def _column_names(columns: list[Any]) -> list[str]:
    """One distinct key per column; repeats get ``_1``, ``_2``... suffixes."""
    names: list[str] = []
    seen: set[str] = set()
    for index, column in enumerate(columns):
        name = column.get("name") if isinstance(column, dict) else None
        name = str(name) if name else f"column_{index}"
        candidate, suffix = name, 0
        while candidate in seen:
            suffix += 1
            candidate = f"{name}_{suffix}"
        seen.add(candidate)
        names.append(candidate)
    return names


def decode_row(
    columns: list[dict[str, Any]] | None,
    row: list[dict[str, Any] | None] | None,
) -> dict[str, Any]:
    """Return ``{column name: native value}`` in column order.

    Cells beyond the column list are ignored; missing cells decode as if
    they were empty text.  A repeated column name such as ``SELECT o.id,
    i.id`` keeps both values, the second under ``id_1``.
    """
    cells = row if isinstance(row, list) else []
    record: dict[str, Any] = {}
    for index, name in enumerate(_column_names(columns or [])):
        cell = cells[index] if index < len(cells) else None
        record[name] = decode_cell(cell)
    return record


def decode_rows(
    columns: list[dict[str, Any]] | None,
    rows: list[list[dict[str, Any] | None]] | None,
) -> list[dict[str, Any]]:
    return [decode_row(columns, row) for row in rows or []]
