from __future__ import annotations

from collections.abc import Sequence

from ..models.row import Row
from ..models.row_error import RowError

"""Plain-text tables for the error report and the parsed row grid."""

__all__ = [
    "render_error_table",
    "render_row_table",
]

UNKNOWN_ROW_LABEL = "unknown"


def _table(header: tuple[str, ...], body: list[tuple[str, ...]]) -> list[str]:
    widths = [len(h) for h in header]
    for cells in body:
        widths = [max(w, len(c)) for w, c in zip(widths, cells, strict=True)]
    fmt = "  ".join(f"{{:<{w}}}" for w in widths)
    return [fmt.format(*header).rstrip()] + [fmt.format(*cells).rstrip() for cells in body]


def render_error_table(errors: Sequence[RowError]) -> list[str]:
    """Row | SKU | Reason lines, "unknown" for errors without a row number."""
    if not errors:
        return []
    body = [
        (
            str(e.row_index) if e.row_index is not None else UNKNOWN_ROW_LABEL,
            e.sku,
            e.reason,
        )
        for e in errors
    ]
    return _table(("Row", "SKU", "Reason"), body)


def render_row_table(rows: Sequence[Row]) -> list[str]:
    if not rows:
        return []
    body = [
        (str(r.row_index), r.sku, "" if r.quantity is None else str(r.quantity))
        for r in rows
    ]
    return _table(("Row", "SKU", "Quantity"), body)
