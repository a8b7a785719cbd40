from __future__ import annotations

from dataclasses import dataclass

"""Row model for the SKU upload workflow.

A Row is the display representation of one data line of an uploaded CSV.
Rows are created by the row parser and never mutated afterwards.
"""

__all__ = [
    "Row",
]


@dataclass(frozen=True)
class Row:
    """One parsed data line (SKU, Quantity).

    row_index is the 1-based position in the original line sequence, so the
    header is row 1 and the first data line is usually row 2. Blank lines
    consume a position without producing a Row.
    """
    row_index: int  # 元ファイルの行番号 (header = 1)
    sku: str
    quantity: int | None = None  # 整数として解釈できない場合 None
