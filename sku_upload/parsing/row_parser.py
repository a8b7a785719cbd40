from __future__ import annotations

import re
from dataclasses import dataclass

from ..models.row import Row
from .tokenizer import Line

"""Row parser: token line -> row candidate -> display Row.

The parser never rejects a line. Field count and value checks belong to the
local validator; a short line is passed through with the missing fields
left empty so the validator can report the exact field count.
"""

__all__ = [
    "FIELD_DELIMITER",
    "INTEGER_PATTERN",
    "RowCandidate",
    "parse_line",
    "to_row",
]

FIELD_DELIMITER = ","
INTEGER_PATTERN = re.compile(r"^-?\d+$")


@dataclass(frozen=True)
class RowCandidate:
    row_index: int
    fields: tuple[str, ...]  # 生の値 (trim 前)

    @property
    def field_count(self) -> int:
        return len(self.fields)

    @property
    def sku(self) -> str:
        return self.fields[0].strip() if self.fields else ""

    @property
    def quantity_text(self) -> str:
        return self.fields[1].strip() if len(self.fields) > 1 else ""


def parse_line(line: Line) -> RowCandidate:
    return RowCandidate(row_index=line.number, fields=tuple(line.text.split(FIELD_DELIMITER)))


def to_row(candidate: RowCandidate) -> Row:
    """Convert a candidate to a display Row; non-integer quantities become None."""
    qty_text = candidate.quantity_text
    quantity = int(qty_text) if INTEGER_PATTERN.match(qty_text) else None
    return Row(row_index=candidate.row_index, sku=candidate.sku, quantity=quantity)
