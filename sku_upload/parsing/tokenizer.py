from __future__ import annotations

import re
from dataclasses import dataclass

"""Line tokenizer for uploaded CSV text.

Splits raw text on LF or CRLF and drops lines that are blank after trimming.
Each emitted line keeps its 1-based position in the original line sequence,
so blank lines consume a number without producing a row.
"""

__all__ = [
    "Line",
    "tokenize",
]

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class Line:
    number: int  # 元の行番号 (1-based, 空行も数える)
    text: str  # trim 済み


def tokenize(text: str) -> list[Line]:
    """Return the non-blank lines of text tagged with their original line number.

    The first returned line is the header. Empty input yields an empty list.
    """
    lines: list[Line] = []
    for idx, raw in enumerate(_LINE_BREAK.split(text), start=1):
        stripped = raw.strip()
        if stripped == "":
            continue
        lines.append(Line(number=idx, text=stripped))
    return lines
