from .row_parser import RowCandidate, parse_line, to_row
from .tokenizer import Line, tokenize

__all__ = [
    "Line",
    "RowCandidate",
    "parse_line",
    "to_row",
    "tokenize",
]
