# backend/analystpro/services/cells.py

"""
Cell model
----------
Every raw scalar coming out of the loader is read once into a tagged Cell:

- NUMBER: native int / float (finite, not bool)
- TEXT:   anything else that is present (strings, bools, inf, ...)
- EMPTY:  None, "" or NaN

Downstream code asks the tag instead of re-inspecting Python types.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, NamedTuple, Optional

import numpy as np


class CellKind(str, Enum):
    NUMBER = "number"
    TEXT = "text"
    EMPTY = "empty"


class Cell(NamedTuple):
    kind: CellKind
    value: Any


EMPTY_CELL = Cell(CellKind.EMPTY, None)

_DECIMAL_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def read_cell(raw: Any) -> Cell:
    """Tag a raw scalar."""
    if raw is None:
        return EMPTY_CELL
    if isinstance(raw, np.generic):
        raw = raw.item()
    if isinstance(raw, bool):
        return Cell(CellKind.TEXT, raw)
    if isinstance(raw, (int, float)):
        if isinstance(raw, float) and math.isnan(raw):
            return EMPTY_CELL
        if isinstance(raw, float) and math.isinf(raw):
            return Cell(CellKind.TEXT, raw)
        return Cell(CellKind.NUMBER, raw)
    if isinstance(raw, str) and raw == "":
        return EMPTY_CELL
    return Cell(CellKind.TEXT, raw)


def is_present(cell: Cell) -> bool:
    return cell.kind is not CellKind.EMPTY


def as_number(cell: Cell) -> Optional[float]:
    """
    Finite numeric reading of a cell, or None.

    NUMBER cells pass through; bools read as 1 / 0; TEXT cells holding
    plain decimal text (e.g. " 12.5 ", "1e3") are parsed and
    whitespace-only text reads as 0. Text such as "1_000" or "0x1F"
    is not a number.
    """
    if cell.kind is CellKind.NUMBER:
        return cell.value
    if cell.kind is not CellKind.TEXT:
        return None
    if isinstance(cell.value, bool):
        return float(cell.value)
    if isinstance(cell.value, str):
        text = cell.value.strip()
        if not text:
            return 0.0
        if not _DECIMAL_RE.match(text):
            return None
        parsed = float(text)
        return parsed if math.isfinite(parsed) else None
    return None


def cell_text(cell: Cell) -> str:
    """String form used for category labels and pivot keys."""
    if cell.kind is CellKind.EMPTY:
        return ""
    value = cell.value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
