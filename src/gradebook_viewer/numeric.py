import math
import re
import sys
from typing import Iterable, Mapping, Optional

# Plain decimal literals only: no thousands separators, underscores or hex.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def is_numeric(value: object) -> bool:
    """Return True for finite numbers and strings holding one.

    Booleans and ``None`` are never numeric. Strings are trimmed first; an
    empty string is not numeric.
    """
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    if not isinstance(value, str):
        return False
    trimmed = value.strip()
    if not trimmed or not _NUMBER_RE.fullmatch(trimmed):
        return False
    return math.isfinite(float(trimmed))


def to_number(value: object) -> Optional[float]:
    if not is_numeric(value):
        return None
    if isinstance(value, str):
        return float(value.strip())
    return float(value)


def round_half_up(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.floor((value + sys.float_info.epsilon) * factor + 0.5) / factor


def first_present(values: Mapping[str, object], columns: Iterable[str]) -> Optional[object]:
    """Return the first candidate column value that is not ``None``.

    Empty strings count as present, mirroring how the export always carries
    every column even when the cell is blank.
    """
    for column in columns:
        value = values.get(column)
        if value is not None:
            return value
    return None


def first_numeric(values: Mapping[str, object], columns: Iterable[str]) -> Optional[float]:
    for column in columns:
        number = to_number(values.get(column))
        if number is not None:
            return number
    return None
