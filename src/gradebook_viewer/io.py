import logging
from dataclasses import dataclass
from io import StringIO
from pathlib import Path
from typing import IO, Dict, List, Optional, Sequence, Tuple, Union

import pandas as pd
import requests

from .errors import FetchError, ParseError

LOGGER = logging.getLogger(__name__)

Source = Union[str, Path, IO[str], IO[bytes]]
Row = Dict[str, Optional[str]]


@dataclass(frozen=True)
class RawTable:
    header: Tuple[str, ...]
    rows: Tuple[Row, ...]


def _is_url(source: object) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _decode(payload: Union[str, bytes]) -> str:
    if isinstance(payload, bytes):
        try:
            payload = payload.decode("utf-8-sig")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Gradebook export is not valid UTF-8: {exc}") from exc
    return payload.lstrip("\ufeff")


def fetch_text(source: Source, timeout: Optional[float] = None) -> str:
    """Read the raw export text from a URL, a local path or an open file."""
    if _is_url(source):
        try:
            response = requests.get(source, timeout=timeout)
            response.raise_for_status()
        except requests.HTTPError as exc:
            LOGGER.error("Gradebook fetch failed: %s -> %s", source, exc.response.status_code)
            raise FetchError(f"Failed to fetch CSV ({exc.response.status_code})") from exc
        except requests.RequestException as exc:
            LOGGER.error("Gradebook fetch failed: %s -> %s", source, exc)
            raise FetchError(f"Failed to fetch CSV: {exc}") from exc
        return _decode(response.content)

    if isinstance(source, (str, Path)):
        path = Path(source)
        try:
            return _decode(path.read_bytes())
        except (OSError, ValueError) as exc:
            LOGGER.error("Gradebook file unreadable: %s -> %s", path, exc)
            raise FetchError(f"Unable to read {path}: {exc}") from exc

    return _decode(source.read())


def _is_blank(row: Row) -> bool:
    return all(value is None or not value.strip() for value in row.values())


def _header_columns(cells: Sequence[Optional[str]]) -> List[Tuple[int, str]]:
    """Positions and names of usable header cells; blanks and repeats are skipped."""
    columns: List[Tuple[int, str]] = []
    seen = set()
    for pos, cell in enumerate(cells):
        name = "" if cell is None else str(cell)
        if not name.strip() or name in seen:
            continue
        seen.add(name)
        columns.append((pos, name))
    return columns


def read_table(text: str) -> RawTable:
    """Parse export text into a header and rows of raw string cells.

    The first record is the header. Cells under a blank header are dropped,
    lines with too many fields are skipped rather than failing the load, and
    rows whose cells are all blank are dropped.
    """
    try:
        # Keep literal strings like "NA" or "None" instead of converting them to NaN.
        df = pd.read_csv(
            StringIO(text),
            header=None,
            dtype=str,
            keep_default_na=False,
            index_col=False,
            on_bad_lines="skip",
            skip_blank_lines=True,
        )
    except pd.errors.EmptyDataError as exc:
        raise ParseError("Gradebook export is empty") from exc
    except (pd.errors.ParserError, ValueError) as exc:
        raise ParseError(f"Unable to parse gradebook export: {exc}") from exc

    cells = df.astype(object).where(df.notna(), None).values.tolist()
    columns = _header_columns(cells[0])
    header = tuple(name for _, name in columns)
    records = [{name: line[pos] for pos, name in columns} for line in cells[1:]]
    rows = tuple(row for row in records if not _is_blank(row))
    LOGGER.debug("Parsed %d columns and %d rows (%d blank rows skipped)", len(header), len(rows), len(records) - len(rows))
    return RawTable(header=header, rows=rows)



def load_table(source: Source, timeout: Optional[float] = None) -> RawTable:
    return read_table(fetch_text(source, timeout=timeout))
