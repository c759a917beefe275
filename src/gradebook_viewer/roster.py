"""Turn a raw gradebook export into a roster of real, unique students.

The pipeline runs in a fixed order: the points possible row is read first,
then non-student rows (header repeats, placeholder accounts, blanks) are
dropped, then students are de-duplicated by their external identifier.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .io import RawTable, Row, Source, load_table
from .numeric import first_present, to_number

LOGGER = logging.getLogger(__name__)

LAST_NAME = "LastName"
FIRST_NAME = "FirstName"
ID = "ID"
SIS_USER_ID = "SIS User ID"
SECTION = "Section"

IDENTITY_COLUMNS = frozenset(
    [
        LAST_NAME,
        FIRST_NAME,
        ID,
        SIS_USER_ID,
        "SIS Login ID",
        "Root Account",
        SECTION,
        "Notes",
    ]
)

POINTS_POSSIBLE_LABEL = "points possible"
HEADER_ECHO_THRESHOLD = 3


def _cell(row: Mapping[str, Optional[str]], column: str) -> str:
    value = row.get(column)
    return "" if value is None else str(value)


def _norm(value: object) -> str:
    return "" if value is None else str(value).strip().lower()


def _sis_id(row: Mapping[str, Optional[str]]) -> str:
    value = first_present(row, [SIS_USER_ID, ID])
    return "" if value is None else str(value).strip()


@dataclass(frozen=True)
class StudentRecord:
    last_name: str
    first_name: str
    sis_id: str
    external_id: str
    section: str
    row_index: int
    values: Mapping[str, Optional[str]] = field(repr=False, compare=False)

    @classmethod
    def from_row(cls, row: Row, row_index: int) -> "StudentRecord":
        return cls(
            last_name=_cell(row, LAST_NAME).strip(),
            first_name=_cell(row, FIRST_NAME).strip(),
            sis_id=_sis_id(row),
            external_id=dedupe_key(row, lower=False),
            section=_cell(row, SECTION).strip(),
            row_index=row_index,
            values=MappingProxyType(dict(row)),
        )

    @property
    def display_name(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    def get(self, column: str) -> Optional[str]:
        return self.values.get(column)


@dataclass(frozen=True)
class Roster:
    header: Tuple[str, ...]
    records: Tuple[StudentRecord, ...]
    points: Mapping[str, float]
    points_row_found: bool = False
    rows_read: int = 0
    rows_filtered: int = 0
    duplicates_dropped: int = 0

    @property
    def assignment_columns(self) -> List[str]:
        """Columns with a numeric maximum, in header order, minus identity columns."""
        return [col for col in self.header if col in self.points and col not in IDENTITY_COLUMNS]

    def __len__(self) -> int:
        return len(self.records)


def find_points_row(rows: Iterable[Row]) -> Optional[Row]:
    for row in rows:
        if _norm(row.get(LAST_NAME)) == POINTS_POSSIBLE_LABEL:
            return row
    return None


def extract_points_possible(table: RawTable) -> Dict[str, float]:
    points: Dict[str, float] = {}
    row = find_points_row(table.rows)
    if row is None:
        return points
    for column in table.header:
        if not column:
            continue
        value = to_number(row.get(column))
        if value is not None:
            points[column] = value
    return points


def is_header_echo(row: Row, header: Sequence[str]) -> bool:
    """A malformed row that repeats the column names as its own values."""
    matches = 0
    for column in header:
        if not column:
            continue
        value = _norm(row.get(column))
        if value and value == _norm(column):
            matches += 1
    return matches >= HEADER_ECHO_THRESHOLD


def is_non_student_row(row: Row, header: Sequence[str]) -> bool:
    last = _norm(row.get(LAST_NAME))
    first = _norm(row.get(FIRST_NAME))
    section = _norm(row.get(SECTION))

    if last == POINTS_POSSIBLE_LABEL:
        return True
    if last == "lastname" and first == "firstname":
        return True
    if _sis_id(row).lower() == "sis user id":
        return True
    if section == "section" and not last and not first:
        return True
    if is_header_echo(row, header):
        return True
    if not last and not first:
        return True
    # Placeholder account injected by the LMS; real students with this name are lost too.
    if last == "student" and first == "test":
        return True
    return False


def filter_non_students(rows: Iterable[Row], header: Sequence[str]) -> List[Row]:
    kept = []
    for row in rows:
        if is_non_student_row(row, header):
            LOGGER.debug("Dropping non-student row: %s, %s", row.get(LAST_NAME), row.get(FIRST_NAME))
            continue
        kept.append(row)
    return kept


def dedupe_key(row: Mapping[str, Optional[str]], lower: bool = True) -> str:
    """SIS User ID, else ID, else ``"Last|First"``; blank but present ids win."""
    value = first_present(row, [SIS_USER_ID, ID])
    if value is None:
        value = f"{_cell(row, LAST_NAME)}|{_cell(row, FIRST_NAME)}"
    key = str(value).strip()
    return key.lower() if lower else key


def dedupe_rows(rows: Iterable[Row]) -> List[Row]:
    """Keep the first row per key; rows with an empty key are dropped."""
    seen = set()
    unique = []
    for row in rows:
        key = dedupe_key(row)
        if not key or key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique


def build_roster(table: RawTable) -> Roster:
    points = extract_points_possible(table)
    students = filter_non_students(table.rows, table.header)
    unique = dedupe_rows(students)

    records = tuple(StudentRecord.from_row(row, idx) for idx, row in enumerate(unique))
    roster = Roster(
        header=table.header,
        records=records,
        points=MappingProxyType(points),
        points_row_found=find_points_row(table.rows) is not None,
        rows_read=len(table.rows),
        rows_filtered=len(table.rows) - len(students),
        duplicates_dropped=len(students) - len(unique),
    )
    LOGGER.info(
        "Loaded %d students (%d rows read, %d non-student rows, %d duplicates, %d assignment columns)",
        len(records),
        roster.rows_read,
        roster.rows_filtered,
        roster.duplicates_dropped,
        len(roster.assignment_columns),
    )
    return roster


def load_roster(source: Source, timeout: Optional[float] = None) -> Roster:
    return build_roster(load_table(source, timeout=timeout))
