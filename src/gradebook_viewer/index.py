from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from .numeric import first_present, to_number
from .roster import Roster, StudentRecord

FINAL_GRADE_COLUMNS = ("Unposted Final Grade", "Final Grade")
FAILING_THRESHOLD = 1.0


@dataclass(frozen=True)
class StudentIndexItem:
    key: str
    display_name: str
    last_name: str
    first_name: str
    row_index: int
    failed: bool = False
    final_grade: Optional[float] = None


def final_grade(record: StudentRecord) -> Optional[float]:
    return to_number(first_present(record.values, FINAL_GRADE_COLUMNS))


def is_failing(record: StudentRecord) -> bool:
    """True only when the final grade parses and is below 1.0."""
    grade = final_grade(record)
    return grade is not None and grade < FAILING_THRESHOLD


def _sort_key(item: StudentIndexItem):
    return (0 if item.failed else 1, item.last_name.casefold(), item.first_name.casefold())


def build_student_index(roster: Roster) -> Tuple[StudentIndexItem, ...]:
    """Index of the roster with failing students first, then by last and first name."""
    items = []
    for record in roster.records:
        if not record.last_name and not record.first_name:
            continue
        items.append(
            StudentIndexItem(
                key=f"{record.sis_id}-{record.row_index}",
                display_name=record.display_name,
                last_name=record.last_name,
                first_name=record.first_name,
                row_index=record.row_index,
                failed=is_failing(record),
                final_grade=final_grade(record),
            )
        )
    return tuple(sorted(items, key=_sort_key))


def filter_index(index: Iterable[StudentIndexItem], query: str) -> Tuple[StudentIndexItem, ...]:
    index = tuple(index)
    if not query:
        return index
    needle = query.lower()
    return tuple(item for item in index if needle in item.display_name.lower() or needle in item.key.lower())


def find_by_student_id(index: Sequence[StudentIndexItem], student_id: str) -> Optional[StudentIndexItem]:
    """Resolve a deep-link student id; it must equal the SIS id part of the key."""
    if not student_id:
        return None
    return next((item for item in index if item.key.rpartition("-")[0] == student_id), None)
