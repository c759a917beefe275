from typing import Dict, List

from .roster import FIRST_NAME, IDENTITY_COLUMNS, LAST_NAME, Roster

REQUIRED_COLUMNS = [LAST_NAME, FIRST_NAME]


def check_required_columns(roster: Roster) -> Dict[str, bool]:
    return {col: col in roster.header for col in REQUIRED_COLUMNS}


def check_missing_maxima(roster: Roster) -> int:
    """Non-identity columns without a numeric points possible value."""
    return sum(1 for col in roster.header if col not in IDENTITY_COLUMNS and col not in roster.points)


def run_invariants(roster: Roster) -> List[Dict[str, object]]:
    results = []

    required = check_required_columns(roster)
    missing_required = [col for col, present in required.items() if not present]
    results.append(
        {
            "name": "identity_columns",
            "ok": len(missing_required) == 0,
            "detail": ", ".join(missing_required) if missing_required else "all present",
        }
    )

    results.append(
        {
            "name": "points_possible_row",
            "ok": roster.points_row_found,
            "detail": "found" if roster.points_row_found else "missing; no column has a known maximum",
        }
    )

    assignments = len(roster.assignment_columns)
    results.append({"name": "assignment_columns", "ok": assignments > 0, "detail": assignments})

    results.append({"name": "duplicate_rows", "ok": roster.duplicates_dropped == 0, "detail": roster.duplicates_dropped})

    # Summary columns are read only in the points row, so this is informational.
    results.append({"name": "missing_maxima", "ok": True, "detail": check_missing_maxima(roster)})

    return results
