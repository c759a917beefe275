from typing import Dict, Sequence

import pandas as pd

from .aggregation import StudentBreakdown
from .index import StudentIndexItem, is_failing
from .roster import Roster


def roster_summary(roster: Roster, index: Sequence[StudentIndexItem]) -> Dict[str, int]:
    failing = sum(1 for item in index if item.failed)
    graded = sum(1 for item in index if item.final_grade is not None)
    return {
        "students": len(index),
        "failing": failing,
        "passing": graded - failing,
        "ungraded": len(index) - graded,
        "sections": len({record.section for record in roster.records if record.section}),
    }


def section_summary(roster: Roster, missing_label: str = "Unassigned") -> pd.DataFrame:
    """Students and failing students per section, largest section first."""
    rows = [
        {"section": record.section or missing_label, "failing": is_failing(record)}
        for record in roster.records
    ]
    if not rows:
        return pd.DataFrame(columns=["section", "students", "failing"])

    data = pd.DataFrame(rows)
    grouped = data.groupby("section", dropna=False)
    result = pd.DataFrame(
        {
            "students": grouped.size(),
            "failing": grouped["failing"].sum().astype(int),
        }
    ).reset_index()
    return result.sort_values(by=["students", "section"], ascending=[False, True]).reset_index(drop=True)


def items_frame(breakdown: StudentBreakdown) -> pd.DataFrame:
    rows = []
    for group in breakdown.groups:
        for item in group.items:
            rows.append(
                {
                    "category_id": group.category_id,
                    "category": group.name,
                    "activity": item.column,
                    "score": item.raw_display,
                    "max": item.max_points,
                    "pct": item.pct,
                    "tone": item.tone,
                }
            )
    return pd.DataFrame(rows, columns=["category_id", "category", "activity", "score", "max", "pct", "tone"])


def totals_frame(breakdown: StudentBreakdown) -> pd.DataFrame:
    rows = [
        {
            "category_id": group.category_id,
            "category": group.name,
            "items": len(group.items),
            "sum_earned": group.totals.sum_earned,
            "sum_max": group.totals.sum_max,
            "pct": group.totals.pct,
        }
        for group in breakdown.groups
        if group.items
    ]
    return pd.DataFrame(rows, columns=["category_id", "category", "items", "sum_earned", "sum_max", "pct"])


def contributions_frame(breakdown: StudentBreakdown) -> pd.DataFrame:
    rows = [
        {
            "category_id": row.category_id,
            "category": row.name,
            "weight": row.weight,
            "pct": row.pct,
            "source": row.source or "",
            "contribution": row.contribution,
        }
        for row in breakdown.contributions
    ]
    return pd.DataFrame(rows, columns=["category_id", "category", "weight", "pct", "source", "contribution"])
