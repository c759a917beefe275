"""Per-student grade breakdown: items, category totals and contributions.

Everything here is a pure projection of a ``StudentRecord`` and the roster's
points possible map. Nothing is cached or mutated, so the presentation layer
can recompute a breakdown whenever the selected student changes.

Contribution of a category = its percentage x normalized weight / 100. The
percentage comes from a per-category score column of the export when one is
numeric, otherwise from the mean of the category's item percentages.

When the export carries an overall final score, a reconciliation strategy
adjusts the rounded contributions so they add up to that score exactly. The
default strategy pushes the whole rounding remainder onto the last category
that has a contribution.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .categories import DEFAULT_CATEGORIES, OTHER_ID, Category, category_ids, category_name, group_columns, normalized_weights
from .numeric import first_numeric, first_present, round_half_up, to_number
from .roster import Roster, StudentRecord

FINAL_SCORE_COLUMNS = ("Unposted Final Score", "Final Score")
CATEGORY_SCORE_SUFFIXES = ("Unposted Final Score", "Final Score", "Unposted Current Score", "Current Score")

MISSING_DISPLAY = "—"
TONE_HIGH = 90.0
TONE_MEDIUM = 75.0


@dataclass(frozen=True)
class AssignmentItem:
    column: str
    raw: Optional[str]
    raw_display: str
    max_points: Optional[float]
    value: Optional[float]
    pct: Optional[float]
    tone: str


@dataclass(frozen=True)
class CategoryTotals:
    sum_earned: float
    sum_max: float
    pct: Optional[float]


@dataclass(frozen=True)
class CategoryGroup:
    category_id: str
    name: str
    weight: float
    items: Tuple[AssignmentItem, ...]
    totals: CategoryTotals


@dataclass(frozen=True)
class ContributionRow:
    category_id: str
    name: str
    weight: float
    pct: Optional[float]
    source: Optional[str]
    contribution: Optional[float]


@dataclass(frozen=True)
class StudentBreakdown:
    record: StudentRecord
    groups: Tuple[CategoryGroup, ...]
    contributions: Tuple[ContributionRow, ...]
    final_score: Optional[float]
    computed_sum: float
    displayed_sum: float
    reconciled: bool

    def group(self, category_id: str) -> CategoryGroup:
        return next(g for g in self.groups if g.category_id == category_id)

    def contribution(self, category_id: str) -> Optional[ContributionRow]:
        return next((row for row in self.contributions if row.category_id == category_id), None)


def tone_for(pct: Optional[float]) -> str:
    if pct is None:
        return "unknown"
    if pct >= TONE_HIGH:
        return "high"
    if pct >= TONE_MEDIUM:
        return "medium"
    return "low"


def make_item(record: StudentRecord, column: str, points: Mapping[str, float]) -> AssignmentItem:
    raw = record.get(column)
    max_points = points.get(column)
    value = to_number(raw)
    pct = value / max_points * 100 if value is not None and max_points is not None and max_points > 0 else None
    raw_display = MISSING_DISPLAY if raw is None or not str(raw).strip() else str(raw)
    return AssignmentItem(
        column=column,
        raw=raw,
        raw_display=raw_display,
        max_points=max_points,
        value=value,
        pct=pct,
        tone=tone_for(pct),
    )


def category_totals(items: Sequence[AssignmentItem]) -> CategoryTotals:
    """Sum earned/max over scored items; pct is the mean of item percentages."""
    sum_earned = 0.0
    sum_max = 0.0
    for item in items:
        if item.value is not None and item.max_points is not None and item.max_points > 0:
            sum_earned += item.value
            sum_max += item.max_points

    pcts = [item.pct for item in items if item.pct is not None]
    if pcts:
        pct: Optional[float] = sum(pcts) / len(pcts)
    elif sum_max > 0:
        pct = sum_earned / sum_max * 100
    else:
        pct = None
    return CategoryTotals(sum_earned=sum_earned, sum_max=sum_max, pct=pct)


def category_score_columns(category: Category) -> List[str]:
    return [f"{category.name} {suffix}" for suffix in CATEGORY_SCORE_SUFFIXES]


def compute_contributions(
    record: StudentRecord,
    totals_by_id: Mapping[str, CategoryTotals],
    categories: Sequence[Category] = DEFAULT_CATEGORIES,
) -> List[ContributionRow]:
    weights = normalized_weights(categories)
    rows = []
    for category in categories:
        weight = weights[category.id]
        pct = first_numeric(record.values, category_score_columns(category))
        source: Optional[str] = "column"
        if pct is None:
            totals = totals_by_id.get(category.id)
            pct = totals.pct if totals is not None else None
            source = "computed" if pct is not None else None
        contribution = pct * weight / 100 if pct is not None else None
        rows.append(
            ContributionRow(
                category_id=category.id,
                name=category.name,
                weight=weight,
                pct=pct,
                source=source,
                contribution=contribution,
            )
        )
    return rows


# A reconciler receives contributions in category order and the final score and
# returns adjusted values, or None when no category can absorb the remainder.
Reconciler = Callable[[Sequence[Optional[float]], float], Optional[List[Optional[float]]]]


def _absorb_remainder(contributions: Sequence[Optional[float]], final_score: float, target: Optional[int]) -> Optional[List[Optional[float]]]:
    if target is None:
        return None
    rounded = [None if value is None else round_half_up(value) for value in contributions]
    diff = final_score - sum(value for value in rounded if value is not None)
    if diff != 0:
        rounded[target] = round_half_up(rounded[target] + diff)
    return rounded


def remainder_to_last(contributions: Sequence[Optional[float]], final_score: float) -> Optional[List[Optional[float]]]:
    """Round to 2 places and add the whole remainder to the last non-null contribution."""
    target = next((idx for idx in reversed(range(len(contributions))) if contributions[idx] is not None), None)
    return _absorb_remainder(contributions, final_score, target)


def remainder_to_largest(contributions: Sequence[Optional[float]], final_score: float) -> Optional[List[Optional[float]]]:
    candidates = [idx for idx, value in enumerate(contributions) if value is not None]
    target = max(candidates, key=lambda idx: abs(contributions[idx]), default=None)
    return _absorb_remainder(contributions, final_score, target)


def keep_computed(contributions: Sequence[Optional[float]], final_score: float) -> Optional[List[Optional[float]]]:
    return list(contributions)


RECONCILERS: Dict[str, Reconciler] = {
    "last": remainder_to_last,
    "largest": remainder_to_largest,
    "none": keep_computed,
}


def get_reconciler(name: str) -> Reconciler:
    try:
        return RECONCILERS[name]
    except KeyError:
        raise ValueError(f"Unknown reconciliation strategy '{name}' (choose from {', '.join(RECONCILERS)})") from None


def final_score(record: StudentRecord) -> Optional[float]:
    return to_number(first_present(record.values, FINAL_SCORE_COLUMNS))


def compute_breakdown(
    record: StudentRecord,
    roster: Roster,
    categories: Sequence[Category] = DEFAULT_CATEGORIES,
    reconciler: Reconciler = remainder_to_last,
) -> StudentBreakdown:
    """Build the grouped items and contribution table for one student.

    ``displayed_sum`` is the export's final score when the reconciler accepted
    it (``reconciled`` is True), otherwise the plain sum of contributions.
    """
    columns_by_id = group_columns(roster.assignment_columns, categories)
    weights = normalized_weights(categories)

    groups = []
    for category_id in category_ids(categories):
        items = tuple(make_item(record, column, roster.points) for column in columns_by_id[category_id])
        groups.append(
            CategoryGroup(
                category_id=category_id,
                name=category_name(category_id, categories),
                weight=weights.get(category_id, 0.0),
                items=items,
                totals=category_totals(items),
            )
        )
    totals_by_id = {group.category_id: group.totals for group in groups if group.category_id != OTHER_ID}

    rows = compute_contributions(record, totals_by_id, categories)
    values: List[Optional[float]] = [row.contribution for row in rows]
    computed_sum = sum(value for value in values if value is not None)

    score = final_score(record)
    displayed_sum = computed_sum
    reconciled = False
    if score is not None:
        adjusted = reconciler(values, score)
        if adjusted is not None:
            rows = [
                ContributionRow(row.category_id, row.name, row.weight, row.pct, row.source, value)
                for row, value in zip(rows, adjusted)
            ]
            displayed_sum = score
            reconciled = True

    return StudentBreakdown(
        record=record,
        groups=tuple(groups),
        contributions=tuple(rows),
        final_score=score,
        computed_sum=computed_sum,
        displayed_sum=displayed_sum,
        reconciled=reconciled,
    )
