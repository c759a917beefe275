import pytest

from gradebook_viewer.aggregation import (
    MISSING_DISPLAY,
    category_totals,
    compute_breakdown,
    get_reconciler,
    make_item,
    remainder_to_largest,
    remainder_to_last,
    tone_for,
)
from gradebook_viewer.categories import OTHER_ID, Category
from gradebook_viewer.io import read_table
from gradebook_viewer.roster import build_roster


def _contributions(breakdown):
    return {row.category_id: row.contribution for row in breakdown.contributions}


def test_item_percentage_and_tone(sample_roster, record_named):
    item = make_item(record_named("Doe"), "Quiz 1", sample_roster.points)
    assert item.value == 8.0
    assert item.max_points == 10.0
    assert item.pct == pytest.approx(80.0)
    assert item.tone == "medium"


def test_empty_cell_has_no_percentage(sample_roster, record_named):
    item = make_item(record_named("Smith"), "Reflection Essay", sample_roster.points)
    assert item.pct is None
    assert item.tone == "unknown"
    assert item.raw_display == MISSING_DISPLAY


def test_missing_maximum_has_no_percentage(record_named):
    item = make_item(record_named("Doe"), "Quiz 1", {})
    assert item.value == 8.0
    assert item.pct is None


@pytest.mark.parametrize("pct, tone", [(None, "unknown"), (95.0, "high"), (90.0, "high"), (75.0, "medium"), (74.99, "low")])
def test_tone_thresholds(pct, tone):
    assert tone_for(pct) == tone


def test_category_totals_prefer_mean_of_percentages():
    roster = build_roster(read_table("LastName,FirstName,ID,Quiz 1,Quiz 2\nPoints Possible,,,2,10\nDoe,Jane,1,1,9\n"))
    record = roster.records[0]
    items = [make_item(record, column, roster.points) for column in ("Quiz 1", "Quiz 2")]
    totals = category_totals(items)
    assert totals.pct == pytest.approx(70.0)
    assert totals.sum_earned == 10.0
    assert totals.sum_max == 12.0


def test_category_totals_without_scores():
    totals = category_totals([])
    assert totals.pct is None
    assert totals.sum_max == 0.0


def test_breakdown_reconciles_to_final_score(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Doe"), sample_roster)
    assert breakdown.computed_sum == pytest.approx(84.5)
    assert breakdown.final_score == pytest.approx(86.14)
    assert breakdown.reconciled
    assert breakdown.displayed_sum == pytest.approx(86.14)
    assert _contributions(breakdown) == pytest.approx(
        {"case_study": 32.0, "exams": 9.0, "practical_exercises": 31.5, "class_activities": 13.64}
    )
    assert sum(_contributions(breakdown).values()) == pytest.approx(86.14)


def test_breakdown_groups_include_other(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Doe"), sample_roster)
    assert [group.category_id for group in breakdown.groups][-1] == OTHER_ID
    other = breakdown.group(OTHER_ID)
    assert [item.column for item in other.items] == ["Reflection Essay"]
    assert other.items[0].tone == "high"
    assert other.weight == 0.0
    assert breakdown.contribution(OTHER_ID) is None


def test_category_score_column_wins_over_items(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Brown"), sample_roster)
    case_study = breakdown.contribution("case_study")
    assert case_study.source == "column"
    assert case_study.pct == pytest.approx(95.5)
    assert case_study.contribution == pytest.approx(38.2)

    exams = breakdown.contribution("exams")
    assert exams.pct is None
    assert exams.source is None
    assert exams.contribution is None

    assert breakdown.computed_sum == pytest.approx(88.2)
    assert breakdown.contribution("class_activities").contribution == pytest.approx(16.8)
    assert breakdown.displayed_sum == pytest.approx(90.0)


def test_failing_student_breakdown(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Smith"), sample_roster)
    assert breakdown.computed_sum == pytest.approx(41.0)
    assert _contributions(breakdown) == pytest.approx(
        {"case_study": 16.0, "exams": 5.0, "practical_exercises": 14.0, "class_activities": 8.0}
    )


def test_no_contributions_falls_back_to_computed_sum():
    roster = build_roster(read_table("LastName,FirstName,ID,Quiz 1,Final Score\nPoints Possible,,,10,\nDoe,Jane,1,,88.5\n"))
    breakdown = compute_breakdown(roster.records[0], roster)
    assert breakdown.final_score == 88.5
    assert not breakdown.reconciled
    assert breakdown.displayed_sum == 0.0


def test_without_final_score_contributions_are_untouched():
    roster = build_roster(read_table("LastName,FirstName,ID,Quiz 1\nPoints Possible,,,10\nDoe,Jane,1,8\n"))
    breakdown = compute_breakdown(roster.records[0], roster)
    assert breakdown.final_score is None
    assert not breakdown.reconciled
    assert breakdown.displayed_sum == pytest.approx(12.0)
    assert breakdown.contribution("class_activities").contribution == pytest.approx(12.0)


def test_remainder_strategies():
    last = remainder_to_last([10.0, None, 19.5], 30.0)
    assert last[1] is None
    assert last[2] == pytest.approx(20.0)

    largest = remainder_to_largest([25.0, 5.0], 31.0)
    assert largest == pytest.approx([26.0, 5.0])

    assert remainder_to_last([None, None], 50.0) is None
    assert remainder_to_largest([], 50.0) is None


def test_largest_strategy_in_breakdown(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Doe"), sample_roster, reconciler=get_reconciler("largest"))
    assert breakdown.contribution("case_study").contribution == pytest.approx(33.64)
    assert breakdown.contribution("class_activities").contribution == pytest.approx(12.0)


def test_none_strategy_keeps_contributions(sample_roster, record_named):
    breakdown = compute_breakdown(record_named("Doe"), sample_roster, reconciler=get_reconciler("none"))
    assert breakdown.contribution("class_activities").contribution == pytest.approx(12.0)
    assert breakdown.displayed_sum == pytest.approx(86.14)


def test_unknown_strategy_raises():
    with pytest.raises(ValueError, match="Unknown reconciliation strategy"):
        get_reconciler("median")


def test_custom_categories(sample_roster, record_named):
    categories = (Category.build("labs", "Labs", 1, [r"\blab\b"]), Category.build("quizzes", "Quizzes", 1, [r"quiz"]))
    breakdown = compute_breakdown(record_named("Doe"), sample_roster, categories=categories, reconciler=get_reconciler("none"))
    assert [group.category_id for group in breakdown.groups] == ["labs", "quizzes", OTHER_ID]
    assert breakdown.contribution("labs").weight == pytest.approx(50.0)
    assert breakdown.computed_sum == pytest.approx(45.0 + 40.0)
    assert len(breakdown.group(OTHER_ID).items) == 3
