import json

import pytest

from gradebook_viewer.categories import (
    DEFAULT_CATEGORIES,
    OTHER_ID,
    Category,
    category_ids,
    classify_column,
    group_columns,
    load_category_config,
    normalized_weights,
    save_category_config,
)


@pytest.mark.parametrize(
    "column, expected",
    [
        ("Case Study Final", "case_study"),
        ("CaseStudy Draft", "case_study"),
        ("Midterm Exam", "exams"),
        ("Final Project", "exams"),
        ("Lab 1", "practical_exercises"),
        ("Practical Exercises 2", "practical_exercises"),
        ("Quiz 1", "class_activities"),
        ("Graded Discussion: Week 3", "class_activities"),
        ("Threat Model Worksheet", "class_activities"),
        ("Reflection Essay", OTHER_ID),
        ("Examination", OTHER_ID),
    ],
)
def test_classify_column(column, expected):
    assert classify_column(column) == expected


def test_classification_is_total_and_deterministic():
    columns = ["Quiz 1", "Lab 1", "Unknown", "Case Study Final", ""]
    first = [classify_column(column) for column in columns]
    assert first == [classify_column(column) for column in columns]
    assert set(first) <= set(category_ids())


def test_default_weights_sum_to_100():
    weights = normalized_weights()
    assert weights[OTHER_ID] == 0.0
    assert sum(weights.values()) == pytest.approx(100.0)
    assert weights["case_study"] == pytest.approx(40.0)


def test_weights_are_normalized():
    categories = (Category.build("a", "A", 1, ["a"]), Category.build("b", "B", 3, ["b"]))
    assert normalized_weights(categories) == {"a": 25.0, "b": 75.0, OTHER_ID: 0.0}


def test_zero_weights_stay_zero():
    categories = (Category.build("a", "A", 0, ["a"]),)
    assert normalized_weights(categories) == {"a": 0.0, OTHER_ID: 0.0}


def test_group_columns_keeps_every_bucket(sample_roster):
    groups = group_columns(sample_roster.assignment_columns)
    assert list(groups) == category_ids()
    assert groups["case_study"] == ["Case Study Final"]
    assert groups["exams"] == ["Midterm Exam"]
    assert groups[OTHER_ID] == ["Reflection Essay"]


def test_category_config_roundtrip(tmp_path):
    path = save_category_config(DEFAULT_CATEGORIES, tmp_path / "config" / "categories.json")
    loaded = load_category_config(path)
    assert [category.to_dict() for category in loaded] == [category.to_dict() for category in DEFAULT_CATEGORIES]


def test_missing_config_file_uses_defaults(tmp_path):
    assert load_category_config(tmp_path / "nope.json") is DEFAULT_CATEGORIES


@pytest.mark.parametrize(
    "payload",
    [
        [],
        {"id": "a"},
        [{"id": "a", "name": "A", "weight": 10}],
        [{"id": "a", "name": "A", "weight": -1, "patterns": ["a"]}],
        [{"id": "a", "name": "A", "weight": 10, "patterns": []}],
        [{"id": "a", "name": "A", "weight": 10, "patterns": ["("]}],
        [{"id": "other", "name": "Other", "weight": 10, "patterns": ["x"]}],
        [{"id": "a", "name": "A", "weight": 1, "patterns": ["a"]}, {"id": "a", "name": "B", "weight": 1, "patterns": ["b"]}],
    ],
)
def test_invalid_category_config_raises(tmp_path, payload):
    path = tmp_path / "categories.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    with pytest.raises(ValueError):
        load_category_config(path)
