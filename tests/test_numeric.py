import math

import pytest

from gradebook_viewer.numeric import first_numeric, first_present, is_numeric, round_half_up, to_number


@pytest.mark.parametrize("value", ["8", " 8.5 ", "-3", "+2.", ".5", "1e3", 0, 12.25])
def test_is_numeric_accepts_decimal_literals(value):
    assert is_numeric(value)


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "(read only)", "1,000", "0x10", "nan", "inf", True, float("nan"), math.inf])
def test_is_numeric_rejects_everything_else(value):
    assert not is_numeric(value)


def test_to_number_trims_and_never_raises():
    assert to_number(" 42 ") == 42.0
    assert to_number("EX") is None
    assert to_number(None) is None
    assert to_number(7) == 7.0


def test_round_half_up_rounds_halves_up():
    assert round_half_up(2.5, places=0) == 3.0
    assert round_half_up(-1.234) == -1.23
    assert round_half_up(13.64) == 13.64
    assert round_half_up(0.125, places=2) == 0.13


def test_first_present_counts_empty_string_as_present():
    values = {"Unposted Final Grade": "", "Final Grade": "3.0"}
    assert first_present(values, ["Unposted Final Grade", "Final Grade"]) == ""
    assert first_present(values, ["Missing", "Final Grade"]) == "3.0"
    assert first_present(values, ["Missing"]) is None


def test_first_numeric_skips_blank_cells():
    values = {"A": "", "B": "n/a", "C": "91.5"}
    assert first_numeric(values, ["A", "B", "C"]) == 91.5
    assert first_numeric(values, ["A", "B"]) is None
