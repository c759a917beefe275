from gradebook_viewer import invariants
from gradebook_viewer.io import read_table
from gradebook_viewer.roster import build_roster


def _result(results, name):
    return next(res for res in results if res["name"] == name)


def test_run_invariants_on_sample(sample_roster):
    results = invariants.run_invariants(sample_roster)
    assert [res["name"] for res in results] == [
        "identity_columns",
        "points_possible_row",
        "assignment_columns",
        "duplicate_rows",
        "missing_maxima",
    ]
    assert _result(results, "assignment_columns")["detail"] == 5
    duplicates = _result(results, "duplicate_rows")
    assert duplicates["ok"] is False
    assert duplicates["detail"] == 1
    assert _result(results, "missing_maxima")["detail"] == 5


def test_run_invariants_flags_missing_points_row():
    roster = build_roster(read_table("LastName,FirstName,ID,Quiz 1\nDoe,Jane,1,8\n"))
    results = invariants.run_invariants(roster)
    assert _result(results, "points_possible_row")["ok"] is False
    assert _result(results, "assignment_columns")["ok"] is False
    assert _result(results, "duplicate_rows")["ok"] is True


def test_run_invariants_flags_missing_names():
    roster = build_roster(read_table("Student,ID\nDoe,1\n"))
    identity = _result(invariants.run_invariants(roster), "identity_columns")
    assert identity["ok"] is False
    assert identity["detail"] == "LastName, FirstName"
