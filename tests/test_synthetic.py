from pathlib import Path

from gradebook_viewer.index import build_student_index
from gradebook_viewer.roster import load_roster
from tools.generate_synthetic import ASSIGNMENTS, generate_synthetic_gradebook


def test_generate_synthetic_gradebook_loads_cleanly(tmp_path: Path):
    output = tmp_path / "synthetic.csv"
    result = generate_synthetic_gradebook(output, n_students=12, seed=123, n_duplicates=2)

    assert output.exists()
    # points row, test student, repeated header and header echo on top of the students
    assert len(result) == 12 + 4 + 2

    roster = load_roster(output)
    assert len(roster) == 12
    assert roster.duplicates_dropped == 2
    assert roster.rows_filtered == 4
    assert roster.assignment_columns == list(ASSIGNMENTS)
    assert len(build_student_index(roster)) == 12


def test_generate_synthetic_gradebook_is_seeded(tmp_path: Path):
    first = generate_synthetic_gradebook(tmp_path / "a.csv", n_students=5, seed=7)
    second = generate_synthetic_gradebook(tmp_path / "b.csv", n_students=5, seed=7)
    assert first.equals(second)
