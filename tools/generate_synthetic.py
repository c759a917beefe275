#!/usr/bin/env python3
"""Generate a synthetic LMS gradebook export for demos.

Usage:
    python tools/generate_synthetic.py --output data/synthetic_gradebook.csv --students 80 --seed 42

The export looks like a real one: a points possible row, the LMS test student,
a repeated header line, a malformed row echoing the header, and a few students
exported twice. Final scores are the weighted category averages so the viewer
reconciles them without large remainders.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from gradebook_viewer.categories import DEFAULT_CATEGORIES, classify_column, normalized_weights  # noqa: E402

IDENTITY_COLS = ["LastName", "FirstName", "ID", "SIS User ID", "SIS Login ID", "Section"]
ASSIGNMENTS = {
    "Quiz 1": 10,
    "Quiz 2": 10,
    "Graded Discussion 1": 5,
    "Lab 1": 50,
    "Lab 2": 50,
    "Practical Exercise 3": 20,
    "Midterm Exam": 100,
    "Final Exam": 100,
    "Case Study Draft": 50,
    "Case Study Final": 100,
}
SUMMARY_COLS = ["Current Score", "Unposted Current Score", "Final Score", "Unposted Final Score", "Final Grade", "Unposted Final Grade"]
SECTIONS = ["S1", "S2", "S3"]

LAST_NAMES = ["Garcia", "Nguyen", "Smith", "Okafor", "Kowalski", "Tanaka", "Haddad", "Brown", "Silva", "Ivanova", "Murphy", "Chen"]
FIRST_NAMES = ["Ana", "Ben", "Chloe", "Dev", "Eli", "Fatima", "Gus", "Hana", "Ivan", "Jo", "Kai", "Lena"]


def _grade_points(score: float) -> float:
    for threshold, grade in ((90, 4.0), (80, 3.0), (70, 2.0), (60, 1.0)):
        if score >= threshold:
            return grade
    return 0.0


def _final_score(scores: Dict[str, str]) -> float:
    weights = normalized_weights(DEFAULT_CATEGORIES)
    pcts: Dict[str, List[float]] = {}
    for column, max_points in ASSIGNMENTS.items():
        if scores[column] == "":
            continue
        pcts.setdefault(classify_column(column), []).append(float(scores[column]) / max_points * 100)
    return sum(np.mean(values) * weights.get(cat, 0.0) / 100 for cat, values in pcts.items())


def _student_row(rng: np.random.Generator, idx: int, ability: float) -> Dict[str, str]:
    last = str(rng.choice(LAST_NAMES))
    first = str(rng.choice(FIRST_NAMES))
    row = {
        "LastName": last,
        "FirstName": first,
        "ID": str(1000 + idx),
        "SIS User ID": f"SIS-{1000 + idx}",
        "SIS Login ID": f"{first[0].lower()}{last.lower()}{idx}",
        "Section": str(rng.choice(SECTIONS)),
    }
    for column, max_points in ASSIGNMENTS.items():
        # missing submissions stay blank in the export
        if rng.random() < 0.05:
            row[column] = ""
            continue
        fraction = float(np.clip(rng.normal(ability, 0.1), 0.0, 1.0))
        row[column] = f"{round(fraction * max_points * 2) / 2:g}"

    final = _final_score(row)
    row["Current Score"] = row["Unposted Current Score"] = f"{final:.2f}"
    row["Final Score"] = row["Unposted Final Score"] = f"{final:.2f}"
    row["Final Grade"] = row["Unposted Final Grade"] = f"{_grade_points(final):.1f}"
    return row


def generate_synthetic_gradebook(
    output_path: Path,
    n_students: int = 80,
    seed: int = 42,
    n_duplicates: int = 3,
) -> pd.DataFrame:
    if n_students < 1:
        raise ValueError("n_students must be at least 1")
    rng = np.random.default_rng(seed)
    columns = IDENTITY_COLS + list(ASSIGNMENTS) + SUMMARY_COLS

    points_row = {col: "" for col in columns}
    points_row["LastName"] = "    Points Possible"
    points_row.update({col: str(max_points) for col, max_points in ASSIGNMENTS.items()})
    points_row.update({col: "(read only)" for col in SUMMARY_COLS})

    abilities = np.clip(rng.normal(0.78, 0.12, size=n_students), 0.2, 1.0)
    students = [_student_row(rng, idx, float(ability)) for idx, ability in enumerate(abilities, start=1)]

    test_student = _student_row(rng, 9999, 0.5)
    test_student.update({"LastName": "Student", "FirstName": "Test", "SIS User ID": "", "SIS Login ID": "test.student"})

    header_repeat = {col: col for col in columns}
    header_echo = {col: "" for col in columns}
    header_echo.update({"LastName": "Roster", "FirstName": "Export", "Section": "Section", "Quiz 1": "Quiz 1", "Lab 1": "Lab 1"})

    # Re-exported students carry stale scores; the first occurrence is the real one.
    duplicates = []
    for idx in rng.choice(n_students, size=min(n_duplicates, n_students), replace=False):
        stale = dict(students[int(idx)])
        stale.update({col: "0" for col in ASSIGNMENTS})
        duplicates.append(stale)

    middle = len(students) // 2
    rows = [points_row, test_student] + students[:middle] + [header_repeat] + students[middle:] + [header_echo] + duplicates

    result = pd.DataFrame(rows, columns=columns)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    result.to_csv(output_path, index=False)
    return result


def main(argv: Iterable[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Generate a synthetic gradebook export for demos")
    parser.add_argument("--output", type=Path, default=Path("data/synthetic_gradebook.csv"), help="Where to write the export CSV")
    parser.add_argument("--students", type=int, default=80, help="Number of synthetic students")
    parser.add_argument("--duplicates", type=int, default=3, help="Students exported twice")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    args = parser.parse_args(list(argv) if argv is not None else None)

    generate_synthetic_gradebook(args.output, n_students=args.students, seed=args.seed, n_duplicates=args.duplicates)
    print(f"Synthetic gradebook written to {args.output}")


if __name__ == "__main__":
    main()
