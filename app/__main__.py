import argparse
import os
import sys
from pathlib import Path
from typing import Iterable, Optional

from streamlit.web import cli as stcli

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT / "src") not in sys.path:
    sys.path.insert(0, str(ROOT / "src"))

from gradebook_viewer.aggregation import RECONCILERS  # noqa: E402


def main(argv: Optional[Iterable[str]] = None) -> None:
    """Launch the viewer via `python -m app [--source grades.csv]`."""
    parser = argparse.ArgumentParser(description="Browse a gradebook CSV export")
    parser.add_argument("--source", help="Path or URL of the gradebook CSV (defaults to GRADEBOOK_SOURCE or the sample)")
    parser.add_argument("--reconcile", choices=sorted(RECONCILERS), help="Rounding reconciliation strategy")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.source:
        os.environ["GRADEBOOK_SOURCE"] = args.source
    if args.reconcile:
        os.environ["GRADEBOOK_RECONCILE"] = args.reconcile

    script = Path(__file__).resolve().parent / "app.py"
    sys.argv = ["streamlit", "run", str(script)]
    stcli.main()


if __name__ == "__main__":
    main()
