import os
import sys

import pytest

import app.__main__ as launcher


@pytest.fixture()
def no_streamlit(monkeypatch):
    calls = []
    monkeypatch.setattr(launcher.stcli, "main", lambda: calls.append(list(sys.argv)))
    monkeypatch.setattr(sys, "argv", ["python"])
    monkeypatch.setenv("GRADEBOOK_SOURCE", "")
    monkeypatch.setenv("GRADEBOOK_RECONCILE", "last")
    return calls


def test_launcher_exports_options(no_streamlit):
    launcher.main(["--source", "grades.csv", "--reconcile", "largest"])
    assert os.environ["GRADEBOOK_SOURCE"] == "grades.csv"
    assert os.environ["GRADEBOOK_RECONCILE"] == "largest"
    assert no_streamlit[0][:2] == ["streamlit", "run"]


def test_launcher_offers_every_strategy(monkeypatch, no_streamlit):
    monkeypatch.setitem(launcher.RECONCILERS, "median", launcher.RECONCILERS["none"])
    launcher.main(["--reconcile", "median"])
    assert os.environ["GRADEBOOK_RECONCILE"] == "median"


def test_launcher_rejects_unknown_strategy(no_streamlit):
    with pytest.raises(SystemExit):
        launcher.main(["--reconcile", "average"])
