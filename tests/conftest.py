import pytest

from app.sample_data import load_sample_roster, load_sample_text
from gradebook_viewer.index import build_student_index
from gradebook_viewer.io import read_table


@pytest.fixture()
def sample_text():
    return load_sample_text()


@pytest.fixture()
def sample_table():
    return read_table(load_sample_text())


@pytest.fixture()
def sample_roster():
    return load_sample_roster()


@pytest.fixture()
def sample_index(sample_roster):
    return build_student_index(sample_roster)


@pytest.fixture()
def sample_csv_path(tmp_path):
    file_path = tmp_path / "gradebook.csv"
    file_path.write_text(load_sample_text(), encoding="utf-8")
    return file_path


@pytest.fixture()
def record_named(sample_roster):
    def _lookup(last_name):
        return next(record for record in sample_roster.records if record.last_name == last_name)

    return _lookup
