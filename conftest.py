import pytest

from shelf.config import settings
from shelf.library import Library


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # --output writes to the environment; keep it from leaking between tests
    monkeypatch.setenv("SHELF_OUTPUT", "plain")


@pytest.fixture
def lib():
    return Library(member_id_start=1001, loan_days=14)


@pytest.fixture
def data_paths(tmp_path):
    return tmp_path / "items.csv", tmp_path / "members.csv"


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    # Point the CLI at a per-test data directory
    monkeypatch.setattr(settings, "data_dir", str(tmp_path))
    monkeypatch.setattr(settings, "items_file", "items.csv")
    monkeypatch.setattr(settings, "members_file", "members.csv")
    monkeypatch.setattr(settings, "loan_days", 14)
    monkeypatch.setattr(settings, "member_id_start", 1001)
    monkeypatch.setattr(settings, "seed_defaults", True)
    return tmp_path
