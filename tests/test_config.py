from pathlib import Path

from shelf.config import Settings, _env_bool


def test_data_paths_join_directory():
    s = Settings(data_dir="/srv/library", items_file="books.csv", members_file="people.csv")
    assert s.items_path == Path("/srv/library/books.csv")
    assert s.members_path == Path("/srv/library/people.csv")


def test_env_bool(monkeypatch):
    monkeypatch.setenv("SHELF_TEST_FLAG", "No")
    assert _env_bool("SHELF_TEST_FLAG", "true") is False
    monkeypatch.setenv("SHELF_TEST_FLAG", "yes")
    assert _env_bool("SHELF_TEST_FLAG", "false") is True
    monkeypatch.delenv("SHELF_TEST_FLAG")
    assert _env_bool("SHELF_TEST_FLAG", "true") is True
