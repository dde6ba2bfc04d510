"""Tests for application discovery."""

import pytest

from unloader.core.app import AppContext, find_app
from unloader.core.exceptions import UsageError


class TestFindApp:
    """Tests for find_app."""

    def test_finds_app_from_subdirectory(self, app_dir):
        nested = app_dir / "udf" / "lib"
        nested.mkdir(parents=True)
        app = find_app(start=nested)
        assert app == AppContext(root=app_dir.resolve())

    def test_no_app(self, temp_dir):
        assert find_app(start=temp_dir) is None

    def test_explicit_app_home(self, app_dir, temp_dir):
        app = find_app(start=temp_dir, app_home=str(app_dir))
        assert app.root == app_dir.resolve()

    def test_explicit_app_home_must_exist(self, temp_dir):
        with pytest.raises(UsageError):
            find_app(app_home=str(temp_dir / "missing"))


class TestAppContext:
    """Tests for AppContext properties."""

    def test_compiled(self, app_dir):
        assert AppContext(root=app_dir).is_compiled

    def test_not_compiled(self, temp_dir):
        assert not AppContext(root=temp_dir).is_compiled

    def test_database_url(self, app_dir):
        assert AppContext(root=app_dir).database_url.startswith("duckdb:///")

    def test_missing_database_url(self, temp_dir):
        assert AppContext(root=temp_dir).database_url is None

    def test_blank_database_url(self, temp_dir):
        (temp_dir / "db.url").write_text("\n")
        assert AppContext(root=temp_dir).database_url is None
