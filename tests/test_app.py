"""Tests for the Streamlit front end, run headless with AppTest."""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from fiado.config import get_settings


APP_FILE = Path(__file__).resolve().parents[1] / "app" / "main.py"


@pytest.fixture
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path))
    get_settings.cache_clear()
    at = AppTest.from_file(str(APP_FILE), default_timeout=30)
    yield at
    get_settings.cache_clear()


class TestFlashMessages:

    def test_confirmation_survives_one_rerun(self, app):
        """Test a queued confirmation is shown once, then cleared."""
        app.session_state["flash"] = "Cliente cadastrado!"

        app.run()
        assert not app.exception
        assert [s.value for s in app.success] == ["Cliente cadastrado!"]

        app.run()
        assert not app.success

    def test_no_confirmation_by_default(self, app):
        app.run()
        assert not app.exception
        assert not app.success


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
