import runpy
from pathlib import Path

import pytest
from decouple import UndefinedValueError

pytestmark = pytest.mark.unit

SETTINGS_FILE = Path(__file__).resolve().parents[2] / "src" / "config" / "settings.py"


class TestRequiredSettings:
    def test_missing_secret_key_fails_fast(self, monkeypatch):
        monkeypatch.delenv("SECRET_KEY", raising=False)

        with pytest.raises(UndefinedValueError, match="SECRET_KEY"):
            runpy.run_path(str(SETTINGS_FILE))

    def test_missing_database_url_fails_fast(self, monkeypatch):
        monkeypatch.setenv("SECRET_KEY", "configured")
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(UndefinedValueError, match="DATABASE_URL"):
            runpy.run_path(str(SETTINGS_FILE))
