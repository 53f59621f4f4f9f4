# tests/conftest.py
import pytest

from nodian.config.loader import reset_config_cache


@pytest.fixture(autouse=True)
def isolated_user_dirs(tmp_path, monkeypatch):
    # Keep config and log files out of the real user profile
    user_dir = tmp_path / "userdata"
    monkeypatch.setenv("XDG_DATA_HOME", str(user_dir))
    monkeypatch.setenv("APPDATA", str(user_dir))
    reset_config_cache()
    yield user_dir
    reset_config_cache()
