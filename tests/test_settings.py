from pathlib import Path

from app.settings import Settings, choose_env_file


def test_database_url_uses_environment():
    s = Settings(DATABASE_PATH="/var/lib/posts/stable.db")
    assert s.database_url == "sqlite:////var/lib/posts/stable.db"


def test_database_url_supports_in_memory():
    assert Settings(DATABASE_PATH=":memory:").database_url == "sqlite://"


def test_store_defaults_are_unbounded_memory_zero():
    s = Settings()
    assert s.STORE_MAX_ENTRIES == 0
    assert s.POSTS_MEMORY_ID == 0


def test_settings_read_env_vars(monkeypatch):
    monkeypatch.setenv("STORE_MAX_ENTRIES", "10")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    s = Settings()

    assert s.STORE_MAX_ENTRIES == 10
    assert s.LOG_LEVEL == "DEBUG"


def test_choose_env_file_prefers_env_local(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: str(self) == ".env.local")
    assert choose_env_file() == ".env.local"


def test_choose_env_file_falls_back(monkeypatch):
    monkeypatch.setattr(Path, "exists", lambda self: False)
    assert choose_env_file() == ".env"
