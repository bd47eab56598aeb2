import os
import tempfile

import pytest

from app import config
from app.config import get_crawl_settings, get_neo4j_config, load_env_file


def _clear(monkeypatch):
    for k in ("COLOSO_BASE_URL", "CRAWL_TIMEOUT", "CRAWL_USER_AGENT", "CRAWL_WORKERS", "CRAWL_LOG_LEVEL", "CRAWL_OUT_DIR"):
        monkeypatch.delenv(k, raising=False)
    # keep a developer's local .env out of the picture
    monkeypatch.setattr(config, "ROOT_DIR", tempfile.gettempdir())


def test_crawl_settings_defaults(monkeypatch):
    _clear(monkeypatch)
    s = get_crawl_settings()
    assert s.base_url == "https://coloso.co.kr"
    assert s.workers == 1
    assert s.timeout == 12.0


def test_crawl_settings_from_env(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("COLOSO_BASE_URL", "https://mirror.test/")
    monkeypatch.setenv("CRAWL_WORKERS", "0")
    monkeypatch.setenv("CRAWL_TIMEOUT", "3.5")
    s = get_crawl_settings()
    assert s.base_url == "https://mirror.test"
    assert s.workers == 1
    assert s.timeout == 3.5


def test_crawl_settings_rejects_bad_numbers(monkeypatch):
    _clear(monkeypatch)
    monkeypatch.setenv("CRAWL_WORKERS", "many")
    with pytest.raises(RuntimeError):
        get_crawl_settings()


def test_load_env_file_does_not_override(monkeypatch):
    monkeypatch.setenv("CRAWL_USER_AGENT", "from-env")
    monkeypatch.delenv("CRAWL_LOG_LEVEL", raising=False)
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, ".env")
        with open(path, "w", encoding="utf-8") as f:
            f.write("# comment\nCRAWL_USER_AGENT=from-file\nCRAWL_LOG_LEVEL = 'DEBUG'\nnot a pair\n")
        load_env_file(path)
    assert os.environ["CRAWL_USER_AGENT"] == "from-env"
    assert os.environ["CRAWL_LOG_LEVEL"] == "DEBUG"


def test_neo4j_config_requires_password(monkeypatch):
    monkeypatch.setattr(config, "ROOT_DIR", tempfile.gettempdir())
    monkeypatch.delenv("NEO4J_PASSWORD", raising=False)
    with pytest.raises(RuntimeError):
        get_neo4j_config()
    monkeypatch.setenv("NEO4J_PASSWORD", "secret")
    assert get_neo4j_config()[2] == "secret"
