import os
from dataclasses import dataclass
from typing import Optional


ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

DEFAULT_BASE_URL = "https://coloso.co.kr"
DEFAULT_USER_AGENT = "Lecture-Crawler/0.1"


def load_env_file(path: Optional[str] = None) -> None:
    """Load environment variables from a .env file at the project root if present.

    Only sets variables that aren't already present in the process environment.
    Avoids an external dependency on python-dotenv for this small use case.
    """
    env_path = path or os.path.join(ROOT_DIR, ".env")
    if not os.path.isfile(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as f:
        for line in f:
            s = line.strip()
            if not s or s.startswith("#"):
                continue
            if "=" not in s:
                continue
            key, val = s.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")
            if key and (key not in os.environ or not os.environ[key]):
                os.environ[key] = val


def get_neo4j_config():
    """Get Neo4j URI, user, and password, loading .env if necessary and applying defaults.

    Returns (uri, user, password). Raises a helpful RuntimeError when required values are missing.
    """
    load_env_file()

    uri = os.getenv("NEO4J_URI") or "bolt://localhost:7687"
    user = os.getenv("NEO4J_USER") or "neo4j"
    pwd = os.getenv("NEO4J_PASSWORD")

    if not pwd:
        raise RuntimeError(
            "NEO4J_PASSWORD is not set.\n"
            "Define it in your environment or in a .env file at the project root, e.g.\n"
            "NEO4J_URI=bolt://localhost:7687\nNEO4J_USER=neo4j\nNEO4J_PASSWORD=your_password"
        )
    return uri, user, pwd


@dataclass
class CrawlSettings:
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 12.0
    user_agent: str = DEFAULT_USER_AGENT
    workers: int = 1  # 1 = fully sequential
    log_level: str = "INFO"
    out_dir: str = os.path.join(ROOT_DIR, "data", "scraped", "lectures")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be an integer, got {raw!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{name} must be a number, got {raw!r}")


def get_crawl_settings() -> CrawlSettings:
    """Read crawler settings from the environment (and .env)."""
    load_env_file()
    defaults = CrawlSettings()
    return CrawlSettings(
        base_url=(os.getenv("COLOSO_BASE_URL") or defaults.base_url).rstrip("/"),
        timeout=_env_float("CRAWL_TIMEOUT", defaults.timeout),
        user_agent=os.getenv("CRAWL_USER_AGENT") or defaults.user_agent,
        workers=max(1, _env_int("CRAWL_WORKERS", defaults.workers)),
        log_level=os.getenv("CRAWL_LOG_LEVEL") or defaults.log_level,
        out_dir=os.getenv("CRAWL_OUT_DIR") or defaults.out_dir,
    )
