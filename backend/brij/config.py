import os
from pathlib import Path

from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"

DEFAULT_DATABASE_URL = "sqlite:///./brij.db"
DEFAULT_MAX_RULE_DEPTH = 64


def load_env(path: str | Path | None = None) -> bool:
    return load_dotenv(path or ENV_PATH, override=False)


def database_url() -> str:
    return os.getenv("BRIJ_DATABASE_URL", DEFAULT_DATABASE_URL)


def max_rule_depth() -> int:
    raw = os.getenv("BRIJ_MAX_RULE_DEPTH", "")
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_MAX_RULE_DEPTH
    return value if value > 0 else DEFAULT_MAX_RULE_DEPTH
