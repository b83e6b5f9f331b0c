import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(
        self,
        database_url: str,
        timezone: str,
        log_level: str,
        seed_defaults: bool,
    ) -> None:
        self.database_url = database_url
        self.timezone = timezone
        self.log_level = log_level
        self.seed_defaults = seed_defaults


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("WALLETBOOK_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes", "on"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "walletbook.db"
    database_url = os.getenv("WALLETBOOK_DATABASE_URL", f"sqlite:///{default_db}")
    timezone = os.getenv("WALLETBOOK_TIMEZONE", "Asia/Jakarta")
    log_level = os.getenv("WALLETBOOK_LOG_LEVEL", "INFO").upper()
    seed_defaults = _env_flag("WALLETBOOK_SEED_DEFAULTS", "1")
    return Settings(
        database_url=database_url,
        timezone=timezone,
        log_level=log_level,
        seed_defaults=seed_defaults,
    )
