import os
from dataclasses import dataclass
from dotenv import load_dotenv

from candle_search.utils.logger import get_logger


_REQUIRED = ("TRIEVE_API_URL", "TRIEVE_API_KEY", "TRIEVE_DATASET_ID", "TRIEVE_ORG_ID")


@dataclass
class Settings:
    trieve_api_url: str
    trieve_api_key: str
    trieve_dataset_id: str
    trieve_org_id: str
    page_size: int = 20
    bulk_search_enabled: bool = True
    bulk_default_limit: int = 3
    request_timeout: float | None = 30.0


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        get_logger("config").warning(f"{name}={raw!r} is not an integer, using {default}")
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        get_logger("config").warning(f"{name}={raw!r} is not a number, using {default}")
        return default


def load_settings() -> Settings:
    load_dotenv()
    logger = get_logger("config")

    # Missing credentials surface as remote auth failures, not here
    for name in _REQUIRED:
        if not os.getenv(name):
            logger.warning(f"{name} is not set; Trieve requests will likely fail")

    page_size = _env_int("PAGE_SIZE", 20)
    bulk_limit = _env_int("BULK_DEFAULT_LIMIT", 3)
    timeout = _env_float("REQUEST_TIMEOUT", 30.0)
    bulk_enabled = os.getenv("BULK_SEARCH_ENABLED", "1").strip().lower() in {"1", "true", "yes", "on"}

    return Settings(
        trieve_api_url=os.getenv("TRIEVE_API_URL", "").rstrip("/"),
        trieve_api_key=os.getenv("TRIEVE_API_KEY", ""),
        trieve_dataset_id=os.getenv("TRIEVE_DATASET_ID", ""),
        trieve_org_id=os.getenv("TRIEVE_ORG_ID", ""),
        page_size=page_size,
        bulk_search_enabled=bulk_enabled,
        bulk_default_limit=bulk_limit,
        request_timeout=timeout if timeout > 0 else None,
    )
