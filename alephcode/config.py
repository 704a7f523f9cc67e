from __future__ import annotations

import os

_TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in _TRUE_VALUES


def _env_int(name: str, default: int) -> int:
    """
    Integer env var; empty or missing values fall back to `default`.
    """
    raw = os.getenv(name)
    if not raw:
        return default
    return int(raw.replace("_", ""))


class Config:
    API_TITLE = "Aleph Code API"
    API_VERSION = "v1"
    OPENAPI_VERSION = "3.0.3"
    OPENAPI_URL_PREFIX = "/"
    OPENAPI_SWAGGER_UI_PATH = "/swagger-ui"
    OPENAPI_SWAGGER_UI_URL = "https://cdn.jsdelivr.net/npm/swagger-ui-dist/"

    DEFAULT_MODE = os.getenv("ALEPH_DEFAULT_MODE", "aleph-zero")

    WORD_CACHE_SIZE = _env_int("ALEPH_WORD_CACHE_SIZE", 50_000)
    LETTER_DETAILS_CACHE_SIZE = _env_int("ALEPH_LETTER_DETAILS_CACHE_SIZE", 100_000)
    SIEVE_CAP = _env_int("ALEPH_SIEVE_CAP", 20_000_000)

    # Compute analyses in a background process; set to false to compute inline.
    USE_WORKER_PROCESS = _env_bool("ALEPH_USE_WORKER_PROCESS", "true")
    ANALYSIS_TIMEOUT = float(os.getenv("ALEPH_ANALYSIS_TIMEOUT", "30"))

    LAYOUT_MAX_TICKS = _env_int("ALEPH_LAYOUT_MAX_TICKS", 600)

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
