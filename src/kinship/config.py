from __future__ import annotations

import os
from dataclasses import dataclass, field

SUPPORTED_LOCALES = ("en", "ru")


def _i(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


def _b(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return default


def _s(name: str, default: str, choices: tuple[str, ...] | None = None) -> str:
    value = os.getenv(name, default).strip()
    if choices and value not in choices:
        return default
    return value or default


@dataclass(frozen=True)
class KinshipConfig:
    db_path: str = field(default_factory=lambda: _s("KINSHIP_DB_PATH", "./data/kinship.db"))
    locale: str = field(default_factory=lambda: _s("KINSHIP_LOCALE", "en", SUPPORTED_LOCALES))

    # Traversal bounds
    max_visited: int = field(default_factory=lambda: _i("KINSHIP_MAX_VISITED", 100_000))
    fetch_concurrency: int = field(default_factory=lambda: max(1, _i("KINSHIP_FETCH_CONCURRENCY", 8)))
    parallel_fetch: bool = field(default_factory=lambda: _b("KINSHIP_PARALLEL_FETCH", True))

    # 0 disables memoization of all_relatives
    cache_size: int = field(default_factory=lambda: max(0, _i("KINSHIP_CACHE_SIZE", 128)))

    log_level: str = field(
        default_factory=lambda: _s(
            "KINSHIP_LOG_LEVEL", "INFO", ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        )
    )


def load_config() -> KinshipConfig:
    """Read configuration from the current environment."""
    return KinshipConfig()
