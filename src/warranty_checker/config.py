"""Runtime settings for the warranty resolution engine.

All tunables live on a single frozen dataclass. Defaults match the vendor's
observed tolerances; every field can be overridden through a
``WARRANTY_CHECKER_<FIELD>`` environment variable via ``from_env()``.
"""

import logging
import os
from dataclasses import dataclass, fields
from typing import Optional

logger = logging.getLogger(__name__)

ENV_PREFIX = "WARRANTY_CHECKER_"

_FALSE_VALUES = {"0", "false", "no", "off"}

DEFAULT_BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _as_bool(value: Optional[str], default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_VALUES


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-integer value for %s: %r", name, raw)
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        logger.warning("Ignoring non-numeric value for %s: %r", name, raw)
        return default


@dataclass(frozen=True)
class WarrantySettings:
    """Tunable constants for lookups, scraping, caching and batching.

    Attributes:
        api_url: Structured warranty endpoint (HTTP POST).
        lookup_url: Human-facing warranty lookup page used for scraping.
        cache_ttl_seconds: Lifetime of a cached record.
        api_timeout_seconds: Total timeout for the structured request.
        navigation_timeout_ms: Page navigation timeout for the scraper.
        element_timeout_ms: Timeout waiting for the serial input field.
        settle_delay_ms: Fixed delay after submitting the lookup form.
        chunk_size: Number of serials resolved concurrently per chunk.
        chunk_delay_seconds: Pause enforced between consecutive chunks.
        max_batch_size: Largest batch accepted by the engine.
        expiring_soon_days: Upper bound (inclusive) for "Expiring Soon".
        headless: Run Chromium without a visible window.
        user_agent: User agent presented by scraper pages.
        api_user_agent: User agent sent to the structured endpoint.
    """

    api_url: str = "https://api.lenovo.com/warranty/check"
    lookup_url: str = "https://pcsupport.lenovo.com/us/en/warrantylookup"
    cache_ttl_seconds: int = 3600
    api_timeout_seconds: float = 10.0
    navigation_timeout_ms: int = 30_000
    element_timeout_ms: int = 10_000
    settle_delay_ms: int = 3_000
    chunk_size: int = 10
    chunk_delay_seconds: float = 2.0
    max_batch_size: int = 50
    expiring_soon_days: int = 30
    headless: bool = True
    user_agent: str = DEFAULT_BROWSER_USER_AGENT
    api_user_agent: str = "LenovoWarrantyChecker/1.0"

    @classmethod
    def from_env(cls, **overrides) -> "WarrantySettings":
        """Build settings from ``WARRANTY_CHECKER_*`` environment variables.

        Malformed values are logged and fall back to the default. Keyword
        overrides take precedence over the environment.

        Args:
            **overrides: Explicit field values (e.g. from CLI flags).

        Returns:
            A populated WarrantySettings instance.
        """
        values = {}
        for f in fields(cls):
            env_name = ENV_PREFIX + f.name.upper()
            if f.type in (bool, "bool"):
                values[f.name] = _as_bool(os.getenv(env_name), f.default)
            elif f.type in (int, "int"):
                values[f.name] = _env_int(env_name, f.default)
            elif f.type in (float, "float"):
                values[f.name] = _env_float(env_name, f.default)
            else:
                values[f.name] = os.getenv(env_name, f.default)
        values.update(overrides)
        return cls(**values)
