"""
Runtime configuration read from the process environment.
Entrypoints call load_dotenv() (and optionally seed the environment from AWS
Secrets Manager) before Settings.from_env().

Missing FMP_API_KEY or SUPABASE_JWT_SECRET does not stop startup; the adapters
raise ConfigurationError when they are first needed.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from divtrack.domain.errors import ConfigurationError
from divtrack.infrastructure.market_data.fmp_adapter import DEFAULT_BASE_URL

PROVIDERS = ("fmp", "yfinance")


@dataclass(frozen=True)
class Settings:
    fmp_api_key: Optional[str] = None
    fmp_base_url: str = DEFAULT_BASE_URL
    jwt_secret: Optional[str] = None
    jwt_audience: Optional[str] = None
    database_url: Optional[str] = None
    market_data_provider: str = "fmp"
    upstream_timeout_seconds: float = 10.0
    quote_cache_ttl: float = 60.0
    dividend_cache_ttl: float = 3600.0
    profile_cache_ttl: float = 3600.0
    cache_maxsize: int = 1024
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        provider = env.get("DIVTRACK_MARKET_DATA_PROVIDER", "fmp").strip().lower()
        if provider not in PROVIDERS:
            raise ConfigurationError(
                f"DIVTRACK_MARKET_DATA_PROVIDER must be one of {PROVIDERS}, got {provider!r}"
            )
        return cls(
            fmp_api_key=env.get("FMP_API_KEY") or None,
            fmp_base_url=env.get("FMP_BASE_URL", DEFAULT_BASE_URL),
            jwt_secret=env.get("SUPABASE_JWT_SECRET") or None,
            jwt_audience=env.get("DIVTRACK_JWT_AUDIENCE") or None,
            database_url=env.get("DATABASE_URL") or None,
            market_data_provider=provider,
            upstream_timeout_seconds=_number(env, "DIVTRACK_UPSTREAM_TIMEOUT_SECONDS", 10.0),
            quote_cache_ttl=_number(env, "DIVTRACK_QUOTE_CACHE_TTL", 60.0),
            dividend_cache_ttl=_number(env, "DIVTRACK_DIVIDEND_CACHE_TTL", 3600.0),
            profile_cache_ttl=_number(env, "DIVTRACK_PROFILE_CACHE_TTL", 3600.0),
            cache_maxsize=int(_number(env, "DIVTRACK_CACHE_MAXSIZE", 1024)),
            log_level=env.get("DIVTRACK_LOG_LEVEL", "INFO").upper(),
        )


def _number(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {raw!r}")
    return value
