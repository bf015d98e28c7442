import pytest

from divtrack.domain.errors import ConfigurationError
from divtrack.infrastructure.config.settings import Settings


def test_defaults_from_empty_environment():
    settings = Settings.from_env({})
    assert settings.fmp_api_key is None
    assert settings.jwt_secret is None
    assert settings.database_url is None
    assert settings.market_data_provider == "fmp"
    assert settings.quote_cache_ttl == 60.0
    assert settings.dividend_cache_ttl == 3600.0
    assert settings.profile_cache_ttl == 3600.0


def test_reads_environment():
    settings = Settings.from_env(
        {
            "FMP_API_KEY": "k",
            "SUPABASE_JWT_SECRET": "s",
            "DATABASE_URL": "sqlite://",
            "DIVTRACK_MARKET_DATA_PROVIDER": "YFinance",
            "DIVTRACK_UPSTREAM_TIMEOUT_SECONDS": "2.5",
            "DIVTRACK_CACHE_MAXSIZE": "16",
            "DIVTRACK_LOG_LEVEL": "debug",
        }
    )
    assert settings.fmp_api_key == "k"
    assert settings.jwt_secret == "s"
    assert settings.market_data_provider == "yfinance"
    assert settings.upstream_timeout_seconds == 2.5
    assert settings.cache_maxsize == 16
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"DIVTRACK_MARKET_DATA_PROVIDER": "bloomberg"},
        {"DIVTRACK_QUOTE_CACHE_TTL": "soon"},
        {"DIVTRACK_UPSTREAM_TIMEOUT_SECONDS": "0"},
    ],
)
def test_bad_values_are_configuration_errors(env):
    with pytest.raises(ConfigurationError):
        Settings.from_env(env)
