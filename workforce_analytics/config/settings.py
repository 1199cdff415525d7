from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    supabase_url: str = ""
    supabase_key: str = ""
    cache_ttl_seconds: float = 30.0
    cache_max_entries: int = 100
    debounce_seconds: float = 0.25
    auto_refresh_seconds: float = 30.0
    single_date_lookback_days: int = 30
    fetch_timeout_seconds: float = 30.0

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
