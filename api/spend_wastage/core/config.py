from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "spend-wastage-engine"
    environment: str = "dev"
    upstream_base_url: str = "http://localhost:8000"
    upstream_token: str | None = None
    upstream_timeout_seconds: float = 10.0
    unknown_client_label: str = "Unknown Client"
    otel_enabled: bool = True
    otel_service_name: str = "spend-wastage-engine"
    otel_exporter_otlp_endpoint: str | None = None
    otel_exporter_otlp_headers: str | None = None
    otel_trace_sample_ratio: float = 1.0
    otel_log_correlation: bool = True

    model_config = SettingsConfigDict(env_prefix="SWE_", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
