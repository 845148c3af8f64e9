"""Application settings loaded from environment variables via pydantic-settings."""

from enum import StrEnum
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class LogFormat(StrEnum):
	json = "json"
	console = "console"


class Settings(BaseSettings):
	"""Central configuration — all values sourced from env vars or .env file."""

	model_config = SettingsConfigDict(
		env_file=".env",
		env_file_encoding="utf-8",
		case_sensitive=False,
	)

	# ── Redis ───────────────────────────────────────────────────────────────
	redis_url: str = "redis://localhost:6379/0"
	redis_enabled: bool = True
	observation_cache_ttl_seconds: int = 900

	# ── Upstream data sources ───────────────────────────────────────────────
	weather_archive_url: str = "https://archive-api.open-meteo.com/v1/archive"
	soil_forecast_url: str = "https://api.open-meteo.com/v1/forecast"
	upstream_timezone: str = "Africa/Harare"
	upstream_timeout_seconds: float = 20.0

	# ── LLM ─────────────────────────────────────────────────────────────────
	anthropic_api_key: str = ""
	anthropic_model: str = "claude-3-5-sonnet-20241022"
	anthropic_base_url: str = "https://api.anthropic.com/v1/messages"
	anthropic_timeout_seconds: float = 15.0

	# ── Forecast defaults ───────────────────────────────────────────────────
	recent_anomaly_window_days: int = 30
	long_term_history_days: int = 365

	# ── Observability ───────────────────────────────────────────────────────
	log_level: str = "info"
	log_format: LogFormat = LogFormat.json


@lru_cache
def get_settings() -> Settings:
	"""Singleton settings instance (cached after first call)."""
	return Settings()
