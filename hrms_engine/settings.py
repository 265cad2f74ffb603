from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "HrmsEngine"
    company_timezone: str = "Asia/Kolkata"
    min_normal_seconds: int = 8 * 3600 + 15 * 60
    max_normal_seconds: int = 8 * 3600 + 30 * 60
    half_day_leave_hours: float = 4.0
    extra_time_fallback_hours_per_day: float = 8.25
    extra_time_leave_marker: str = "[Extra Time Leave]"
    default_paid_leave_allocation: float = 12.0
    log_level: str = "INFO"
    log_json: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="HRMS_",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def get_company_timezone_name() -> str:
    raw = (get_settings().company_timezone or "").strip()
    return raw or "Asia/Kolkata"


def get_normal_band_seconds() -> tuple[int, int]:
    settings = get_settings()
    low = max(0, settings.min_normal_seconds)
    high = max(low, settings.max_normal_seconds)
    return low, high
