from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_prefix": "EXPENSE_TRACKER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    log_level: str = "INFO"
    mock_seed: int | None = None
    mock_expense_count: int = Field(default=50, ge=0)
    mock_history_days: int = Field(default=30, ge=1)
    seed_path: str | None = None
    currency_symbol: str = "$"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("seed_path", mode="before")
    @classmethod
    def empty_seed_path(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def get_settings() -> Settings:
    return Settings()


settings = get_settings()
