from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", case_sensitive=False)

    app_name: str = Field(default="fittrack", validation_alias="APP_NAME")

    db_path: str = Field(default="data/fittrack.sqlite3", validation_alias="DB_PATH")
    database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
    # SQL echo for local debugging
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")

    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=8000, validation_alias="PORT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    cors_origins: str = Field(default="*", validation_alias="CORS_ORIGINS")

    default_page_limit: int = Field(default=20, validation_alias="DEFAULT_PAGE_LIMIT")
    max_page_limit: int = Field(default=100, validation_alias="MAX_PAGE_LIMIT")

    # body weight the calorie-rate table is calibrated for, and the fallback when a user has none on file
    reference_weight_kg: float = Field(default=70.0, validation_alias="REFERENCE_WEIGHT_KG")

    @property
    def cors_origin_list(self) -> list[str]:
        return [x.strip() for x in self.cors_origins.split(",") if x.strip()]


settings = Settings()
