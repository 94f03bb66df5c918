from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', frozen=True)

    app_name: str = 'Local Cloud'
    app_version: str = '0.1.0'
    app_host: str = 'localhost'
    app_port: int = 58080
    cloud_root: str = '.'
    log_level: str = 'info'
    log_json: bool = True
    cors_origins: str = ''


settings = Settings()
