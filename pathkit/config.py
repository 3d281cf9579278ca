from __future__ import annotations

import logging

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix='PATHKIT_', env_file='.env', env_file_encoding='utf-8', extra='ignore')

    hidden_prefix: str = Field(default='.', min_length=1)
    log_level: str = 'info'


settings = Settings()


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
