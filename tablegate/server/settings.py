from functools import cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """A BaseSettings object defining configuration for the tablegate instance.
    For loading variables from the environment, prefix with TABLEGATE_ and see:
    https://docs.pydantic.dev/latest/concepts/pydantic_settings/#parsing-environment-variable-values
    """

    allow_origins: List[str] = Field(default_factory=list)
    # Schema documents are small. Refuse request bodies larger than this.
    request_bytesize_limit: int = 1_000_000  # 1 MB

    model_config = SettingsConfigDict(env_prefix="TABLEGATE_")


@cache
def get_settings() -> Settings:
    return Settings()
