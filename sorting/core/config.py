# sorting/core/config.py
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DuplicatePolicy = Literal["drop", "keep", "error"]


class Settings(BaseSettings):
    # drop: keep the first key per field / keep: retain every key / error: raise
    duplicate_policy: DuplicatePolicy = "drop"
    # request parameter carrying the descriptor string
    sort_param: str = "sort"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SORTING_",
        extra="ignore",
    )


settings = Settings()


def get_settings() -> Settings:
    return settings
