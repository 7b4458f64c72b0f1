from decimal import Decimal

from pydantic import Field, AliasChoices
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    share_base_url: str = Field(
        default="http://localhost:3000",
        validation_alias=AliasChoices("share_base_url", "app_url", "next_public_app_url"),
    )
    cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"
    venmo_base_url: str = "https://venmo.com/"
    venmo_max_note_length: int = 60
    venmo_max_amount: Decimal = Decimal("2999.99")


settings = Settings()
