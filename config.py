from typing import Optional

from pydantic import Field, AliasChoices, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    bot_token: str = Field("", validation_alias=AliasChoices("BOT_TOKEN", "bot_token"))  # only the bot needs it
    db_url: str = Field("sqlite:///captions.db", validation_alias=AliasChoices("DB_URL", "db_url"))
    font_path: Optional[str] = Field(None, validation_alias=AliasChoices("FONT_PATH", "font_path"))
    default_meme_count: int = Field(3, ge=1, le=6, validation_alias=AliasChoices("DEFAULT_MEME_COUNT", "default_meme_count"))
    max_meme_count: int = Field(6, ge=1, le=6, validation_alias=AliasChoices("MAX_MEME_COUNT", "max_meme_count"))
    analysis_max_size: int = Field(400, ge=16, validation_alias=AliasChoices("ANALYSIS_MAX_SIZE", "analysis_max_size"))
    sample_budget: int = Field(1000, ge=1, validation_alias=AliasChoices("SAMPLE_BUDGET", "sample_budget"))
    background_style: str = Field("gradient", validation_alias=AliasChoices("BACKGROUND_STYLE", "background_style"))  # gradient|pattern|solid
    max_upload_mb: int = Field(10, ge=1, validation_alias=AliasChoices("MAX_UPLOAD_MB", "max_upload_mb"))
    log_level: str = Field("INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    @model_validator(mode="after")
    def _default_within_max(self) -> "Settings":
        if self.default_meme_count > self.max_meme_count:
            raise ValueError(
                f"DEFAULT_MEME_COUNT={self.default_meme_count} exceeds MAX_MEME_COUNT={self.max_meme_count}")
        return self
