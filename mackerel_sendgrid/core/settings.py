from __future__ import annotations
import os

from dotenv import load_dotenv, find_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env early; real environment variables win over the file
load_dotenv(
    os.getenv("ENV_FILE") or find_dotenv(usecwd=True) or ".env",
    override=False,
)

DEFAULT_METRIC_KEY_PREFIX = "sendgrid"


class Settings(BaseSettings):
    # read .env with case-insensitive keys
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Same names the flags use, upper-cased with dashes turned into underscores
    METRIC_KEY_PREFIX: str = Field(DEFAULT_METRIC_KEY_PREFIX, description="Metric key prefix")
    SENDGRID_APIKEY: str = Field("", description="API key of Sendgrid (needs access permission to get Stats)")

    # Set by mackerel-agent when it asks the plugin for graph definitions
    MACKEREL_AGENT_PLUGIN_META: str = Field("")

    @field_validator("SENDGRID_APIKEY", mode="before")
    @classmethod
    def _strip_api_key(cls, v):
        if v is None:
            return ""
        return str(v).strip()

    @property
    def meta_mode(self) -> bool:
        return bool(self.MACKEREL_AGENT_PLUGIN_META.strip())


def load_settings() -> Settings:
    """Build a fresh Settings snapshot from the current environment."""
    return Settings()


def as_dict(s: Settings) -> dict:
    # plain snapshot for debug logging; never leaks the key
    return {
        "METRIC_KEY_PREFIX": s.METRIC_KEY_PREFIX,
        "SENDGRID_APIKEY": "***" if s.SENDGRID_APIKEY else "",
        "MACKEREL_AGENT_PLUGIN_META": s.MACKEREL_AGENT_PLUGIN_META,
    }
