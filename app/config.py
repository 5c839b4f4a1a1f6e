# app/config.py
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env lives at the project root, next to the app/ package.
ENV_FILE = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(ENV_FILE, override=False)


class Settings(BaseSettings):
    # ---- App ----
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    CORS_ALLOWED_ORIGINS: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    # ---- Article scraping ----
    SCRAPE_ALLOWED_DOMAIN: str = "businessinsider.com"
    FETCH_MAX_ATTEMPTS: int = 3
    FETCH_RETRY_DELAY_S: float = 1.0

    # ---- Translation providers (all optional) ----
    GOOGLE_TRANSLATE_API_KEY: Optional[str] = None
    LIBRE_TRANSLATE_URL: Optional[str] = "https://libretranslate.de/translate"
    AZURE_TRANSLATOR_KEY: Optional[str] = None
    AZURE_TRANSLATOR_REGION: Optional[str] = None
    TRANSLATION_PAUSE_S: float = 0.1

    # ---- News sources ----
    NEWS_API_KEY: Optional[str] = None
    REGIONAL_FEED_BASE_URL: Optional[str] = "https://jakpost.vercel.app"

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


settings = Settings()


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class ProviderConfig:
    """
    Credentials and endpoints for the translation providers and news sources.

    Every field is optional; a missing field switches the matching provider
    off instead of failing the request.
    """

    google_key: Optional[str] = None
    libre_url: Optional[str] = None
    azure_key: Optional[str] = None
    azure_region: Optional[str] = None
    search_api_key: Optional[str] = None
    feed_base_url: Optional[str] = None

    @property
    def has_azure(self) -> bool:
        return bool(self.azure_key and self.azure_region)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "ProviderConfig":
        s = source or settings
        return cls(
            google_key=_blank_to_none(s.GOOGLE_TRANSLATE_API_KEY),
            libre_url=_blank_to_none(s.LIBRE_TRANSLATE_URL),
            azure_key=_blank_to_none(s.AZURE_TRANSLATOR_KEY),
            azure_region=_blank_to_none(s.AZURE_TRANSLATOR_REGION),
            search_api_key=_blank_to_none(s.NEWS_API_KEY),
            feed_base_url=_blank_to_none(s.REGIONAL_FEED_BASE_URL),
        )
