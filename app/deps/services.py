# app/deps/services.py
"""FastAPI dependency providers; tests swap them via ``app.dependency_overrides``."""
from __future__ import annotations

from app.config import ProviderConfig, settings
from services.fetcher_service import FetchPolicy

__all__ = ["get_provider_config", "get_fetch_policy", "get_translation_pause", "get_allowed_domain"]


def get_provider_config() -> ProviderConfig:
    return ProviderConfig.from_settings(settings)


def get_fetch_policy() -> FetchPolicy:
    return FetchPolicy(
        timeout_s=10.0,
        max_attempts=settings.FETCH_MAX_ATTEMPTS,
        retry_delay_s=settings.FETCH_RETRY_DELAY_S,
    )


def get_translation_pause() -> float:
    return settings.TRANSLATION_PAUSE_S


def get_allowed_domain() -> str:
    return settings.SCRAPE_ALLOWED_DOMAIN
