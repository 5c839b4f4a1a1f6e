"""
English → Indonesian translation with a provider fallback chain.

Translation is a display convenience: every public method here returns a
result of the same length and order as its input, and falls back to the
original text when no provider succeeds. Nothing is ever raised to callers.
"""
from __future__ import annotations

import asyncio
from typing import Any, List, Optional, Sequence

import httpx

from app.config import ProviderConfig
from app.core.errors import TranslationProviderError
from app.core.logging import get_logger
from services.fetcher_service import SleepFn

logger = get_logger().bind(module="translation_service")

SOURCE_LANGUAGE = "en"
TARGET_LANGUAGE = "id"

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"
AZURE_TRANSLATOR_URL = "https://api.cognitive.microsofttranslator.com/translate"

DEFAULT_TIMEOUT_S = 10.0
DEFAULT_PAUSE_S = 0.1


def _json_or_raise(provider: str, response: httpx.Response) -> Any:
    if response.status_code >= 400:
        raise TranslationProviderError(provider, f"HTTP {response.status_code}: {response.text[:200]}")
    try:
        return response.json()
    except ValueError as exc:
        raise TranslationProviderError(provider, "invalid JSON body") from exc


class GoogleTranslateProvider:
    name = "google"

    def __init__(self, api_key: str) -> None:
        self.api_key = api_key

    async def translate(self, client: httpx.AsyncClient, texts: Sequence[str]) -> List[Optional[str]]:
        """One call for all ``texts``; ``q`` is a list when more than one string is sent."""
        query: Any = list(texts) if len(texts) > 1 else texts[0]
        response = await client.post(
            GOOGLE_TRANSLATE_URL,
            params={"key": self.api_key},
            json={"q": query, "source": SOURCE_LANGUAGE, "target": TARGET_LANGUAGE, "format": "text"},
        )
        data = _json_or_raise(self.name, response)
        translations = ((data or {}).get("data") or {}).get("translations")
        if not isinstance(translations, list) or len(translations) != len(texts):
            raise TranslationProviderError(self.name, "translation count does not match input")
        return [t.get("translatedText") if isinstance(t, dict) else None for t in translations]


class LibreTranslateProvider:
    name = "libretranslate"

    def __init__(self, url: str) -> None:
        self.url = url

    async def translate_one(self, client: httpx.AsyncClient, text: str) -> Optional[str]:
        response = await client.post(
            self.url,
            json={"q": text, "source": SOURCE_LANGUAGE, "target": TARGET_LANGUAGE, "format": "text"},
        )
        data = _json_or_raise(self.name, response)
        return data.get("translatedText") if isinstance(data, dict) else None


class AzureTranslatorProvider:
    name = "azure"

    def __init__(self, api_key: str, region: str) -> None:
        self.api_key = api_key
        self.region = region

    async def translate_one(self, client: httpx.AsyncClient, text: str) -> Optional[str]:
        response = await client.post(
            AZURE_TRANSLATOR_URL,
            params={"api-version": "3.0", "to": TARGET_LANGUAGE},
            headers={
                "Ocp-Apim-Subscription-Key": self.api_key,
                "Ocp-Apim-Subscription-Region": self.region,
            },
            json=[{"text": text}],
        )
        data = _json_or_raise(self.name, response)
        try:
            return data[0]["translations"][0]["text"]
        except (IndexError, KeyError, TypeError) as exc:
            raise TranslationProviderError(self.name, "unexpected response shape") from exc


class TranslationService:
    """
    Provider priority:
      1. Google, batched, when a key is set and more than one string is sent.
      2. Per string: Google (key) → LibreTranslate (URL) → Azure (key + region),
         with a short pause between strings to stay under rate limits.
      3. The original text.
    """

    def __init__(
        self,
        config: ProviderConfig,
        *,
        client: Optional[httpx.AsyncClient] = None,
        sleep: SleepFn = asyncio.sleep,
        pause_s: float = DEFAULT_PAUSE_S,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        self.google = GoogleTranslateProvider(config.google_key) if config.google_key else None
        self.libre = LibreTranslateProvider(config.libre_url) if config.libre_url else None
        self.azure = (
            AzureTranslatorProvider(config.azure_key, config.azure_region)
            if config.has_azure
            else None
        )
        self._client = client
        self._owns_client = client is None
        self._sleep = sleep
        self.pause_s = pause_s
        self.timeout_s = timeout_s

    async def __aenter__(self) -> "TranslationService":
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_s)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError(f"{self.__class__.__name__} HTTP client not initialized")
        return self._client

    async def translate(self, text: str) -> str:
        if not text or not text.strip():
            return text

        if self.google is not None:
            try:
                translated = (await self.google.translate(self.client, [text]))[0]
                return translated or text
            except Exception as exc:
                self._log_failure(self.google.name, exc)

        for provider in (self.libre, self.azure):
            if provider is None:
                continue
            try:
                translated = await provider.translate_one(self.client, text)
                return translated or text
            except Exception as exc:
                self._log_failure(provider.name, exc)

        logger.warning("translation_passthrough", reason="all providers failed or unconfigured")
        return text

    async def translate_batch(self, texts: Sequence[str]) -> List[str]:
        texts = list(texts)
        if not texts:
            return []

        if self.google is not None and len(texts) > 1:
            try:
                translated = await self.google.translate(self.client, texts)
                logger.info("translation_batch_succeeded", provider=self.google.name, count=len(texts))
                return [t or original for t, original in zip(translated, texts)]
            except Exception as exc:
                self._log_failure(self.google.name, exc)
                logger.info("translation_batch_fallback", count=len(texts))

        results: List[str] = []
        for index, text in enumerate(texts):
            results.append(await self.translate(text))
            if index < len(texts) - 1:
                await self._sleep(self.pause_s)
        return results

    @staticmethod
    def _log_failure(provider: str, exc: Exception) -> None:
        logger.warning("translation_provider_failed", provider=provider, error=str(exc))
