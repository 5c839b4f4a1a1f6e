from __future__ import annotations

import json
import re

import httpx
import pytest

from app.config import ProviderConfig
from services.translation_service import TranslationService

GOOGLE_URL = re.compile(r"https://translation\.googleapis\.com/language/translate/v2\?key=.*")
LIBRE_URL = "https://libre.test/translate"
AZURE_URL = re.compile(r"https://api\.cognitive\.microsofttranslator\.com/translate\?.*")


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def google_echo(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    queries = body["q"] if isinstance(body["q"], list) else [body["q"]]
    assert body["source"] == "en"
    assert body["target"] == "id"
    return httpx.Response(
        200,
        json={"data": {"translations": [{"translatedText": f"[ID] {q}"} for q in queries]}},
    )


def libre_echo(request: httpx.Request) -> httpx.Response:
    body = json.loads(request.content)
    return httpx.Response(200, json={"translatedText": f"[LIBRE] {body['q']}"})


@pytest.mark.asyncio
async def test_batch_uses_one_google_call(httpx_mock):
    httpx_mock.add_callback(google_echo, url=GOOGLE_URL, method="POST")
    config = ProviderConfig(google_key="test-key", libre_url=LIBRE_URL)
    texts = ["Title one", "Headline one", "Title two"]

    async with TranslationService(config, sleep=RecordingSleep()) as translator:
        result = await translator.translate_batch(texts)

    assert result == ["[ID] Title one", "[ID] Headline one", "[ID] Title two"]
    requests = httpx_mock.get_requests()
    assert len(requests) == 1
    assert json.loads(requests[0].content)["q"] == texts


@pytest.mark.asyncio
async def test_single_text_goes_through_per_string_google(httpx_mock):
    httpx_mock.add_callback(google_echo, url=GOOGLE_URL, method="POST")
    config = ProviderConfig(google_key="test-key")

    async with TranslationService(config) as translator:
        assert await translator.translate_batch(["Only one"]) == ["[ID] Only one"]

    assert json.loads(httpx_mock.get_requests()[0].content)["q"] == "Only one"


@pytest.mark.asyncio
async def test_without_google_key_translates_each_string_with_pause(httpx_mock):
    for _ in range(3):
        httpx_mock.add_callback(libre_echo, url=LIBRE_URL, method="POST")
    sleep = RecordingSleep()
    config = ProviderConfig(libre_url=LIBRE_URL)

    async with TranslationService(config, sleep=sleep, pause_s=0.1) as translator:
        result = await translator.translate_batch(["a", "b", "c"])

    assert result == ["[LIBRE] a", "[LIBRE] b", "[LIBRE] c"]
    assert sleep.calls == [0.1, 0.1]


@pytest.mark.asyncio
async def test_failed_batch_falls_back_per_string(httpx_mock):
    # batch call, then one per-string google attempt for each text
    for _ in range(3):
        httpx_mock.add_response(url=GOOGLE_URL, method="POST", status_code=500, text="quota")
    for _ in range(2):
        httpx_mock.add_callback(libre_echo, url=LIBRE_URL, method="POST")
    config = ProviderConfig(google_key="test-key", libre_url=LIBRE_URL)

    async with TranslationService(config, sleep=RecordingSleep()) as translator:
        result = await translator.translate_batch(["first", "second"])

    assert result == ["[LIBRE] first", "[LIBRE] second"]


@pytest.mark.asyncio
async def test_batch_count_mismatch_is_rejected(httpx_mock):
    httpx_mock.add_response(
        url=GOOGLE_URL,
        method="POST",
        json={"data": {"translations": [{"translatedText": "only one"}]}},
    )
    httpx_mock.add_callback(google_echo, url=GOOGLE_URL, method="POST")
    httpx_mock.add_callback(google_echo, url=GOOGLE_URL, method="POST")
    config = ProviderConfig(google_key="test-key")

    async with TranslationService(config, sleep=RecordingSleep()) as translator:
        result = await translator.translate_batch(["x", "y"])

    assert result == ["[ID] x", "[ID] y"]


@pytest.mark.asyncio
async def test_empty_batch_translation_keeps_original(httpx_mock):
    httpx_mock.add_response(
        url=GOOGLE_URL,
        method="POST",
        json={"data": {"translations": [{"translatedText": ""}, {"translatedText": "dua"}]}},
    )
    config = ProviderConfig(google_key="test-key")

    async with TranslationService(config) as translator:
        assert await translator.translate_batch(["one", "two"]) == ["one", "dua"]


@pytest.mark.asyncio
async def test_azure_is_last_credentialed_attempt(httpx_mock):
    httpx_mock.add_response(url=LIBRE_URL, method="POST", status_code=503)
    httpx_mock.add_response(url=AZURE_URL, method="POST", json=[{"translations": [{"text": "halo"}]}])
    config = ProviderConfig(libre_url=LIBRE_URL, azure_key="az-key", azure_region="southeastasia")

    async with TranslationService(config) as translator:
        assert await translator.translate("hello") == "halo"

    azure_request = httpx_mock.get_requests()[-1]
    assert azure_request.headers["Ocp-Apim-Subscription-Key"] == "az-key"
    assert azure_request.headers["Ocp-Apim-Subscription-Region"] == "southeastasia"
    assert azure_request.url.params["to"] == "id"
    assert json.loads(azure_request.content) == [{"text": "hello"}]


@pytest.mark.asyncio
async def test_azure_needs_key_and_region(httpx_mock):
    config = ProviderConfig(azure_key="az-key")

    async with TranslationService(config) as translator:
        assert await translator.translate("hello") == "hello"

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_total_failure_is_identity_passthrough(httpx_mock):
    texts = ["alpha", "beta", "gamma"]
    for _ in texts:
        httpx_mock.add_exception(httpx.ConnectError("down"), url=LIBRE_URL, method="POST")
    config = ProviderConfig(libre_url=LIBRE_URL)

    async with TranslationService(config, sleep=RecordingSleep()) as translator:
        result = await translator.translate_batch(texts)

    assert result == texts


@pytest.mark.asyncio
async def test_no_providers_configured(httpx_mock):
    async with TranslationService(ProviderConfig(), sleep=RecordingSleep()) as translator:
        assert await translator.translate_batch(["a", "b"]) == ["a", "b"]
        assert await translator.translate_batch([]) == []

    assert httpx_mock.get_requests() == []


@pytest.mark.asyncio
async def test_blank_text_is_not_sent(httpx_mock):
    async with TranslationService(ProviderConfig(libre_url=LIBRE_URL)) as translator:
        assert await translator.translate("   ") == "   "

    assert httpx_mock.get_requests() == []
