from __future__ import annotations

import json
import re

import httpx
import pytest
from fastapi.testclient import TestClient

from app.config import ProviderConfig
from app.deps.services import get_fetch_policy, get_provider_config, get_translation_pause
from app.main import app
from services.fetcher_service import FetchPolicy
from tests.fixtures.feeds import NEWS_API_RESPONSE, REGIONAL_FEED

FEED_URL = "https://feed.test/api/category/business/markets"
GOOGLE_URL = re.compile(r"https://translation\.googleapis\.com/.*")
NEWS_API_URL = re.compile(r"https://newsapi\.org/v2/everything\?.*")

client = TestClient(app)


def google_echo(request: httpx.Request) -> httpx.Response:
    queries = json.loads(request.content)["q"]
    return httpx.Response(
        200,
        json={"data": {"translations": [{"translatedText": f"[ID] {q}"} for q in queries]}},
    )


def _use_config(config: ProviderConfig) -> None:
    app.dependency_overrides[get_provider_config] = lambda: config


@pytest.fixture(autouse=True)
def _overrides():
    app.dependency_overrides[get_fetch_policy] = lambda: FetchPolicy(max_attempts=3, retry_delay_s=0.0)
    app.dependency_overrides[get_translation_pause] = lambda: 0.0
    yield
    app.dependency_overrides.clear()


def test_regional_news_translated(httpx_mock):
    _use_config(ProviderConfig(google_key="test-key", feed_base_url="https://feed.test"))
    httpx_mock.add_response(url=FEED_URL, json=REGIONAL_FEED)
    httpx_mock.add_callback(google_echo, url=GOOGLE_URL, method="POST")

    response = client.get("/api/news", params={"category": "indonesian-investment", "pageSize": 2})

    assert response.status_code == 200
    assert "cache-control" not in response.headers
    body = response.json()
    assert body["status"] == "ok"
    assert body["totalResults"] == 2
    assert body["isTranslating"] is False
    assert body["translationMessage"] == "Mengambil dan menerjemahkan berita dari Jakarta Post"
    assert len(body["articles"]) == 2
    for article in body["articles"]:
        assert article["title"].startswith("[ID] ")
        assert article["title"] == f"[ID] {article['originalTitle']}"
        assert article["description"] == f"[ID] {article['originalDescription']}"
        assert article["source"] == {"id": "jakarta-post", "name": "The Jakarta Post"}


def test_search_news_passes_through_with_cache_header(httpx_mock):
    _use_config(ProviderConfig(search_api_key="news-key"))
    httpx_mock.add_response(url=NEWS_API_URL, json=NEWS_API_RESPONSE)

    response = client.get("/api/news", params={"category": "stock market", "pageSize": 5})

    assert response.status_code == 200
    assert response.headers["cache-control"] == "s-maxage=43200, stale-while-revalidate"
    body = response.json()
    assert body["totalResults"] == 1
    assert body["isTranslating"] is False
    article = body["articles"][0]
    assert article["urlToImage"] == "https://i.insider.com/rally.jpg"
    assert "originalTitle" not in article

    sent = httpx.URL(str(httpx_mock.get_requests()[0].url))
    assert sent.params["pageSize"] == "5"
    assert sent.params["sources"] == "business-insider"


def test_search_news_without_key():
    _use_config(ProviderConfig())

    response = client.get("/api/news", params={"category": "stock market"})

    assert response.status_code == 500
    assert response.json() == {"error": "News API key is not configured"}


def test_search_news_upstream_status_is_forwarded(httpx_mock):
    _use_config(ProviderConfig(search_api_key="bad-key"))
    httpx_mock.add_response(url=NEWS_API_URL, status_code=401, text="apiKeyInvalid")

    response = client.get("/api/news", params={"category": "financial"})

    assert response.status_code == 401
    assert response.json()["error"] == "Failed to fetch news from external API"


def test_regional_feed_failure(httpx_mock):
    _use_config(ProviderConfig(feed_base_url="https://feed.test"))
    for _ in range(3):
        httpx_mock.add_exception(httpx.ConnectError("refused"), url=FEED_URL)

    response = client.get("/api/news", params={"category": "indonesian-investment"})

    assert response.status_code == 500
    assert response.json() == {
        "error": "Failed to fetch Indonesian investment news",
        "isTranslating": False,
    }


@pytest.mark.parametrize("page_size", ["0", "abc", "101"])
def test_invalid_page_size(page_size):
    _use_config(ProviderConfig(search_api_key="news-key"))

    response = client.get("/api/news", params={"pageSize": page_size})

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request parameters"


def test_health_routes():
    assert client.get("/health").json() == {"ok": True}
    assert client.get("/healthz").json() == {"status": "healthy"}


def test_unknown_route_renders_json_error():
    response = client.get("/api/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "Not Found"}
