"""Pytest configuration and fixtures for testing."""

from unittest.mock import MagicMock

import pytest
import requests

from app import create_app
from clients.search import ImageCandidate, SearchResult, SearchResults
from config import Settings
from photos import PhotoResolver
from pipeline import PersonSummaryPipeline
from rate_limit import RateLimiter

ADA_LINKS = [
    "https://en.wikipedia.org/wiki/Ada_Lovelace",
    "https://www.britannica.com/biography/Ada-Lovelace",
    "https://www.computerhistory.org/babbage/adalovelace/",
]
ADA_IMAGE = "https://images.example.org/ada_lovelace.jpg"
ADA_SUMMARY = "Ada Lovelace (1815-1852) was an English mathematician and writer."


class FakeClock:
    def __init__(self, now=1_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_response():
    """Factory for mocked ``requests`` responses."""

    def _make(status_code=200, json_data=None, text="", headers=None):
        response = MagicMock()
        response.status_code = status_code
        response.text = text
        response.headers = headers or {}
        response.iter_content.return_value = [text.encode("utf-8")] if text else []
        if isinstance(json_data, Exception):
            response.json.side_effect = json_data
        else:
            response.json.return_value = json_data
        if status_code >= 400:
            response.raise_for_status.side_effect = requests.exceptions.HTTPError(
                f"{status_code} Error"
            )
        return response

    return _make


@pytest.fixture
def settings():
    return Settings(
        serpapi_api_key="serp-test-key",
        openai_api_key="openai-test-key",
        rate_limit_max_requests=5,
        rate_limit_window=2 * 60 * 60,
    )


@pytest.fixture
def search_results():
    return SearchResults(
        results=[SearchResult(link) for link in ADA_LINKS],
        images=[ImageCandidate(original=ADA_IMAGE, thumbnail="https://images.example.org/ada_thumb.jpg")],
    )


@pytest.fixture
def search_client(search_results):
    client = MagicMock()
    client.search.return_value = search_results
    return client


@pytest.fixture
def encyclopedia():
    client = MagicMock()
    client.lead_image.return_value = None
    return client


@pytest.fixture
def page_session():
    return MagicMock()


@pytest.fixture
def photo_resolver(encyclopedia, page_session):
    return PhotoResolver(encyclopedia, session=page_session)


@pytest.fixture
def agent():
    summary_agent = MagicMock()
    summary_agent.summarize.return_value = ADA_SUMMARY
    return summary_agent


@pytest.fixture
def pipeline(search_client, photo_resolver, agent):
    return PersonSummaryPipeline(search_client, photo_resolver, agent)


@pytest.fixture
def rate_limiter(settings, clock):
    return RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window=settings.rate_limit_window,
        clock=clock,
    )


@pytest.fixture
def app(settings, pipeline, rate_limiter):
    flask_app = create_app(settings=settings, pipeline=pipeline, rate_limiter=rate_limiter)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
