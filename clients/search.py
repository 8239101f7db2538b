"""SerpAPI web search client"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


class SearchError(Exception):
    """The search provider could not be reached or returned an error"""


@dataclass
class SearchResult:
    link: str
    thumbnail: Optional[str] = None


@dataclass
class ImageCandidate:
    original: Optional[str] = None
    thumbnail: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def url(self):
        return self.original or self.thumbnail


@dataclass
class SearchResults:
    results: List[SearchResult] = field(default_factory=list)
    images: List[ImageCandidate] = field(default_factory=list)

    @property
    def links(self):
        return [result.link for result in self.results]

    @property
    def first_result(self):
        return self.results[0] if self.results else None


def _as_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_search_response(data, max_links=20):
    """Extract organic links and image candidates from a SerpAPI payload"""
    if not isinstance(data, dict):
        raise SearchError("Unexpected search response shape")

    results = []
    for entry in data.get("organic_results") or []:
        if not isinstance(entry, dict) or not entry.get("link"):
            continue
        results.append(SearchResult(link=entry["link"], thumbnail=entry.get("thumbnail") or None))
        if len(results) >= max_links:
            break

    images = []
    for key in ("inline_images", "images_results"):
        for entry in data.get(key) or []:
            if not isinstance(entry, dict):
                continue
            candidate = ImageCandidate(
                original=entry.get("original") or None,
                thumbnail=entry.get("thumbnail") or None,
                width=_as_int(entry.get("original_width")),
                height=_as_int(entry.get("original_height")),
            )
            if candidate.url:
                images.append(candidate)

    return SearchResults(results=results, images=images)


class SerpApiClient:
    """Runs a single Google search through SerpAPI"""

    def __init__(self, api_key, api_url="https://serpapi.com/search.json",
                 num_results=20, max_links=20, timeout=5.0, session=None):
        self.api_key = api_key
        self.api_url = api_url
        self.num_results = num_results
        self.max_links = max_links
        self.timeout = timeout
        self.session = session or requests.Session()

    def search(self, topic) -> SearchResults:
        if not self.api_key:
            raise SearchError("SERPAPI_API_KEY is not set")

        params = {
            "q": topic,
            "num": self.num_results,
            "api_key": self.api_key,
        }

        try:
            response = self.session.get(self.api_url, params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error("SerpAPI connection error: %s", e)
            raise SearchError("Search provider unreachable") from e

        if response.status_code != 200:
            logger.error("SerpAPI error: %s - %s", response.status_code, response.text[:500])
            raise SearchError(f"Search provider returned HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("SerpAPI returned invalid JSON: %s", e)
            raise SearchError("Search provider returned invalid JSON") from e

        if isinstance(data, dict) and data.get("error") and not data.get("organic_results"):
            # SerpAPI reports "no results" through the error field with a 200
            logger.info("SerpAPI reported: %s", data["error"])
            return SearchResults()

        return parse_search_response(data, max_links=self.max_links)
