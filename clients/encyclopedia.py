"""Wikipedia lead image lookup"""

import logging

import requests

from .search import ImageCandidate

logger = logging.getLogger(__name__)

HEADERS = {"User-Agent": "PersonSummary/1.0 (person summary lookup)"}


class WikipediaClient:
    def __init__(self, api_url="https://en.wikipedia.org/w/api.php", timeout=5.0, session=None):
        self.api_url = api_url
        self.timeout = timeout
        self.session = session or requests.Session()

    def lead_image(self, topic):
        """
        Return the original lead image of the article titled ``topic``.

        Redirects are followed. Missing pages, disambiguation pages and pages
        without an image give None. Network and HTTP errors propagate as
        ``requests`` exceptions.
        """
        params = {
            "action": "query",
            "titles": topic,
            "prop": "pageimages|pageprops",
            "piprop": "original",
            "ppprop": "disambiguation",
            "redirects": 1,
            "format": "json",
            "formatversion": 2,
        }
        response = self.session.get(self.api_url, params=params, headers=HEADERS, timeout=self.timeout)
        response.raise_for_status()

        data = response.json()
        query = data.get("query") if isinstance(data, dict) else None
        pages = query.get("pages") if isinstance(query, dict) else None
        if not isinstance(pages, list):
            logger.warning("Unexpected Wikipedia response shape for %r", topic)
            return None

        for page in pages:
            if not isinstance(page, dict):
                continue
            if page.get("missing") or "disambiguation" in (page.get("pageprops") or {}):
                continue
            original = page.get("original")
            if isinstance(original, dict) and original.get("source"):
                return ImageCandidate(
                    original=original["source"],
                    width=original.get("width"),
                    height=original.get("height"),
                )
        return None
