"""
# Photo resolution

Tries sources in order of confidence and stops at the first hit:

1. Wikipedia lead image (certain)
2. search engine image results (uncertain)
3. thumbnail of the first organic result (uncertain)
4. og:image / twitter:image of the first organic result page (uncertain)
"""

import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin

import requests
from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

PAGE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36"
}

PREVIEW_META = (
    ("property", "og:image"),
    ("property", "og:image:url"),
    ("name", "twitter:image"),
    ("name", "twitter:image:src"),
)

MIN_PORTRAIT_RATIO = 0.6
MAX_PORTRAIT_RATIO = 2.0

# meta tags sit in <head>, the first few hundred KB are enough
MAX_PAGE_BYTES = 512 * 1024


@dataclass(frozen=True)
class PhotoResult:
    url: Optional[str] = None
    uncertain: bool = False


NO_PHOTO = PhotoResult()


def is_portrait(width, height):
    """Height/width inside the portrait band. Unknown sizes pass."""
    if not width or not height:
        return True
    ratio = height / width
    return MIN_PORTRAIT_RATIO <= ratio <= MAX_PORTRAIT_RATIO


def extract_preview_image(html, page_url):
    """Find the preview image declared in a page's meta tags"""
    soup = BeautifulSoup(html, "html.parser")
    for attr, value in PREVIEW_META:
        tag = soup.find("meta", attrs={attr: value})
        if tag and tag.get("content", "").strip():
            return urljoin(page_url, tag["content"].strip())
    return None


class PhotoResolver:
    def __init__(self, encyclopedia, timeout=5.0, portrait_filter=False, session=None):
        self.encyclopedia = encyclopedia
        self.timeout = timeout
        self.portrait_filter = portrait_filter
        self.session = session or requests.Session()

    def resolve(self, topic, images=(), first_result=None) -> PhotoResult:
        url = self._from_encyclopedia(topic)
        if url:
            return PhotoResult(url, uncertain=False)

        url = self._from_search_images(images)
        if url:
            return PhotoResult(url, uncertain=True)

        if first_result is not None:
            if first_result.thumbnail:
                return PhotoResult(first_result.thumbnail, uncertain=True)

            url = self._from_page(first_result.link)
            if url:
                return PhotoResult(url, uncertain=True)

        logger.info("No photo found for %r", topic)
        return NO_PHOTO

    def _acceptable(self, candidate):
        return not self.portrait_filter or is_portrait(candidate.width, candidate.height)

    def _from_encyclopedia(self, topic):
        try:
            candidate = self.encyclopedia.lead_image(topic)
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.warning("Wikipedia image lookup failed for %r: %s", topic, e)
            return None
        if candidate and self._acceptable(candidate):
            return candidate.url
        return None

    def _from_search_images(self, images):
        for candidate in images:
            if candidate.url and self._acceptable(candidate):
                return candidate.url
        return None

    def _from_page(self, page_url):
        if not page_url:
            return None
        try:
            html = self._read_html(page_url)
        except requests.exceptions.RequestException as e:
            logger.warning("Could not fetch %s for preview image: %s", page_url, e)
            return None
        if html is None:
            return None
        return extract_preview_image(html, page_url)

    def _read_html(self, page_url):
        """Read at most MAX_PAGE_BYTES of an HTML page, None for other content"""
        response = self.session.get(page_url, headers=PAGE_HEADERS, timeout=self.timeout, stream=True)
        try:
            response.raise_for_status()
            content_type = response.headers.get("Content-Type", "")
            if "html" not in content_type.lower():
                logger.info("Skipping %s for preview image, content type %r", page_url, content_type)
                return None

            chunks = []
            size = 0
            for chunk in response.iter_content(chunk_size=16 * 1024):
                chunks.append(chunk)
                size += len(chunk)
                if size >= MAX_PAGE_BYTES:
                    break
            return b"".join(chunks)[:MAX_PAGE_BYTES]
        finally:
            response.close()
