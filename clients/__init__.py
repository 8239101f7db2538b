from .encyclopedia import WikipediaClient
from .search import ImageCandidate, SearchError, SearchResult, SearchResults, SerpApiClient

__all__ = [
    "ImageCandidate",
    "SearchError",
    "SearchResult",
    "SearchResults",
    "SerpApiClient",
    "WikipediaClient",
]
