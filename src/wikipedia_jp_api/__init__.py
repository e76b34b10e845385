"""Japanese Wikipedia (MediaWiki) API client."""

from .client import (
    WIKIPEDIA_API_ENDPOINT,
    AsyncWikipediaClient,
    MediaWikiParams,
    WikipediaClient,
    call_wikipedia_api,
    get_category_members,
    get_page,
    get_site_info,
    search_pages,
)
from .exceptions import (
    WikipediaApiError,
    WikipediaStatusError,
    WikipediaTimeoutError,
    WikipediaTransportError,
    WikipediaValidationError,
)
from .request_options import WikipediaApiOptions

__all__ = [
    "WIKIPEDIA_API_ENDPOINT",
    "AsyncWikipediaClient",
    "MediaWikiParams",
    "WikipediaApiError",
    "WikipediaApiOptions",
    "WikipediaClient",
    "WikipediaStatusError",
    "WikipediaTimeoutError",
    "WikipediaTransportError",
    "WikipediaValidationError",
    "call_wikipedia_api",
    "get_category_members",
    "get_page",
    "get_site_info",
    "search_pages",
]

__version__ = "1.0.0"
