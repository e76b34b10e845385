"""Synchronous and asynchronous clients for the Japanese Wikipedia API."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Mapping, Union

import httpx

from .exceptions import (
    WikipediaApiError,
    WikipediaStatusError,
    WikipediaTimeoutError,
    WikipediaTransportError,
    WikipediaValidationError,
)
from .request_options import ResolvedOptions, WikipediaApiOptions
from .urls import merge_params, validate_endpoint_url

logger = logging.getLogger(__name__)

WIKIPEDIA_API_ENDPOINT = "https://ja.wikipedia.org/w/api.php"

MediaWikiParams = Mapping[str, Any]

PAGE_PROPS = ("text", "categories", "links", "images", "templates")
CATEGORY_PREFIX = "Category:"


@dataclass(frozen=True)
class _Ok:
    value: Any


@dataclass(frozen=True)
class _Err:
    error: Union[WikipediaTransportError, WikipediaStatusError]


_Attempt = Union[_Ok, _Err]


def page_params(title: str) -> dict[str, Any]:
    return {"action": "parse", "page": title, "prop": PAGE_PROPS, "format": "json"}


def search_params(query: str, limit: int | str = 10) -> dict[str, Any]:
    return {"action": "query", "list": "search", "srsearch": query, "srlimit": limit, "format": "json"}


def category_members_params(category: str, limit: int | str = 10) -> dict[str, Any]:
    title = category if category.startswith(CATEGORY_PREFIX) else f"{CATEGORY_PREFIX}{category}"
    return {"action": "query", "list": "categorymembers", "cmtitle": title, "cmlimit": limit, "format": "json"}


def site_info_params() -> dict[str, Any]:
    return {"action": "query", "meta": "siteinfo", "format": "json"}


def _pick(*values: Any) -> Any:
    for value in values:
        if value is not None:
            return value
    return None


class _BaseWikipediaClient:
    default_endpoint = WIKIPEDIA_API_ENDPOINT
    default_max_retries = 3
    default_timeout = 10000
    default_user_agent = "wikipedia-jp-api/1.0.0"
    retry_base_delay = 1.0

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        max_retries: int | None = None,
        timeout: int | None = None,
        user_agent: str | None = None,
        allow_http: bool = False,
    ) -> None:
        self.endpoint = endpoint or self.default_endpoint
        validate_endpoint_url(self.endpoint, allow_http=allow_http)
        self.options = WikipediaApiOptions(max_retries=max_retries, timeout=timeout, user_agent=user_agent)

    def _resolve_options(self, options: WikipediaApiOptions | None) -> ResolvedOptions:
        options = options or WikipediaApiOptions()
        max_retries = _pick(options.max_retries, self.options.max_retries, self.default_max_retries)
        timeout = _pick(options.timeout, self.options.timeout, self.default_timeout)
        user_agent = _pick(options.user_agent, self.options.user_agent, self.default_user_agent)

        if isinstance(max_retries, bool) or not isinstance(max_retries, int) or max_retries < 1:
            raise WikipediaValidationError("max_retries must be a positive integer")
        if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
            raise WikipediaValidationError("timeout must be greater than 0")
        if not isinstance(user_agent, str) or not user_agent.strip():
            raise WikipediaValidationError("user_agent must be a non-empty string")
        return ResolvedOptions(max_retries=max_retries, timeout=timeout, user_agent=user_agent)

    def _build_url(self, params: MediaWikiParams | None) -> str:
        return str(httpx.URL(self.endpoint).copy_merge_params(merge_params(params)))

    @staticmethod
    def _headers(resolved: ResolvedOptions) -> dict[str, str]:
        return {"User-Agent": resolved.user_agent}

    def _retry_delay(self, attempt: int) -> float:
        """Seconds to wait after the failed attempt with 0-based index ``attempt``."""
        return self.retry_base_delay * (attempt + 1)

    @staticmethod
    def _parse_response(response: httpx.Response) -> Any:
        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type.lower():
            return response.json()
        return response.text

    def _classify(self, response: httpx.Response, url: str) -> _Attempt:
        if not response.is_success:
            return _Err(
                WikipediaStatusError(
                    f"HTTP error! status: {response.status_code}",
                    status_code=response.status_code,
                    url=url,
                )
            )
        try:
            return _Ok(self._parse_response(response))
        except ValueError as exc:
            return _Err(WikipediaTransportError(f"Invalid JSON response body: {exc}", url=url, cause=exc))

    @staticmethod
    def _transport_failure(exc: Exception, url: str, resolved: ResolvedOptions) -> _Err:
        if isinstance(exc, (httpx.TimeoutException, asyncio.TimeoutError)):
            error: WikipediaTransportError = WikipediaTimeoutError(
                f"Request timed out after {resolved.timeout} ms", url=url, cause=exc
            )
        else:
            error = WikipediaTransportError(f"Network error: {exc}", url=url, cause=exc)
        return _Err(error)

    @staticmethod
    def _deadline_exceeded(url: str, resolved: ResolvedOptions) -> _Err:
        return _Err(WikipediaTimeoutError(f"Request timed out after {resolved.timeout} ms", url=url))

    @staticmethod
    def _failure(error: WikipediaApiError, *, url: str, attempts: int) -> WikipediaApiError:
        return WikipediaApiError(
            f"Wikipedia API call failed: {error}",
            status_code=error.status_code,
            url=url,
            attempts=attempts,
            cause=error,
        )

    def _log_retry(self, error: WikipediaApiError, attempt: int, resolved: ResolvedOptions, wait: float) -> None:
        logger.warning(
            "Wikipedia API attempt %d/%d failed (%s); retrying in %.1fs",
            attempt + 1,
            resolved.max_retries,
            error,
            wait,
        )


class WikipediaClient(_BaseWikipediaClient):
    """Synchronous client."""

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        max_retries: int | None = None,
        timeout: int | None = None,
        user_agent: str | None = None,
        httpx_client: httpx.Client | None = None,
        allow_http: bool = False,
    ) -> None:
        super().__init__(
            endpoint=endpoint,
            max_retries=max_retries,
            timeout=timeout,
            user_agent=user_agent,
            allow_http=allow_http,
        )
        self._httpx = httpx_client or httpx.Client(follow_redirects=True, trust_env=False)

    def __enter__(self) -> "WikipediaClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        self._httpx.close()

    def request(self, params: MediaWikiParams | None = None, *, options: WikipediaApiOptions | None = None) -> Any:
        resolved = self._resolve_options(options)
        url = self._build_url(params)
        headers = self._headers(resolved)

        for attempt in range(resolved.max_retries):
            logger.debug("GET %s (attempt %d/%d)", url, attempt + 1, resolved.max_retries)
            result = self._attempt(url, headers, resolved)
            if isinstance(result, _Ok):
                return result.value

            if attempt == resolved.max_retries - 1:
                raise self._failure(result.error, url=url, attempts=attempt + 1) from result.error
            wait = self._retry_delay(attempt)
            self._log_retry(result.error, attempt, resolved, wait)
            time.sleep(wait)

        raise WikipediaApiError("All retries failed", url=url)

    def _attempt(self, url: str, headers: Mapping[str, str], resolved: ResolvedOptions) -> _Attempt:
        # httpx's timeout only bounds each phase; the deadline bounds the whole attempt.
        deadline = time.monotonic() + resolved.timeout_seconds
        try:
            with self._httpx.stream("GET", url, headers=headers, timeout=resolved.timeout_seconds) as response:
                body = bytearray()
                for chunk in response.iter_bytes():
                    body.extend(chunk)
                    if time.monotonic() > deadline:
                        return self._deadline_exceeded(url, resolved)
                if time.monotonic() > deadline:
                    return self._deadline_exceeded(url, resolved)
        except httpx.RequestError as exc:
            return self._transport_failure(exc, url, resolved)
        # body is already decoded
        response_headers = [(k, v) for k, v in response.headers.multi_items() if k.lower() != "content-encoding"]
        complete = httpx.Response(
            response.status_code,
            headers=response_headers,
            content=bytes(body),
            request=response.request,
        )
        return self._classify(complete, url)

    def get_page(self, title: str, *, options: WikipediaApiOptions | None = None) -> Any:
        return self.request(page_params(title), options=options)

    def search_pages(self, query: str, limit: int | str = 10, *, options: WikipediaApiOptions | None = None) -> Any:
        return self.request(search_params(query, limit), options=options)

    def get_category_members(
        self,
        category: str,
        limit: int | str = 10,
        *,
        options: WikipediaApiOptions | None = None,
    ) -> Any:
        return self.request(category_members_params(category, limit), options=options)

    def get_site_info(self, *, options: WikipediaApiOptions | None = None) -> Any:
        return self.request(site_info_params(), options=options)


class AsyncWikipediaClient(_BaseWikipediaClient):
    """Asynchronous client."""

    def __init__(
        self,
        *,
        endpoint: str | None = None,
        max_retries: int | None = None,
        timeout: int | None = None,
        user_agent: str | None = None,
        httpx_client: httpx.AsyncClient | None = None,
        allow_http: bool = False,
    ) -> None:
        super().__init__(
            endpoint=endpoint,
            max_retries=max_retries,
            timeout=timeout,
            user_agent=user_agent,
            allow_http=allow_http,
        )
        self._httpx = httpx_client or httpx.AsyncClient(follow_redirects=True, trust_env=False)

    async def __aenter__(self) -> "AsyncWikipediaClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._httpx.aclose()

    async def request(self, params: MediaWikiParams | None = None, *, options: WikipediaApiOptions | None = None) -> Any:
        resolved = self._resolve_options(options)
        url = self._build_url(params)
        headers = self._headers(resolved)

        for attempt in range(resolved.max_retries):
            logger.debug("GET %s (attempt %d/%d)", url, attempt + 1, resolved.max_retries)
            result = await self._attempt(url, headers, resolved)
            if isinstance(result, _Ok):
                return result.value

            if attempt == resolved.max_retries - 1:
                raise self._failure(result.error, url=url, attempts=attempt + 1) from result.error
            wait = self._retry_delay(attempt)
            self._log_retry(result.error, attempt, resolved, wait)
            await asyncio.sleep(wait)

        raise WikipediaApiError("All retries failed", url=url)

    async def _attempt(self, url: str, headers: Mapping[str, str], resolved: ResolvedOptions) -> _Attempt:
        # wait_for bounds the whole attempt; httpx's timeout only bounds each phase.
        try:
            response = await asyncio.wait_for(
                self._httpx.get(url, headers=headers, timeout=resolved.timeout_seconds),
                resolved.timeout_seconds,
            )
        except (httpx.RequestError, asyncio.TimeoutError) as exc:
            return self._transport_failure(exc, url, resolved)
        return self._classify(response, url)

    async def get_page(self, title: str, *, options: WikipediaApiOptions | None = None) -> Any:
        return await self.request(page_params(title), options=options)

    async def search_pages(
        self,
        query: str,
        limit: int | str = 10,
        *,
        options: WikipediaApiOptions | None = None,
    ) -> Any:
        return await self.request(search_params(query, limit), options=options)

    async def get_category_members(
        self,
        category: str,
        limit: int | str = 10,
        *,
        options: WikipediaApiOptions | None = None,
    ) -> Any:
        return await self.request(category_members_params(category, limit), options=options)

    async def get_site_info(self, *, options: WikipediaApiOptions | None = None) -> Any:
        return await self.request(site_info_params(), options=options)


async def call_wikipedia_api(params: MediaWikiParams, options: WikipediaApiOptions | None = None) -> Any:
    """Call the Japanese Wikipedia API once, with retries, on a fresh client.

    Example::

        result = await call_wikipedia_api({"action": "parse", "page": "日本"})
    """
    async with AsyncWikipediaClient() as client:
        return await client.request(params, options=options)


async def get_page(title: str, options: WikipediaApiOptions | None = None) -> Any:
    return await call_wikipedia_api(page_params(title), options)


async def search_pages(query: str, limit: int | str = 10, options: WikipediaApiOptions | None = None) -> Any:
    return await call_wikipedia_api(search_params(query, limit), options)


async def get_category_members(
    category: str,
    limit: int | str = 10,
    options: WikipediaApiOptions | None = None,
) -> Any:
    return await call_wikipedia_api(category_members_params(category, limit), options)


async def get_site_info(options: WikipediaApiOptions | None = None) -> Any:
    return await call_wikipedia_api(site_info_params(), options)
