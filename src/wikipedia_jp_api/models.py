"""Typed views over the MediaWiki payloads returned by the convenience calls.

The clients return whatever the API sends back. These models are opt-in:
pass a raw response to one of the extractor functions to get typed objects.
All models assume ``formatversion=2`` output.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import WikipediaValidationError


class WikipediaModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ApiErrorInfo(WikipediaModel):
    code: str | None = None
    info: str | None = None


class SearchHit(WikipediaModel):
    ns: int | None = None
    title: str
    pageid: int | None = None
    size: int | None = None
    wordcount: int | None = None
    snippet: str | None = None
    timestamp: str | None = None


class CategoryMember(WikipediaModel):
    pageid: int | None = None
    ns: int | None = None
    title: str


class SiteGeneral(WikipediaModel):
    sitename: str | None = None
    base: str | None = None
    mainpage: str | None = None
    wikiid: str | None = None
    lang: str | None = None
    generator: str | None = None


class PageCategory(WikipediaModel):
    category: str
    sortkey: str | None = None
    hidden: bool = False


class PageLink(WikipediaModel):
    ns: int | None = None
    title: str
    exists: bool = False


class ParsedPage(WikipediaModel):
    title: str
    pageid: int | None = None
    revid: int | None = None
    text: str | None = None
    categories: list[PageCategory] = Field(default_factory=list)
    links: list[PageLink] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    templates: list[PageLink] = Field(default_factory=list)


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise WikipediaValidationError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _query_block(payload: Any) -> Mapping[str, Any]:
    query = _require_mapping(payload).get("query")
    if query is None:
        return {}
    return _require_mapping(query)


def _list_branch(query: Mapping[str, Any], key: str) -> list[Any]:
    items = query.get(key, [])
    if not isinstance(items, list):
        raise WikipediaValidationError(f"expected query.{key} to be a list, got {type(items).__name__}")
    return items


def _validate(model: type[WikipediaModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise WikipediaValidationError(f"unexpected {model.__name__} payload: {exc}") from exc


def api_error(payload: Any) -> ApiErrorInfo | None:
    """Return the API-level ``error`` block, e.g. ``missingtitle`` for unknown pages."""
    error = _require_mapping(payload).get("error")
    if not isinstance(error, Mapping):
        return None
    return _validate(ApiErrorInfo, error)


def search_hits(payload: Any) -> list[SearchHit]:
    return [_validate(SearchHit, hit) for hit in _list_branch(_query_block(payload), "search")]


def category_members(payload: Any) -> list[CategoryMember]:
    members = _list_branch(_query_block(payload), "categorymembers")
    return [_validate(CategoryMember, member) for member in members]


def site_general(payload: Any) -> SiteGeneral | None:
    general = _query_block(payload).get("general")
    if general is None:
        return None
    return _validate(SiteGeneral, general)


def parsed_page(payload: Any) -> ParsedPage | None:
    parse = _require_mapping(payload).get("parse")
    if parse is None:
        return None
    return _validate(ParsedPage, parse)
