from __future__ import annotations

import pytest

from wikipedia_jp_api.exceptions import WikipediaValidationError
from wikipedia_jp_api.models import api_error, category_members, parsed_page, search_hits, site_general


def test_parsed_page_reads_formatversion_2_payload() -> None:
    payload = {
        "parse": {
            "title": "日本",
            "pageid": 2100,
            "revid": 99,
            "text": "<div>...</div>",
            "categories": [{"sortkey": "", "category": "日本", "hidden": False}],
            "links": [{"ns": 0, "title": "東京", "exists": True}],
            "images": ["Flag_of_Japan.svg"],
            "templates": [{"ns": 10, "title": "Template:Infobox", "exists": True}],
            "unknown": "ignored",
        }
    }
    page = parsed_page(payload)
    assert page is not None
    assert page.title == "日本"
    assert page.revid == 99
    assert page.categories[0].category == "日本"
    assert page.links[0].title == "東京"
    assert page.images == ["Flag_of_Japan.svg"]


def test_parsed_page_missing_block_returns_none() -> None:
    assert parsed_page({"batchcomplete": True}) is None


def test_api_error_for_missing_title() -> None:
    payload = {"error": {"code": "missingtitle", "info": "The page you specified doesn't exist."}}
    error = api_error(payload)
    assert error is not None
    assert error.code == "missingtitle"
    assert parsed_page(payload) is None


def test_search_hits_and_category_members() -> None:
    search = {"query": {"search": [{"ns": 0, "title": "TypeScript", "pageid": 1, "snippet": "<b>TS</b>"}]}}
    members = {"query": {"categorymembers": [{"pageid": 5, "ns": 0, "title": "Python"}]}}

    assert [hit.title for hit in search_hits(search)] == ["TypeScript"]
    assert [member.title for member in category_members(members)] == ["Python"]
    assert search_hits({}) == []


def test_site_general() -> None:
    general = site_general({"query": {"general": {"sitename": "Wikipedia", "wikiid": "jawiki", "lang": "ja"}}})
    assert general is not None
    assert general.wikiid == "jawiki"
    assert site_general({"query": {}}) is None


def test_extractors_reject_raw_text() -> None:
    with pytest.raises(WikipediaValidationError, match="expected a JSON object"):
        search_hits("<api />")


def test_extractors_reject_malformed_entries() -> None:
    with pytest.raises(WikipediaValidationError, match="SearchHit"):
        search_hits({"query": {"search": [{"pageid": 1}]}})


@pytest.mark.parametrize(
    "payload",
    [
        {"query": ["x"]},
        {"query": "x"},
        {"query": {"search": None}},
        {"query": {"search": {"title": "TypeScript"}}},
    ],
)
def test_search_hits_reject_malformed_query_blocks(payload) -> None:
    with pytest.raises(WikipediaValidationError):
        search_hits(payload)


def test_category_members_and_site_general_reject_malformed_query_blocks() -> None:
    with pytest.raises(WikipediaValidationError, match="query.categorymembers"):
        category_members({"query": {"categorymembers": "Python"}})
    with pytest.raises(WikipediaValidationError, match="expected a JSON object"):
        site_general({"query": ["general"]})
