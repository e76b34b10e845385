"""Command-line access to the Japanese Wikipedia API."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

from .client import (
    WikipediaClient,
    category_members_params,
    page_params,
    search_params,
    site_info_params,
)
from .exceptions import WikipediaApiError, WikipediaValidationError
from .models import api_error, category_members, parsed_page, search_hits, site_general
from .request_options import WikipediaApiOptions


def _parse_pairs(pairs: Sequence[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise WikipediaValidationError(f"expected key=value, got {pair!r}")
        params[key] = value
    return params


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wikipedia-jp-api")
    parser.add_argument("--max-retries", type=int, default=None)
    parser.add_argument("--timeout", type=int, default=None, help="per-attempt timeout in milliseconds")
    parser.add_argument("--user-agent", default=None)
    parser.add_argument("--summary", action="store_true", help="print a short summary instead of JSON")
    parser.add_argument("-v", "--verbose", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)
    page = commands.add_parser("page")
    page.add_argument("title")
    search = commands.add_parser("search")
    search.add_argument("query")
    search.add_argument("--limit", type=int, default=10)
    category = commands.add_parser("category")
    category.add_argument("name")
    category.add_argument("--limit", type=int, default=10)
    commands.add_parser("siteinfo")
    call = commands.add_parser("call")
    call.add_argument("params", nargs="+", metavar="KEY=VALUE")
    return parser


def _params_for(args: argparse.Namespace) -> dict[str, Any]:
    if args.command == "page":
        return page_params(args.title)
    if args.command == "search":
        return search_params(args.query, args.limit)
    if args.command == "category":
        return category_members_params(args.name, args.limit)
    if args.command == "siteinfo":
        return site_info_params()
    return _parse_pairs(args.params)


def _summarize(command: str, result: Any) -> list[str]:
    if not isinstance(result, dict):
        return [str(result)]
    error = api_error(result)
    if error is not None:
        return [f"error: {error.code}: {error.info}"]
    if command == "page":
        page = parsed_page(result)
        if page is None:
            return ["no page"]
        return [
            f"title: {page.title}",
            f"pageid: {page.pageid}",
            f"revid: {page.revid}",
            f"categories: {len(page.categories)}",
            f"links: {len(page.links)}",
        ]
    if command == "search":
        hits = search_hits(result)
        return [f"results: {len(hits)}"] + [f"  {hit.title}" for hit in hits]
    if command == "category":
        members = category_members(result)
        return [f"members: {len(members)}"] + [f"  {member.title}" for member in members]
    if command == "siteinfo":
        general = site_general(result)
        if general is None:
            return ["no siteinfo"]
        return [
            f"sitename: {general.sitename}",
            f"base: {general.base}",
            f"mainpage: {general.mainpage}",
            f"wikiid: {general.wikiid}",
        ]
    return [f"keys: {', '.join(sorted(result))}"]


def _main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    options = WikipediaApiOptions(
        max_retries=args.max_retries,
        timeout=args.timeout,
        user_agent=args.user_agent,
    )
    try:
        params = _params_for(args)
        with WikipediaClient() as client:
            result = client.request(params, options=options)
        lines = _summarize(args.command, result) if args.summary else None
    except WikipediaApiError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    if lines is not None:
        for line in lines:
            print(line)
    elif isinstance(result, str):
        print(result)
    else:
        print(json.dumps(result, ensure_ascii=False, indent=2))
    return 0


def main() -> None:
    raise SystemExit(_main())
