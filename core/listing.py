"""
Filter, sort and paginate a reconciled repository list for one dashboard request.

State is passed by value: the route parses a ListingQuery from the URL, calls
build_listing_page, and renders the returned ListingPage.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, List, Mapping, Sequence

from core.models import ReconciledRepository

ITEMS_PER_PAGE = 9
SORT_OPTIONS = ("name", "stars", "forks", "updated", "progress")
DEFAULT_SORT = "name"
ALL_LANGUAGES = "all"


@dataclass(frozen=True)
class ListingQuery:
    search: str = ""
    language: str = ALL_LANGUAGES
    sort: str = DEFAULT_SORT
    exclude_forks: bool = True
    page: int = 1

    def to_params(self, **overrides) -> Dict[str, str]:
        """Query-string parameters that reproduce this state (with overrides)."""
        query = replace(self, **overrides) if overrides else self
        params = {
            "q": query.search,
            "language": query.language,
            "sort": query.sort,
            "forks": "exclude" if query.exclude_forks else "include",
            "page": str(query.page),
        }
        return {k: v for k, v in params.items() if v != ""}


@dataclass(frozen=True)
class ListingPage:
    items: List[ReconciledRepository]
    query: ListingQuery
    total_matching: int
    total_pages: int
    languages: List[str]


def parse_listing_query(params: Mapping[str, str]) -> ListingQuery:
    """Build a ListingQuery from raw query parameters, falling back to defaults."""
    sort = (params.get("sort") or DEFAULT_SORT).strip().lower()
    if sort not in SORT_OPTIONS:
        sort = DEFAULT_SORT

    try:
        page = int(params.get("page") or 1)
    except (TypeError, ValueError):
        page = 1

    return ListingQuery(
        search=(params.get("q") or "").strip(),
        language=(params.get("language") or ALL_LANGUAGES).strip() or ALL_LANGUAGES,
        sort=sort,
        exclude_forks=(params.get("forks") or "exclude").strip().lower() != "include",
        page=max(1, page),
    )


def filter_repositories(
    items: Sequence[ReconciledRepository], query: ListingQuery
) -> List[ReconciledRepository]:
    needle = query.search.lower()
    language = query.language
    matches = []
    for repo in items:
        if needle and needle not in repo.name.lower():
            continue
        if language and language != ALL_LANGUAGES and repo.language != language:
            continue
        if query.exclude_forks and repo.is_fork:
            continue
        matches.append(repo)
    return matches


def sort_repositories(items: Sequence[ReconciledRepository], sort: str) -> List[ReconciledRepository]:
    # Two stable passes: name first, then the descending primary key.
    by_name = sorted(items, key=lambda r: r.name.lower())
    if sort == "stars":
        return sorted(by_name, key=lambda r: r.star_count, reverse=True)
    if sort == "forks":
        return sorted(by_name, key=lambda r: r.fork_count, reverse=True)
    if sort == "updated":
        return sorted(by_name, key=lambda r: r.updated_at, reverse=True)
    if sort == "progress":
        return sorted(by_name, key=lambda r: r.progress or 0, reverse=True)
    return by_name


def available_languages(items: Sequence[ReconciledRepository]) -> List[str]:
    return sorted({repo.language for repo in items if repo.language})


def build_listing_page(
    items: Sequence[ReconciledRepository],
    query: ListingQuery,
    per_page: int = ITEMS_PER_PAGE,
) -> ListingPage:
    matching = sort_repositories(filter_repositories(items, query), query.sort)
    total_pages = max(1, math.ceil(len(matching) / per_page))
    page = min(max(1, query.page), total_pages)
    start = (page - 1) * per_page
    return ListingPage(
        items=matching[start:start + per_page],
        query=replace(query, page=page),
        total_matching=len(matching),
        total_pages=total_pages,
        languages=available_languages(items),
    )


__all__ = [
    "ITEMS_PER_PAGE",
    "SORT_OPTIONS",
    "ListingQuery",
    "ListingPage",
    "parse_listing_query",
    "filter_repositories",
    "sort_repositories",
    "available_languages",
    "build_listing_page",
]
