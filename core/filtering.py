"""Filter, fuzzy-search, and sort pipeline for prompt views.

Every function here is pure: inputs are never mutated and the same inputs
always produce the same ordered output.

Stages run in a fixed order and AND together: category, tags, AI model,
favourites, fuzzy search, then sort. Within the category, tag, and model
stages a record passes when it matches any selected value.

Updates:
  v0.3.0 - 2026-10-09 - Make fuzzy scoring pluggable through the SearchScorer protocol.
  v0.2.0 - 2026-10-05 - Keep records without lastUsed after dated ones in original order.
  v0.1.0 - 2026-10-02 - Initial filter and sort helpers.
"""

from __future__ import annotations

import difflib
import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from config.settings import DEFAULT_SEARCH_MIN_SIMILARITY
from models.preferences import SortOption

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from models.filter_options import PromptFilters
    from models.prompt_model import Prompt

_TOKEN_PATTERN = re.compile(r"\w+", re.UNICODE)


@runtime_checkable
class SearchScorer(Protocol):
    """Strategy returning a similarity in ``[0, 1]`` between a query and a prompt."""

    def score(self, query: str, prompt: Prompt) -> float:
        """Return how closely *prompt* matches *query*."""
        ...


def _searchable_fields(prompt: Prompt) -> list[str]:
    fields = [prompt.title, prompt.content, *prompt.tags]
    if prompt.notes:
        fields.append(prompt.notes)
    return fields


class SequenceMatcherScorer:
    """Typo-tolerant scorer built on :class:`difflib.SequenceMatcher`.

    Any case-insensitive substring hit in a searchable field scores ``1.0``.
    Otherwise each query token is compared against every word of the title,
    content, tags, and notes; a token contained in a word counts as a full
    match, else its best ``SequenceMatcher`` ratio is used. The prompt score
    is the mean of the per-token bests.
    """

    def score(self, query: str, prompt: Prompt) -> float:
        needle = query.strip().casefold()
        if not needle:
            return 1.0
        fields = [field.casefold() for field in _searchable_fields(prompt)]
        if any(needle in field for field in fields):
            return 1.0

        query_tokens = _TOKEN_PATTERN.findall(needle)
        if not query_tokens:
            return 0.0
        words = {word for field in fields for word in _TOKEN_PATTERN.findall(field)}
        if not words:
            return 0.0

        total = 0.0
        for token in query_tokens:
            best = 0.0
            for word in words:
                if token in word:
                    best = 1.0
                    break
                ratio = difflib.SequenceMatcher(None, token, word).ratio()
                if ratio > best:
                    best = ratio
            total += best
        return total / len(query_tokens)


DEFAULT_SCORER = SequenceMatcherScorer()


# Filter stages ---------------------------------------------------------- #


def filter_by_categories(prompts: Iterable[Prompt], categories: frozenset[str]) -> list[Prompt]:
    if not categories:
        return list(prompts)
    return [prompt for prompt in prompts if prompt.category in categories]


def filter_by_tags(prompts: Iterable[Prompt], tags: frozenset[str]) -> list[Prompt]:
    """Keep prompts sharing at least one tag with *tags*."""
    if not tags:
        return list(prompts)
    return [prompt for prompt in prompts if any(tag in tags for tag in prompt.tags)]


def filter_by_ai_models(prompts: Iterable[Prompt], ai_models: frozenset[str]) -> list[Prompt]:
    if not ai_models:
        return list(prompts)
    return [prompt for prompt in prompts if prompt.ai_model in ai_models]


def filter_favorites(prompts: Iterable[Prompt], favorites_only: bool) -> list[Prompt]:
    if not favorites_only:
        return list(prompts)
    return [prompt for prompt in prompts if prompt.is_favorite]


def apply_filters(prompts: Iterable[Prompt], filters: PromptFilters) -> list[Prompt]:
    """Apply the category, tag, model, and favourites stages in order."""
    result = filter_by_categories(prompts, filters.categories)
    result = filter_by_tags(result, filters.tags)
    result = filter_by_ai_models(result, filters.ai_models)
    return filter_favorites(result, filters.favorites_only)


def search_prompts(
    prompts: Sequence[Prompt],
    query: str,
    *,
    scorer: SearchScorer | None = None,
    min_similarity: float = DEFAULT_SEARCH_MIN_SIMILARITY,
) -> list[Prompt]:
    """Return prompts scoring at least *min_similarity*, best match first.

    Ties keep their input order. An empty query returns the input unchanged.
    """
    needle = query.strip()
    if not needle:
        return list(prompts)
    active_scorer = scorer or DEFAULT_SCORER
    scored: list[tuple[float, Prompt]] = []
    for prompt in prompts:
        similarity = active_scorer.score(needle, prompt)
        if similarity >= min_similarity:
            scored.append((similarity, prompt))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [prompt for _, prompt in scored]


# Sorting ---------------------------------------------------------------- #


def sort_prompts(prompts: Sequence[Prompt], sort_by: SortOption) -> list[Prompt]:
    """Return prompts stably sorted by *sort_by*."""
    if sort_by is SortOption.ALPHABETICAL:
        return sorted(prompts, key=lambda prompt: prompt.title.casefold())
    if sort_by is SortOption.LAST_USED:
        used = [prompt for prompt in prompts if prompt.last_used is not None]
        unused = [prompt for prompt in prompts if prompt.last_used is None]
        used.sort(key=lambda prompt: prompt.last_used, reverse=True)  # type: ignore[arg-type, return-value]
        return used + unused
    if sort_by is SortOption.FAVORITES:
        return sorted(prompts, key=lambda prompt: not prompt.is_favorite)
    if sort_by is SortOption.MOST_USED:
        return sorted(prompts, key=lambda prompt: prompt.usage_count, reverse=True)
    return sorted(prompts, key=lambda prompt: prompt.date_added, reverse=True)


def build_view(
    prompts: Iterable[Prompt],
    filters: PromptFilters,
    sort_by: SortOption = SortOption.DATE_ADDED,
    *,
    scorer: SearchScorer | None = None,
    min_similarity: float = DEFAULT_SEARCH_MIN_SIMILARITY,
) -> list[Prompt]:
    """Return the filtered, searched, and sorted view of *prompts*."""
    filtered = apply_filters(prompts, filters)
    searched = search_prompts(
        filtered,
        filters.search_query,
        scorer=scorer,
        min_similarity=min_similarity,
    )
    return sort_prompts(searched, sort_by)


__all__ = [
    "DEFAULT_SCORER",
    "SearchScorer",
    "SequenceMatcherScorer",
    "apply_filters",
    "build_view",
    "filter_by_ai_models",
    "filter_by_categories",
    "filter_by_tags",
    "filter_favorites",
    "search_prompts",
    "sort_prompts",
]
