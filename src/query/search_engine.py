"""Tiered free-text relevance search.

This module ranks records against a query over schema-declared
searchable fields. Each field scores by the first matching tier:

    exact (case-insensitive)      1.0
    prefix (case-insensitive)     0.8
    substring (case-insensitive)  0.6
    in-order subsequence (fuzzy)  0.3

Field scores are weighted, summed, and divided by the number of fields
that hold a value, giving a record relevance in [0, 1].
"""

from __future__ import annotations

from typing import Any, Sequence

from core.constants import (
    EXACT_MATCH_SCORE,
    FUZZY_MATCH_SCORE,
    PREFIX_MATCH_SCORE,
    SUBSTRING_MATCH_SCORE,
)
from core.field_values import to_search_text
from core.logging_config import get_logger
from core.types import FieldDescriptor, GridSchema, Record, SearchHit, SearchOptions
from query.filter_engine import is_disabled

_LOGGER = get_logger(__name__)


def search_records(
    records: Sequence[Record],
    query: str,
    schema: GridSchema,
    options: SearchOptions | None = None,
) -> list[SearchHit]:
    """Rank records against a free-text query.

    Args:
        records: Input records; never mutated.
        query: Free-text query.
        schema: Schema declaring searchable fields and weights.
        options: Threshold, cap, fuzzy, and soft-delete settings.

    Returns:
        Hits sorted by descending relevance, ties in input order.
    """
    options = options or SearchOptions()
    eligible = [
        record for record in records if options.include_disabled or not is_disabled(record)
    ]
    term = query.strip().lower()
    if not term:
        return [SearchHit(record=record, relevance=1.0) for record in eligible]
    fields = schema.searchable_fields()
    hits = []
    for record in eligible:
        relevance = score_record(record, term, fields, options.fuzzy)
        if relevance >= options.min_relevance and relevance > 0.0:
            hits.append(SearchHit(record=record, relevance=relevance))
    # sorted() is stable, so equal scores keep input order.
    ranked = sorted(hits, key=lambda hit: hit.relevance, reverse=True)[: options.max_results]
    _LOGGER.debug(
        "records_searched",
        query=query,
        candidate_count=len(eligible),
        hit_count=len(hits),
        returned_count=len(ranked),
    )
    return ranked


def score_record(
    record: Record,
    term: str,
    fields: Sequence[FieldDescriptor],
    fuzzy: bool = True,
) -> float:
    """Compute one record's relevance for a lowercased query term."""
    total = 0.0
    considered = 0
    for descriptor in fields:
        value = record.get(descriptor.name)
        if value is None:
            continue
        considered += 1
        total += score_value(value, term, fuzzy) * descriptor.search_weight
    if considered == 0:
        return 0.0
    return min(1.0, total / considered)


def score_value(value: Any, term: str, fuzzy: bool = True) -> float:
    """Score one field value against a lowercased query term."""
    text = to_search_text(value).lower()
    if text == term:
        return EXACT_MATCH_SCORE
    if text.startswith(term):
        return PREFIX_MATCH_SCORE
    if term in text:
        return SUBSTRING_MATCH_SCORE
    if fuzzy and is_subsequence(term, text):
        return FUZZY_MATCH_SCORE
    return 0.0


def is_subsequence(term: str, text: str) -> bool:
    """Return whether every character of term appears in text in order."""
    remaining = iter(text)
    return all(character in remaining for character in term)
