"""Injection of user-declared key terms as synthetic entities."""

import re
from collections.abc import Iterable, Sequence

from redline.common.models import AlignedEntity, KeyTermEntity


def parse_key_terms(key_terms: str | Iterable[str] | None) -> list[str]:
    """Split, trim and deduplicate key terms.

    Accepts a comma-separated string or an iterable of strings. Duplicates
    are compared case-insensitively and the first spelling is kept.
    """
    if not key_terms:
        return []
    if isinstance(key_terms, str):
        key_terms = key_terms.split(",")

    terms: list[str] = []
    seen: set[str] = set()
    for raw in key_terms:
        term = raw.strip()
        if not term or term.casefold() in seen:
            continue
        seen.add(term.casefold())
        terms.append(term)
    return terms


def find_key_terms(full_text: str, terms: Sequence[str]) -> list[KeyTermEntity]:
    """Emit one KeyTermEntity per term occurring in the transcript.

    Matching is a case-insensitive substring search; only the first
    occurrence is recorded and occurrences are not counted. Offsets index
    into ``full_text`` itself.
    """
    found: list[KeyTermEntity] = []
    for term in terms:
        match = re.search(re.escape(term), full_text, re.IGNORECASE)
        if match is None:
            continue
        found.append(
            KeyTermEntity(
                text=term,
                start_char=match.start(),
                end_char=match.end(),
                corrected_start_char=match.start(),
            )
        )
    return found


def enrich_entities(
    entities: Sequence[AlignedEntity],
    full_text: str,
    key_terms: str | Iterable[str] | None,
) -> list[AlignedEntity]:
    """Append key-term entities after the annotator-derived entities."""
    return [*entities, *find_key_terms(full_text, parse_key_terms(key_terms))]
