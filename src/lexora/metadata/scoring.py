# ABOUTME: Candidate scoring and best-result selection for multi-result provider queries.
# ABOUTME: Exact ISBN confirmation outweighs partial completeness; stable order breaks ties.

import logging
import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from lexora.metadata.isbn import normalize_isbn

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")

# Points per signal. An exact identifier match is worth all completeness signals together.
_POINTS_ISBN_MATCH = 50
_POINTS_COVER = 20
_POINTS_DESCRIPTION = 10
_POINTS_AUTHORS = 10
_POINTS_PUBLISHER = 5
_POINTS_PUBLISHED_DATE = 5

# Descriptions this short are usually stubs ("A novel.") and earn nothing.
_MIN_DESCRIPTION_LENGTH = 50

# Maximum bonus for word overlap with the query title (title queries only).
TITLE_SIMILARITY_WEIGHT = 25

_TITLE_NOISE_RE = re.compile(r"[^a-z0-9\s]")


@dataclass
class CandidateFields:
    """Provider-neutral view of the fields the scorer looks at.

    Adapters build one of these from each provider-native record so the
    scorer never has to know a provider's JSON layout.
    """

    title: str = ""
    identifiers: list[str] = field(default_factory=list)
    has_cover: bool = False
    description: str = ""
    authors: list[str] = field(default_factory=list)
    publisher: str = ""
    published_date: str = ""


@dataclass
class ScoredCandidate(Generic[RecordT]):
    """A provider-native record paired with its score."""

    record: RecordT
    score: int


def title_similarity(a: str, b: str) -> float:
    """Word-overlap (Jaccard) similarity between two titles, in [0.0, 1.0].

    Case and punctuation are ignored. Returns 0.0 when either title has no words.
    """
    words_a = set(_TITLE_NOISE_RE.sub("", a.lower()).split())
    words_b = set(_TITLE_NOISE_RE.sub("", b.lower()).split())
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def score_candidate(
    fields: CandidateFields,
    target_isbn: str | None = None,
    query_title: str | None = None,
) -> int:
    """Score one candidate. Higher is better; the scale is additive points."""
    score = 0

    if target_isbn and any(normalize_isbn(i) == target_isbn for i in fields.identifiers):
        score += _POINTS_ISBN_MATCH
    if fields.has_cover:
        score += _POINTS_COVER
    if len(fields.description) > _MIN_DESCRIPTION_LENGTH:
        score += _POINTS_DESCRIPTION
    if fields.authors:
        score += _POINTS_AUTHORS
    if fields.publisher:
        score += _POINTS_PUBLISHER
    if fields.published_date:
        score += _POINTS_PUBLISHED_DATE

    if query_title:
        score += round(TITLE_SIMILARITY_WEIGHT * title_similarity(query_title, fields.title))

    return score


def rank_candidates(
    records: Sequence[RecordT],
    target_isbn: str | None = None,
    *,
    extract: Callable[[RecordT], CandidateFields],
    query_title: str | None = None,
) -> list[ScoredCandidate[RecordT]]:
    """Score every record and return them best-first.

    The sort is stable, so records with equal scores keep the order the
    provider returned them in.
    """
    scored = [
        ScoredCandidate(record=r, score=score_candidate(extract(r), target_isbn, query_title))
        for r in records
    ]
    return sorted(scored, key=lambda c: c.score, reverse=True)


def select_best(
    records: Sequence[RecordT],
    target_isbn: str | None = None,
    *,
    extract: Callable[[RecordT], CandidateFields],
    query_title: str | None = None,
) -> RecordT | None:
    """Pick the single best record, or None when there are no records."""
    if not records:
        return None

    ranked = rank_candidates(records, target_isbn, extract=extract, query_title=query_title)
    for position, candidate in enumerate(ranked[:3], start=1):
        logger.debug(
            "Candidate %d: score=%d title=%r",
            position,
            candidate.score,
            extract(candidate.record).title,
        )
    return ranked[0].record
