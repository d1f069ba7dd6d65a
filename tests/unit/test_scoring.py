# ABOUTME: Unit tests for candidate scoring and best-result selection.
# ABOUTME: Validates point weights, ISBN dominance, stable tie-breaking, and title similarity.

from typing import Any

import pytest

from lexora.metadata.googlebooks_parser import candidate_fields
from lexora.metadata.scoring import (
    CandidateFields,
    rank_candidates,
    score_candidate,
    select_best,
    title_similarity,
)
from tests.fixtures.googlebooks_responses import (
    VOLUME_EXACT,
    VOLUME_NEAR_MATCH,
    VOLUME_SPARSE,
)

_LONG = "x" * 51


def _fields(record: dict[str, Any]) -> CandidateFields:
    """Extractor for tests that score plain CandidateFields wrapped in a dict."""
    return record["fields"]


class TestScoreCandidate:
    """Tests for score_candidate()."""

    def test_empty_candidate_scores_zero(self) -> None:
        assert score_candidate(CandidateFields(), "9780134685991") == 0

    def test_fully_populated_exact_match_scores_100(self) -> None:
        """All signals present: 50 + 20 + 10 + 10 + 5 + 5."""
        fields = CandidateFields(
            identifiers=["978-0-13-468599-1"],
            has_cover=True,
            description=_LONG,
            authors=["Joshua Bloch"],
            publisher="Addison-Wesley",
            published_date="2017",
        )
        assert score_candidate(fields, "9780134685991") == 100

    @pytest.mark.parametrize(
        ("fields", "expected"),
        [
            (CandidateFields(identifiers=["9780134685991"]), 50),
            (CandidateFields(has_cover=True), 20),
            (CandidateFields(description=_LONG), 10),
            (CandidateFields(authors=["A"]), 10),
            (CandidateFields(publisher="P"), 5),
            (CandidateFields(published_date="2001"), 5),
        ],
    )
    def test_individual_signal_weights(self, fields: CandidateFields, expected: int) -> None:
        assert score_candidate(fields, "9780134685991") == expected

    def test_short_description_earns_nothing(self) -> None:
        """Descriptions of 50 characters or fewer are treated as stubs."""
        assert score_candidate(CandidateFields(description="x" * 50)) == 0

    def test_identifier_comparison_normalizes(self) -> None:
        """Listed identifiers are normalized before comparison."""
        fields = CandidateFields(identifiers=["0-306-40615-x"])
        assert score_candidate(fields, "030640615X") == 50

    def test_no_target_means_no_identifier_points(self) -> None:
        fields = CandidateFields(identifiers=["9780134685991"])
        assert score_candidate(fields, None) == 0

    def test_title_bonus_only_with_query_title(self) -> None:
        """Title similarity adds up to 25 points when a query title is given."""
        fields = CandidateFields(title="Effective Java")
        assert score_candidate(fields) == 0
        assert score_candidate(fields, query_title="effective java") == 25


class TestTitleSimilarity:
    """Tests for title_similarity()."""

    def test_identical_titles(self) -> None:
        assert title_similarity("Effective Java", "Effective Java") == 1.0

    def test_ignores_case_and_punctuation(self) -> None:
        assert title_similarity("Effective Java!", "effective, java") == 1.0

    def test_partial_overlap_is_jaccard(self) -> None:
        """{effective, java} vs {effective, java, 2nd, edition}: 2 / 4."""
        assert title_similarity("Effective Java", "Effective Java (2nd Edition)") == 0.5

    def test_disjoint_titles(self) -> None:
        assert title_similarity("Dune", "Kokoro") == 0.0

    def test_empty_title_scores_zero(self) -> None:
        assert title_similarity("", "") == 0.0
        assert title_similarity("Dune", "!!!") == 0.0


class TestSelectBest:
    """Tests for select_best() and rank_candidates()."""

    def test_empty_list_returns_none(self) -> None:
        assert select_best([], "9780134685991", extract=candidate_fields) is None

    def test_exact_isbn_match_wins_regardless_of_order(self) -> None:
        """The exact-match volume is chosen whether it is listed first or second."""
        forward = [VOLUME_EXACT, VOLUME_NEAR_MATCH]
        backward = [VOLUME_NEAR_MATCH, VOLUME_EXACT]
        assert select_best(forward, "9780134685991", extract=candidate_fields) is VOLUME_EXACT
        assert select_best(backward, "9780134685991", extract=candidate_fields) is VOLUME_EXACT

    def test_exact_match_beats_candidate_missing_a_signal(self) -> None:
        """A bare exact ISBN (50) outranks a near-match lacking only a date (45)."""
        bare_exact = {"fields": CandidateFields(identifiers=["9780134685991"])}
        rich = {
            "fields": CandidateFields(
                has_cover=True,
                description=_LONG,
                authors=["A"],
                publisher="P",
            )
        }
        assert select_best([rich, bare_exact], "9780134685991", extract=_fields) is bare_exact

    def test_exact_match_ties_complete_candidate(self) -> None:
        """Every completeness signal together equals the ISBN match; provider order decides."""
        bare_exact = {"fields": CandidateFields(identifiers=["9780134685991"])}
        complete = {
            "fields": CandidateFields(
                has_cover=True,
                description=_LONG,
                authors=["A"],
                publisher="P",
                published_date="2000",
            )
        }
        assert score_candidate(bare_exact["fields"], "9780134685991") == 50
        assert score_candidate(complete["fields"], "9780134685991") == 50
        assert select_best([complete, bare_exact], "9780134685991", extract=_fields) is complete
        assert select_best([bare_exact, complete], "9780134685991", extract=_fields) is bare_exact

    def test_ties_keep_provider_order(self) -> None:
        """Equal scores: the first-listed candidate is selected."""
        first = {"fields": CandidateFields(authors=["A"])}
        second = {"fields": CandidateFields(authors=["B"])}
        assert select_best([first, second], "9780134685991", extract=_fields) is first
        assert select_best([second, first], "9780134685991", extract=_fields) is second

    def test_rank_orders_best_first_and_stable(self) -> None:
        records = [
            {"name": "a", "fields": CandidateFields(publisher="P")},
            {"name": "b", "fields": CandidateFields(has_cover=True)},
            {"name": "c", "fields": CandidateFields(published_date="1999")},
        ]
        ranked = rank_candidates(records, None, extract=_fields)
        assert [c.record["name"] for c in ranked] == ["b", "a", "c"]
        assert [c.score for c in ranked] == [20, 5, 5]

    def test_query_title_prefers_closer_title(self) -> None:
        """For title searches, word overlap separates otherwise similar candidates."""
        exact_title = {"fields": CandidateFields(title="Effective Java", authors=["A"])}
        other_title = {"fields": CandidateFields(title="Java Puzzlers", authors=["A"])}
        best = select_best(
            [other_title, exact_title], extract=_fields, query_title="Effective Java"
        )
        assert best is exact_title

    def test_sparse_volume_loses_to_complete_one(self) -> None:
        """Without an ISBN target, completeness decides."""
        best = select_best([VOLUME_SPARSE, VOLUME_NEAR_MATCH], extract=candidate_fields)
        assert best is VOLUME_NEAR_MATCH
