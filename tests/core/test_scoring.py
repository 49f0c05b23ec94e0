"""
Tests for hybrid retrieval scoring functions.

System role: Verification of merging, normalization, ranking and trimming
"""

import pytest

from documind.boundary.vdb import ScoredChunk, StoredChunk
from documind.core.retrieval.models import RetrievalResult
from documind.core.retrieval.scoring import (
    merge_channels,
    normalize_scores,
    rank,
    tokenize_query,
    trim_by_score_drop,
)


def scored(chunk_id: str, score: float, index: int = 0) -> ScoredChunk:
    return ScoredChunk(chunk_id=chunk_id, content=chunk_id, chunk_index=index, score=score)


def result(chunk_id: str, score: float, index: int = 0) -> RetrievalResult:
    return RetrievalResult(chunk_id=chunk_id, content=chunk_id, chunk_index=index, score=score)


class TestTokenizeQuery:
    def test_lowercases_splits_and_drops_short_tokens(self) -> None:
        assert tokenize_query("What is the Notice-Period?") == ["what", "the", "notice", "period"]

    def test_dedupes_preserving_order(self) -> None:
        assert tokenize_query("rent RENT deposit rent") == ["rent", "deposit"]

    def test_min_length(self) -> None:
        assert tokenize_query("a an and also", min_length=4) == ["also"]

    def test_punctuation_only(self) -> None:
        assert tokenize_query("?!  ...") == []


class TestMergeChannels:
    def test_dense_only_keeps_similarity(self) -> None:
        merged = merge_channels([scored("a", 0.8)], [])

        assert merged["a"].score == pytest.approx(0.8)

    def test_lexical_only_gets_base_score(self) -> None:
        lexical = [StoredChunk(chunk_id="b", content="b", chunk_index=1)]

        merged = merge_channels([], lexical, lexical_base_score=0.35)

        assert merged["b"].score == pytest.approx(0.35)

    def test_both_channels_get_dense_plus_boost(self) -> None:
        # Arrange
        dense = [scored("a", 0.9), scored("b", 0.2)]
        lexical = [StoredChunk(chunk_id="b", content="b", chunk_index=0)]

        # Act
        merged = merge_channels(dense, lexical, lexical_base_score=0.35, hybrid_boost=0.2)

        # Assert
        assert merged["b"].score == pytest.approx(0.4)
        assert merged["a"].score == pytest.approx(0.9)

    def test_weak_dense_hit_ignores_lexical_base(self) -> None:
        dense = [scored("a", 0.05)]
        lexical = [StoredChunk(chunk_id="a", content="a", chunk_index=0)]

        merged = merge_channels(dense, lexical, lexical_base_score=0.35, hybrid_boost=0.2)

        assert merged["a"].score == pytest.approx(0.25)

    def test_no_duplicates(self) -> None:
        dense = [scored("a", 0.5)]
        lexical = [StoredChunk(chunk_id="a", content="a", chunk_index=0)]

        assert list(merge_channels(dense, lexical)) == ["a"]


class TestNormalizeScores:
    def test_min_max(self) -> None:
        normalized = normalize_scores([scored("a", 0.9), scored("b", 0.5), scored("c", 0.7)])

        assert [r.score for r in normalized] == pytest.approx([1.0, 0.0, 0.5])

    def test_equal_scores_all_become_one(self) -> None:
        normalized = normalize_scores([scored("a", 0.4), scored("b", 0.4)])

        assert [r.score for r in normalized] == [1.0, 1.0]

    def test_single_result_is_one(self) -> None:
        assert normalize_scores([scored("a", 0.1)])[0].score == 1.0

    def test_empty(self) -> None:
        assert normalize_scores([]) == []


class TestRank:
    def test_orders_by_score_then_index(self) -> None:
        ranked = rank([result("c", 0.5, 2), result("a", 1.0, 5), result("b", 0.5, 1)], top_k=10)

        assert [r.chunk_id for r in ranked] == ["a", "b", "c"]

    def test_truncates_to_top_k(self) -> None:
        ranked = rank([result(str(i), i / 10, i) for i in range(10)], top_k=3)

        assert [r.chunk_id for r in ranked] == ["9", "8", "7"]


class TestTrimByScoreDrop:
    def test_stops_at_large_drop(self) -> None:
        trimmed = trim_by_score_drop([result("a", 0.90), result("b", 0.85), result("c", 0.50)], 0.15)

        assert [r.chunk_id for r in trimmed] == ["a", "b"]

    def test_keeps_gradual_decline(self) -> None:
        results = [result("a", 1.0), result("b", 0.9), result("c", 0.8), result("d", 0.7)]

        assert len(trim_by_score_drop(results, 0.15)) == 4

    def test_first_result_always_kept(self) -> None:
        assert [r.chunk_id for r in trim_by_score_drop([result("a", 0.01)])] == ["a"]

    def test_empty(self) -> None:
        assert trim_by_score_drop([]) == []
