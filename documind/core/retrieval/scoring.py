"""
Hybrid retrieval scoring.

Pure functions that tokenize queries, merge the dense and lexical channels,
normalize scores and trim the ranked list at the first large score drop.

Dependencies: re (stdlib)
System role: Ranking logic of the hybrid retriever
"""

import re
from typing import Iterable, Sequence

from documind.boundary.vdb import ScoredChunk, StoredChunk
from documind.core.retrieval.models import RetrievalResult

_NON_WORD = re.compile(r"\W+")


def tokenize_query(query: str, min_length: int = 3) -> list[str]:
    """
    Lowercase, split on non-word characters, drop short tokens, dedupe.

    Order of first occurrence is preserved.
    """
    tokens: list[str] = []
    seen: set[str] = set()
    for token in _NON_WORD.split(query.lower()):
        if len(token) >= min_length and token not in seen:
            seen.add(token)
            tokens.append(token)
    return tokens


def merge_channels(
    dense: Iterable[ScoredChunk],
    lexical: Iterable[StoredChunk],
    lexical_base_score: float = 0.35,
    hybrid_boost: float = 0.2,
) -> dict[str, ScoredChunk]:
    """
    Merge dense and lexical hits by chunk id.

    Dense-only hits keep their similarity and lexical-only hits get the
    base score. Hits found by both channels get their dense score plus
    the boost.
    """
    merged: dict[str, ScoredChunk] = {chunk.chunk_id: chunk for chunk in dense}
    for chunk in lexical:
        existing = merged.get(chunk.chunk_id)
        if existing is None:
            merged[chunk.chunk_id] = ScoredChunk(
                chunk_id=chunk.chunk_id,
                content=chunk.content,
                chunk_index=chunk.chunk_index,
                score=lexical_base_score,
            )
        else:
            merged[chunk.chunk_id] = existing.model_copy(
                update={"score": existing.score + hybrid_boost}
            )
    return merged


def normalize_scores(chunks: Sequence[ScoredChunk]) -> list[RetrievalResult]:
    """Min-max normalize to [0, 1]; when all scores are equal every result gets 1.0."""
    if not chunks:
        return []
    scores = [chunk.score for chunk in chunks]
    low, high = min(scores), max(scores)
    spread = high - low
    return [
        RetrievalResult(
            chunk_id=chunk.chunk_id,
            content=chunk.content,
            chunk_index=chunk.chunk_index,
            score=1.0 if spread == 0 else (chunk.score - low) / spread,
        )
        for chunk in chunks
    ]


def rank(results: Iterable[RetrievalResult], top_k: int) -> list[RetrievalResult]:
    """Sort by score descending (ties by chunk index) and keep the first top_k."""
    ordered = sorted(results, key=lambda result: (-result.score, result.chunk_index))
    return ordered[:top_k]


def trim_by_score_drop(
    results: Sequence[RetrievalResult],
    threshold: float = 0.15,
) -> list[RetrievalResult]:
    """
    Keep results while each score is within `threshold` of the previous one.

    Expects results sorted by descending score; stops at the first drop
    larger than the threshold. The first result is always kept.
    """
    if not results:
        return []
    kept = [results[0]]
    for result in results[1:]:
        if kept[-1].score - result.score > threshold:
            break
        kept.append(result)
    return kept
