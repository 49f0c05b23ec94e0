"""
Tests for prompt assembly.

System role: Verification of context budgeting and chunk formatting
"""

from documind.configs.retrieval import PromptSettings
from documind.core.rag.prompt_builder import PromptBuilder
from documind.core.retrieval.models import RetrievalResult


def chunk(index: int, score: float, content: str = "x" * 20) -> RetrievalResult:
    return RetrievalResult(chunk_id=f"chunk-{index}", content=content, chunk_index=index, score=score)


class TestPromptBuilder:
    """Test suite for PromptBuilder."""

    def test_stops_before_exceeding_budget(self) -> None:
        # Arrange: each block is "[Chunk N]\n" + 20 chars = 30 chars
        builder = PromptBuilder(PromptSettings(max_context_chars=100))
        chunks = [chunk(0, 1.0), chunk(1, 0.8), chunk(2, 0.6), chunk(3, 0.4)]

        # Act
        built = builder.build(chunks, "What is x?")

        # Assert
        assert built.included_chunk_indices == [0, 1, 2]
        assert built.context_chars == 94

    def test_clustered_scores_shrink_budget(self) -> None:
        builder = PromptBuilder(PromptSettings(max_context_chars=100))
        chunks = [chunk(0, 1.0), chunk(1, 0.98), chunk(2, 0.95), chunk(3, 0.93)]

        built = builder.build(chunks, "What is x?")

        assert builder.context_budget(chunks) == 60
        assert built.included_chunk_indices == [0]

    def test_single_chunk_uses_full_budget(self) -> None:
        builder = PromptBuilder(PromptSettings(max_context_chars=100))

        assert builder.context_budget([chunk(0, 1.0)]) == 100

    def test_long_chunk_is_truncated_with_marker(self) -> None:
        builder = PromptBuilder(PromptSettings(max_chunk_chars=5))

        block = builder.format_chunk(chunk(7, 1.0, content="  abcdefgh  "))

        assert block == "[Chunk 7]\nabcde…"

    def test_prompt_contains_context_and_question(self) -> None:
        builder = PromptBuilder(PromptSettings())

        built = builder.build([chunk(2, 1.0, content="Rent is due monthly.")], "  When is rent due?  ")

        assert "[Chunk 2]\nRent is due monthly." in built.prompt
        assert "When is rent due?" in built.prompt
        assert "ONLY from the context" in built.prompt

    def test_context_never_exceeds_cap(self) -> None:
        settings = PromptSettings(max_context_chars=500, max_chunk_chars=120)
        builder = PromptBuilder(settings)
        chunks = [chunk(i, 1.0 - i * 0.05, content="word " * 40) for i in range(12)]

        built = builder.build(chunks, "q")

        assert 0 < built.context_chars <= 500
        assert built.included_chunk_indices == list(range(len(built.included_chunk_indices)))

    def test_first_block_over_budget_yields_empty_context(self) -> None:
        builder = PromptBuilder(PromptSettings(max_context_chars=10, max_chunk_chars=2000))

        built = builder.build([chunk(0, 1.0)], "q")

        assert built.included_chunk_indices == []
        assert built.context_chars == 0
