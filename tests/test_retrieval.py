"""Tests for the in-memory cosine ranker."""
import pytest

from chunklab.retrieval import EmbeddedChunk, InMemoryIndex, rank


def embedded(id: int, embedding) -> EmbeddedChunk:
    return EmbeddedChunk(id=id, text=f"chunk {id}", tokens=2, characters=7, embedding=embedding)


class TestRank:
    def test_orders_by_similarity(self) -> None:
        chunks = [embedded(0, [0.0, 1.0]), embedded(1, [1.0, 0.0]), embedded(2, [1.0, 1.0])]
        results = rank([1.0, 0.0], chunks, top_k=3)
        assert [r.chunk_id for r in results] == [1, 2, 0]
        assert results[0].score == pytest.approx(1.0)
        assert results[1].score == pytest.approx(0.7071, abs=1e-4)
        assert results[0].text == "chunk 1"

    def test_top_k_truncates(self) -> None:
        chunks = [embedded(i, [1.0, float(i)]) for i in range(10)]
        assert len(rank([1.0, 0.0], chunks, top_k=5)) == 5

    def test_ties_keep_document_order(self) -> None:
        chunks = [embedded(i, [2.0, 0.0]) for i in range(4)]
        assert [r.chunk_id for r in rank([1.0, 0.0], chunks)] == [0, 1, 2, 3]

    def test_chunks_without_embedding_are_skipped(self) -> None:
        chunks = [embedded(0, None), embedded(1, [1.0, 0.0])]
        assert [r.chunk_id for r in rank([1.0, 0.0], chunks)] == [1]
        assert rank([1.0, 0.0], [embedded(0, None)]) == []

    def test_zero_vectors_score_zero(self) -> None:
        results = rank([0.0, 0.0], [embedded(0, [1.0, 0.0])])
        assert results[0].score == 0.0
        results = rank([1.0, 0.0], [embedded(0, [0.0, 0.0])])
        assert results[0].score == 0.0

    def test_dimension_mismatch(self) -> None:
        with pytest.raises(ValueError):
            rank([1.0, 0.0], [embedded(0, [1.0, 0.0, 0.0])])


class TestInMemoryIndex:
    def test_add_and_search(self) -> None:
        index = InMemoryIndex()
        index.add([[1.0, 0.0], [0.0, 1.0]], [{"id": "a"}, {"id": "b"}])
        assert len(index) == 2
        assert index.dim == 2
        assert index.search([0.0, 3.0], top_k=1)[0][0] == 1

    def test_search_after_add_rebuilds_cache(self) -> None:
        index = InMemoryIndex(dim=2)
        index.add([[1.0, 0.0]], [{}])
        index.search([1.0, 0.0])
        index.add([[0.0, 1.0]], [{}])
        assert [row for row, _ in index.search([0.0, 1.0])] == [1, 0]

    def test_empty_index(self) -> None:
        assert InMemoryIndex().search([1.0]) == []
