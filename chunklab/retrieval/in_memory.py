from __future__ import annotations
from dataclasses import dataclass
from typing import List, Dict, Any, Optional, Sequence
import numpy as np

from ..chunkers.base import Chunk

@dataclass
class EmbeddedChunk:
    id: int
    text: str
    tokens: int
    characters: int
    embedding: Optional[List[float]] = None

    @classmethod
    def from_chunk(cls, chunk: Chunk) -> "EmbeddedChunk":
        return cls(id=chunk.id, text=chunk.text, tokens=chunk.tokens, characters=chunk.characters)

@dataclass
class QueryResult:
    chunk_id: int
    text: str
    score: float

    def to_dict(self) -> Dict[str, Any]:
        return {"chunkId": self.chunk_id, "text": self.text, "score": self.score}

class InMemoryIndex:
    """
    Brute-force cosine index over chunk embeddings.
    Rows are normalised on first search; zero vectors score 0.
    """
    def __init__(self, dim: Optional[int] = None):
        self.dim = dim
        self.vecs = []
        self._vec_array = None  # Cache for numpy representation
        self.meta = []

    def __len__(self) -> int:
        return len(self.vecs)

    def add(self, vectors: List[List[float]], metas: List[Dict[str, Any]]):
        if len(vectors) != len(metas):
            raise ValueError("vectors and metas must have the same length")
        for v in vectors:
            if self.dim is None:
                self.dim = len(v)
            if len(v) != self.dim:
                raise ValueError("Vectors must have the same length")
        self.vecs.extend(vectors)
        self.meta.extend(metas)
        self._vec_array = None  # Invalidate cache on add

    def _normalised(self) -> np.ndarray:
        if self._vec_array is None:
            V = np.array(self.vecs, dtype=np.float64)
            norms = np.linalg.norm(V, axis=1)
            self._vec_array = V / np.where(norms == 0, 1.0, norms)[:, np.newaxis]
        return self._vec_array

    def search(self, query_vec: Sequence[float], top_k: int = 10) -> List[tuple]:
        """(row, score) pairs by descending similarity; ties keep insertion order."""
        if not self.vecs or top_k <= 0:
            return []
        q = np.asarray(query_vec, dtype=np.float64)
        if q.shape != (self.dim,):
            raise ValueError("Vectors must have the same length")
        norm = np.linalg.norm(q)
        if norm == 0:
            sims = np.zeros(len(self.vecs))
        else:
            sims = self._normalised() @ (q / norm)
        order = np.argsort(-sims, kind="stable")[:top_k]
        return [(int(i), float(sims[i])) for i in order]

def rank(query_embedding: Sequence[float], chunks: Sequence[EmbeddedChunk], top_k: int = 5) -> List[QueryResult]:
    """Rank embedded chunks against a query; chunks without an embedding are skipped."""
    embedded = [c for c in chunks if c.embedding is not None]
    if not embedded:
        return []
    index = InMemoryIndex(dim=len(query_embedding))
    index.add([c.embedding for c in embedded], [{"chunk_id": c.id, "text": c.text} for c in embedded])
    results = []
    for row, score in index.search(query_embedding, top_k=top_k):
        meta = index.meta[row]
        results.append(QueryResult(chunk_id=meta["chunk_id"], text=meta["text"], score=score))
    return results
