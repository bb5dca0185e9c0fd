from __future__ import annotations
from typing import List, Sequence
import numpy as np

def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """
    Cosine similarity of two vectors in [-1, 1].
    A zero-magnitude vector scores 0 against anything.
    """
    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError("Vectors must have the same length")
    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))

def similarity_matrix(vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Full pairwise cosine-similarity matrix; zero rows score 0 everywhere."""
    m = np.asarray(vectors, dtype=np.float64)
    norms = np.linalg.norm(m, axis=1)
    safe = np.where(norms == 0, 1.0, norms)
    unit = m / safe[:, np.newaxis]
    sims = unit @ unit.T
    zero = norms == 0
    sims[zero, :] = 0.0
    sims[:, zero] = 0.0
    return sims

def weighted_mean(vectors: Sequence[Sequence[float]], weights: Sequence[float]) -> List[float]:
    """Weighted average of `vectors`; weights are normalised to sum to 1."""
    m = np.asarray(vectors, dtype=np.float64)
    w = np.asarray(weights, dtype=np.float64)
    total = w.sum()
    if total == 0:
        w = np.full(len(w), 1.0 / len(w))
    else:
        w = w / total
    return (w[:, np.newaxis] * m).sum(axis=0).tolist()
