from __future__ import annotations
import concurrent.futures
from dataclasses import dataclass
from typing import List, Optional
import numpy as np
from opentelemetry import context

from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick
from .heuristic import HeuristicStructuralChunker
from .paragraph_based import ParagraphBasedChunker
from ..config import ChunkingOptions
from ..embedding.base import BaseEncoder
from ..utils.logger import logger
from ..utils.telemetry import run_in_context
from ..utils.text import split_blank_line_paragraphs, round_half_up
from ..utils.vectors import cosine_similarity, similarity_matrix, weighted_mean

THRESHOLD_FACTOR = 0.8
OVERLAP_SIMILARITY = 0.6

@dataclass
class _Cluster:
    members: List[int]
    text: str
    embedding: List[float]

class SemanticChunker(BaseChunker):
    """
    Embedding-driven agglomerative clustering of paragraphs.

    Every paragraph is embedded (one request each, fanned out over a thread
    pool), then adjacent clusters are merged greedily by their average
    pairwise similarity until about a third of the paragraphs remain, or
    `max_chunks` if smaller. `overlap` is a percentage: related clusters
    (cosine > 0.6) lend their most similar paragraphs to each other.

    Without an encoder or `embedding_api_key` the structural heuristic runs
    instead; provider failures also land there, flagged in the analysis.
    """
    name = "semantic"

    def __init__(self, encoder: Optional[BaseEncoder] = None, max_workers: int = 8):
        self.encoder = encoder
        self.max_workers = max(1, max_workers)

    def _resolve_encoder(self, options: ChunkingOptions) -> Optional[BaseEncoder]:
        if self.encoder is not None:
            return self.encoder
        if options.embedding_api_key:
            from ..embedding.openai import OpenAIEncoder
            return OpenAIEncoder(api_key=options.embedding_api_key)
        return None

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        encoder = self._resolve_encoder(options)
        if encoder is None:
            logger.debug("No embedding provider configured; using structural heuristics.")
            return HeuristicStructuralChunker().chunk(text, options)

        paragraphs = split_blank_line_paragraphs(text)
        if len(paragraphs) <= 1:
            return ParagraphBasedChunker().chunk(text, options)

        try:
            return self._cluster(paragraphs, encoder, options)
        except Exception as e:
            logger.warning(f"Semantic chunking failed ({type(e).__name__}: {e}). Falling back to heuristic chunking.")
            fallback = HeuristicStructuralChunker().chunk(text, options)
            notes = (
                f"Embedding-based chunking failed ({type(e).__name__}: {e}); fell back to heuristic chunking. "
                + fallback.analysis.notes
            )
            return build_result(fallback.chunks, notes, self.name, fallback="heuristic")

    def fetch_embeddings(self, paragraphs: List[str], encoder: BaseEncoder) -> List[List[float]]:
        """One embedding per paragraph, requested concurrently and stored by index."""
        embeddings: List[Optional[List[float]]] = [None] * len(paragraphs)
        workers = min(self.max_workers, len(paragraphs))
        parent = context.get_current()
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(run_in_context, parent, encoder.embed, p): i for i, p in enumerate(paragraphs)}
            for future in concurrent.futures.as_completed(futures):
                embeddings[futures[future]] = future.result()
        return embeddings

    @staticmethod
    def find_boundaries(sims: np.ndarray) -> List[int]:
        """Paragraphs whose mean neighbour similarity is a local minimum below the dynamic threshold."""
        n = sims.shape[0]
        adjacent = [sims[i, i + 1] for i in range(n - 1)]
        threshold = THRESHOLD_FACTOR * (sum(adjacent) / len(adjacent))
        boundaries = [0]
        for i in range(1, n - 1):
            prev_sim, next_sim = sims[i - 1, i], sims[i, i + 1]
            current = (prev_sim + next_sim) / 2
            if current < threshold and current < prev_sim and current < next_sim:
                boundaries.append(i)
        boundaries.append(n)
        return boundaries

    @staticmethod
    def merge_adjacent(sims: np.ndarray, target: float) -> List[List[int]]:
        """Greedy agglomeration of neighbouring clusters until at most `target` remain."""
        clusters = [[i] for i in range(sims.shape[0])]
        while len(clusters) > target:
            best, best_at = float("-inf"), -1
            for i in range(len(clusters) - 1):
                avg = float(sims[np.ix_(clusters[i], clusters[i + 1])].mean())
                if avg > best:
                    best, best_at = avg, i
            if best_at < 0:
                break
            clusters[best_at] = clusters[best_at] + clusters.pop(best_at + 1)
        return [sorted(c) for c in clusters]

    def _cluster(self, paragraphs: List[str], encoder: BaseEncoder, options: ChunkingOptions) -> ChunkingResult:
        max_chunks = pick(options.max_chunks, 0)
        overlap = pick(options.overlap, 0)

        embeddings = self.fetch_embeddings(paragraphs, encoder)
        sims = similarity_matrix(embeddings)

        boundaries = self.find_boundaries(sims)
        logger.debug(f"Semantic boundaries at paragraphs {boundaries[1:-1]}")

        n = len(paragraphs)
        target = min(max_chunks, n / 3) if max_chunks > 0 else n / 3
        groups = self.merge_adjacent(sims, target)

        clusters = []
        for members in groups:
            texts = [paragraphs[i] for i in members]
            clusters.append(_Cluster(
                members=members,
                text="\n\n".join(texts),
                embedding=weighted_mean([embeddings[i] for i in members], [len(t) for t in texts]),
            ))
        clusters.sort(key=lambda c: min(c.members))

        if overlap > 0 and len(clusters) > 1:
            texts = [self._with_overlap(i, clusters, paragraphs, embeddings, overlap) for i in range(len(clusters))]
        else:
            texts = [c.text for c in clusters]

        chunks = [Chunk.from_text(i, t) for i, t in enumerate(texts)]
        notes = (
            f"Advanced semantic chunking with OpenAI embeddings identified {len(chunks)} thematic sections "
            f"using agglomerative clustering"
        )
        if overlap > 0:
            notes += " with intelligent semantic-based overlap between related chunks"
        notes += f" ({len(boundaries) - 2} low-similarity boundaries detected)."
        return build_result(chunks, notes, self.name)

    @staticmethod
    def _with_overlap(i: int, clusters: List[_Cluster], paragraphs: List[str],
                      embeddings: List[List[float]], overlap: int) -> str:
        own = clusters[i]
        text = own.text
        for j, other in enumerate(clusters):
            if j == i:
                continue
            sim = cosine_similarity(own.embedding, other.embedding)
            if sim <= OVERLAP_SIMILARITY:
                continue
            ranked = sorted(other.members, key=lambda idx: cosine_similarity(own.embedding, embeddings[idx]), reverse=True)
            take = max(1, round_half_up(sim * (overlap / 100) * len(ranked)))
            borrowed = "\n\n".join(paragraphs[idx] for idx in ranked[:take])
            text = borrowed + "\n\n" + text if j < i else text + "\n\n" + borrowed
        return text
