from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple
from .base import BaseChunker, ChunkingResult, build_result
from ..config import ChunkingOptions
from ..embedding.base import BaseEncoder
from ..utils.logger import logger
from ..utils.text import (
    split_blank_line_paragraphs, count_sentence_boundaries, count_tokens, variance,
    has_code, has_lists, has_headers, round_half_up,
)

def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))

@dataclass
class DocumentProfile:
    """Shape statistics the selector reasons over."""
    paragraphs: int
    sentences: int
    tokens: int
    avg_sentence_length: float
    avg_paragraph_size: float
    paragraph_variance: float
    max_paragraph_length: int
    has_code: bool
    has_lists: bool
    has_headers: bool

    @classmethod
    def from_text(cls, text: str) -> "DocumentProfile":
        paragraphs = split_blank_line_paragraphs(text)
        lengths = [len(p) for p in paragraphs]
        sentences = count_sentence_boundaries(text) + 1
        tokens = count_tokens(text)
        return cls(
            paragraphs=len(paragraphs),
            sentences=sentences,
            tokens=tokens,
            avg_sentence_length=tokens / sentences,
            avg_paragraph_size=tokens / len(paragraphs) if paragraphs else tokens,
            paragraph_variance=variance(lengths),
            max_paragraph_length=max(lengths, default=0),
            has_code=has_code(text),
            has_lists=has_lists(text),
            has_headers=has_headers(text),
        )

    def describe(self) -> str:
        desc = (
            f"{self.paragraphs} paragraphs, {self.sentences} sentences, "
            f"avg sentence length: {round_half_up(self.avg_sentence_length)} tokens, "
            f"avg paragraph size: {round_half_up(self.avg_paragraph_size)} tokens, "
            f"paragraph length variance: {round_half_up(self.paragraph_variance)}"
        )
        if self.has_code:
            desc += ", contains code"
        if self.has_lists:
            desc += ", contains lists"
        if self.has_headers:
            desc += ", contains headers"
        return desc

def select_strategy(profile: DocumentProfile, options: ChunkingOptions) -> Tuple[str, ChunkingOptions, str]:
    """
    Pick a strategy for a document.
    Returns (method name, options to run it with, human-readable description).
    Values the caller set explicitly always win over the computed ones.
    """
    p = profile
    if p.has_code:
        size = options.chunk_size or _clamp(p.paragraphs, 3, 5)
        return "paragraph-based", options.replace(chunk_size=size), "paragraph-based chunking optimized for code content"
    if p.paragraphs <= 1 and p.sentences > 10:
        size = options.chunk_size or _clamp(math.ceil(p.sentences / 3), 3, 8)
        return ("sentence-based", options.replace(chunk_size=size),
                "sentence-based chunking for single paragraphs with many sentences")
    if p.paragraph_variance > 10000 and p.max_paragraph_length > 1000:
        overlap = options.overlap or min(50, math.ceil(options.chunk_size / 5 if options.chunk_size else 20))
        return "hybrid", options.replace(overlap=overlap), "hybrid chunking for text with variable paragraph lengths"
    if p.avg_paragraph_size < 50 and p.paragraphs > 5:
        size = options.chunk_size or _clamp(math.ceil(p.paragraphs / 3), 3, 10)
        return ("paragraph-based", options.replace(chunk_size=size),
                "paragraph-based chunking for multiple small paragraphs")
    if p.avg_sentence_length > 20:
        overlap = options.overlap or min(50, math.ceil(options.chunk_size / 4 if options.chunk_size else 25))
        return "sliding-window", options.replace(overlap=overlap), "sliding window with overlap for long sentences"
    if p.tokens > 1000:
        return "hybrid", options, "hybrid chunking for lengthy documents"
    if p.has_lists or p.has_headers:
        return "paragraph-based", options, "paragraph-based chunking for structured content with lists or headers"
    return "heuristic", options, "semantic-like chunking for medium-sized documents"

class AgenticChunker(BaseChunker):
    """
    Profiles the document and delegates to the strategy that suits its shape.
    The delegate's notes are kept after a summary of the profile.
    """
    name = "agentic"

    def __init__(self, encoder: Optional[BaseEncoder] = None, max_workers: int = 8, max_windows: int = 100):
        self.encoder = encoder
        self.max_workers = max_workers
        self.max_windows = max_windows

    def _delegate(self, method: str) -> BaseChunker:
        from . import get_chunker

        if method == "semantic":
            return get_chunker(method, encoder=self.encoder, max_workers=self.max_workers)
        if method in ("sliding-window", "hybrid"):
            return get_chunker(method, max_windows=self.max_windows)
        return get_chunker(method)

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        profile = DocumentProfile.from_text(text)
        method, tuned, description = select_strategy(profile, options)
        logger.debug(f"Agentic selection: {method} ({description})")

        result = self._delegate(method).chunk(text, tuned)
        notes = (
            f"Agentic chunking automatically selected {description} based on document analysis: "
            f"{profile.describe()}. {result.analysis.notes}"
        )
        return build_result(result.chunks, notes, result.analysis.strategy or method, fallback=result.analysis.fallback)
