from __future__ import annotations
import re
from functools import reduce
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick
from ..config import ChunkingOptions
from ..utils.text import split_blank_line_paragraphs

HEADER_LINE = re.compile(r"^#{1,6}\s+")
RULE_LINE = re.compile(r"^[-_*]{3,}\s*$")
NUMBERED_LIST_START = re.compile(r"^\s*1\.\s+")

class HeuristicStructuralChunker(BaseChunker):
    """
    Structure-driven splitting used when no embedding provider is available.

    Section boundaries are Markdown headers, horizontal rules, the start of a
    numbered list, and blank lines separating two non-blank lines. Spans of
    fewer than 2 lines are dropped and chunks under 20 tokens are folded into
    the chunk before them.
    """
    name = "heuristic"

    MIN_SPAN_LINES = 2
    MIN_CHUNK_TOKENS = 20

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        max_chunks = pick(options.max_chunks, 0)

        if len(split_blank_line_paragraphs(text)) <= 1:
            return self._paragraph_fallback(text, options)

        lines = text.split("\n")
        boundaries = self.find_boundaries(lines)

        raw: List[Chunk] = []
        for start, end in zip(boundaries, boundaries[1:]):
            if end - start < self.MIN_SPAN_LINES:
                continue
            raw.append(Chunk.from_text(len(raw), "\n".join(lines[start:end])))
        if not raw:
            return self._paragraph_fallback(text, options)

        chunks = self._fold_small(raw)
        if max_chunks > 0:
            chunks = chunks[:max_chunks]

        notes = (
            f"Semantic-like chunking identified {len(boundaries) - 1} potential section boundaries "
            f"and created {len(chunks)} chunks based on document structure and content."
        )
        return build_result(chunks, notes, self.name)

    @staticmethod
    def find_boundaries(lines: List[str]) -> List[int]:
        """Line indices where a section may start, bracketed by 0 and len(lines)."""
        boundaries = [0]
        last = len(lines) - 1
        for i, line in enumerate(lines):
            if HEADER_LINE.match(line) or RULE_LINE.match(line) or NUMBERED_LIST_START.match(line):
                boundaries.append(i)
            elif not line.strip() and 0 < i < last:
                if lines[i - 1].strip() and lines[i + 1].strip():
                    boundaries.append(i)
        boundaries.append(len(lines))
        return boundaries

    def _fold_small(self, raw: List[Chunk]) -> List[Chunk]:
        def step(acc: List[Chunk], chunk: Chunk) -> List[Chunk]:
            if acc and chunk.tokens < self.MIN_CHUNK_TOKENS:
                return acc[:-1] + [Chunk.from_text(acc[-1].id, acc[-1].text + "\n" + chunk.text)]
            return acc + [chunk]
        return reduce(step, raw, [])

    @staticmethod
    def _paragraph_fallback(text: str, options: ChunkingOptions) -> ChunkingResult:
        from .paragraph_based import ParagraphBasedChunker
        return ParagraphBasedChunker().chunk(text, options)
