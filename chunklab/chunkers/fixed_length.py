from __future__ import annotations
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick, uses_characters
from ..config import ChunkingOptions
from ..utils.text import tokenize, find_break_point

class FixedLengthChunker(BaseChunker):
    """
    Fixed-Length Chunker with optional overlap, in token or character units.

    Mode resolution: an explicit `chunking_mode` wins. `"characters"` hands
    off to the boundary-snapping FixedLengthCharsChunker; without a mode,
    sizes above 200 fall back to naive substring windows (legacy behaviour).
    """
    name = "fixed-length"

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        chunk_size = max(1, pick(options.chunk_size, 100))
        overlap = pick(options.overlap, 0)

        if uses_characters(options.chunking_mode, chunk_size):
            if options.chunking_mode == "characters":
                return FixedLengthCharsChunker().chunk(text, options)
            return self._chunk_characters(text, chunk_size, overlap)
        return self._chunk_tokens(text, chunk_size, overlap)

    @staticmethod
    def _step(chunk_size: int, overlap: int) -> int:
        # Overlap at or above the window size would stall the loop
        return max(1, chunk_size - overlap) if overlap > 0 else chunk_size

    def _chunk_characters(self, text: str, chunk_size: int, overlap: int) -> ChunkingResult:
        step = self._step(chunk_size, overlap)
        chunks: List[Chunk] = []
        for start in range(0, len(text), step):
            window = text[start:start + chunk_size]
            if len(window) < chunk_size / 4 and chunks:
                break
            chunks.append(Chunk.from_text(len(chunks), window))

        notes = f"Text was divided into {len(chunks)} chunks of approximately {chunk_size} characters each"
        if overlap > 0:
            notes += f" with {overlap} characters of overlap between consecutive chunks"
        return build_result(chunks, notes + ".", self.name)

    def _chunk_tokens(self, text: str, chunk_size: int, overlap: int) -> ChunkingResult:
        tokens = tokenize(text)
        step = self._step(chunk_size, overlap)
        chunks: List[Chunk] = []
        for start in range(0, len(tokens), step):
            window = tokens[start:start + chunk_size]
            if len(window) < chunk_size / 4 and chunks:
                break
            chunk_text = " ".join(window)
            chunks.append(Chunk(id=len(chunks), text=chunk_text, tokens=len(window), characters=len(chunk_text)))

        notes = f"Text was divided into {len(chunks)} chunks of approximately {chunk_size} tokens each"
        if overlap > 0:
            notes += f" with {overlap} tokens of overlap between consecutive chunks"
        return build_result(chunks, notes + ".", self.name)


class FixedLengthCharsChunker(BaseChunker):
    """
    Character windows whose ends snap back to the nearest sentence, paragraph,
    line or word break (within 20% of the window size).

    The window is floored at 10 characters and the overlap is clamped below
    it, so the step is always at least one character. A non-empty
    `separator` is appended verbatim to every chunk.
    """
    name = "fixed-length-chars"

    MIN_CHUNK_SIZE = 10

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        chunk_size, overlap = self.effective_sizes(options)
        max_chunks = pick(options.max_chunks, 0)
        separator = pick(options.separator, "")
        step = chunk_size - overlap

        chunks: List[Chunk] = []
        for start in range(0, len(text), step):
            end = min(start + chunk_size, len(text))
            if end < len(text):
                end = find_break_point(text, end, chunk_size)
            window = text[start:end]
            if len(window) < chunk_size / 4 and chunks:
                break
            chunks.append(Chunk.from_text(len(chunks), window + separator if separator else window))
            if max_chunks > 0 and len(chunks) >= max_chunks:
                break

        notes = f"Text was divided into {len(chunks)} chunks of approximately {chunk_size} characters each"
        if overlap > 0:
            notes += f" with {overlap} characters of overlap between consecutive chunks"
        notes += ". Smart boundary detection was used to preserve natural text breaks."
        return build_result(chunks, notes, self.name)

    @classmethod
    def effective_sizes(cls, options: ChunkingOptions):
        """(chunk_size, overlap) after flooring and clamping."""
        chunk_size = max(cls.MIN_CHUNK_SIZE, pick(options.chunk_size, 500))
        overlap = min(chunk_size - 1, max(0, pick(options.overlap, 50)))
        return chunk_size, overlap
