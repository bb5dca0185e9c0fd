from __future__ import annotations
import math
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick, uses_characters
from ..config import ChunkingOptions
from ..utils.text import tokenize

class SlidingWindowChunker(BaseChunker):
    """
    Overlapping fixed windows in token or character units.

    Output is capped at `max_windows` chunks (100 by default): when the
    natural step would produce more, the step widens to
    ceil(length / max_windows). The effective step is reported in the notes.
    """
    name = "sliding-window"

    def __init__(self, max_windows: int = 100):
        if max_windows < 1:
            raise ValueError("max_windows must be >= 1")
        self.max_windows = max_windows

    def effective_step(self, length: int, chunk_size: int, overlap: int) -> int:
        step = max(1, chunk_size - overlap)
        if math.ceil(length / step) > self.max_windows:
            return math.ceil(length / self.max_windows)
        return step

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        chunk_size = max(1, pick(options.chunk_size, 100))
        overlap = pick(options.overlap, 50)

        if uses_characters(options.chunking_mode, chunk_size):
            units, unit_name = text, "characters"
        else:
            units, unit_name = tokenize(text), "tokens"
        step = self.effective_step(len(units), chunk_size, overlap)

        chunks: List[Chunk] = []
        for start in range(0, len(units), step):
            window = units[start:start + chunk_size]
            if len(window) < chunk_size / 4 and chunks:
                break
            if unit_name == "tokens":
                chunk_text = " ".join(window)
                chunks.append(Chunk(id=len(chunks), text=chunk_text, tokens=len(window), characters=len(chunk_text)))
            else:
                chunks.append(Chunk.from_text(len(chunks), window))
            if len(chunks) >= self.max_windows:
                break

        notes = (
            f"Sliding window created {len(chunks)} chunks with window size {chunk_size} {unit_name} "
            f"and {overlap} {unit_name} of overlap (step size: {step})."
        )
        return build_result(chunks, notes, self.name)
