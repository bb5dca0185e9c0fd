from __future__ import annotations
import math
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick
from ..config import ChunkingOptions
from ..utils.text import split_paragraphs

class ParagraphBasedChunker(BaseChunker):
    """
    Groups whole paragraphs (blank lines, horizontal rules and Markdown
    headers all start a new paragraph).

    `chunk_size` is paragraphs per chunk (3 when unset or 0) and `overlap` is
    shared paragraphs. With `max_chunks`, paragraphs per chunk grows so the
    whole document fits in the budget, and output stops at `max_chunks`.
    """
    name = "paragraph-based"

    DEFAULT_PARAGRAPHS_PER_CHUNK = 3

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        max_chunks = pick(options.max_chunks, 0)
        overlap = pick(options.overlap, 0)
        per_chunk = options.chunk_size or self.DEFAULT_PARAGRAPHS_PER_CHUNK

        paragraphs = split_paragraphs(text)
        if max_chunks > 0 and len(paragraphs) > max_chunks * per_chunk:
            per_chunk = math.ceil(len(paragraphs) / max_chunks)
        step = max(1, per_chunk - overlap) if overlap > 0 else per_chunk

        chunks: List[Chunk] = []
        for start in range(0, len(paragraphs), step):
            group = paragraphs[start:start + per_chunk]
            if len(group) < max(1, per_chunk / 3) and chunks:
                break
            chunks.append(Chunk.from_text(len(chunks), "\n\n".join(group)))
            if max_chunks > 0 and len(chunks) >= max_chunks:
                break

        notes = f"Text was split into {len(paragraphs)} paragraphs"
        if overlap > 0:
            notes += f", with {overlap} paragraphs of overlap between chunks"
        if max_chunks > 0 and len(chunks) == max_chunks:
            notes += f", limited to {max_chunks} chunks maximum"
        notes += f", resulting in {len(chunks)} chunks with approximately {per_chunk} paragraphs per chunk."
        return build_result(chunks, notes, self.name)
