from __future__ import annotations
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick
from ..config import ChunkingOptions
from ..utils.text import split_sentences, split_blank_line_paragraphs

class SentenceBasedChunker(BaseChunker):
    """
    Groups a fixed number of sentences per chunk.

    `chunk_size` counts sentences (default 5) and `overlap` counts sentences
    shared between neighbours. `max_chunks` caps the sentences considered
    (max_chunks * chunk_size) before grouping.
    """
    name = "sentence-based"

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        chunk_size = max(1, pick(options.chunk_size, 5))
        overlap = pick(options.overlap, 0)
        max_chunks = pick(options.max_chunks, 0)

        sentences = self.collect_sentences(text)
        step = max(1, chunk_size - overlap) if overlap > 0 else chunk_size
        limit = max_chunks * chunk_size if max_chunks > 0 else len(sentences)
        selected = sentences[:limit]

        chunks: List[Chunk] = []
        for start in range(0, len(selected), step):
            group = selected[start:start + chunk_size]
            if len(group) < max(1, chunk_size / 4) and chunks:
                break
            chunks.append(Chunk.from_text(len(chunks), " ".join(group)))

        notes = f"Text was split into {len(sentences)} sentences"
        if overlap > 0:
            notes += f" with {overlap} sentences of overlap between chunks"
        notes += f", then grouped into chunks of about {chunk_size} sentences each"
        if max_chunks > 0:
            notes += f", limited to {max_chunks} chunks maximum"
        return build_result(chunks, notes + ".", self.name)

    @staticmethod
    def collect_sentences(text: str) -> List[str]:
        """All sentences in document order, paragraph by paragraph."""
        sentences: List[str] = []
        for paragraph in split_blank_line_paragraphs(text):
            sentences.extend(split_sentences(paragraph))
        if not sentences and text:
            sentences = [text]
        return sentences
