from __future__ import annotations
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result, pick
from ..config import ChunkingOptions
from ..utils.text import count_tokens, tokenize
from ..utils.logger import logger

class RecursiveChunker(BaseChunker):
    """
    Recursive Character Chunker with Tiered Separators.

    1. Split by the coarsest separator; accept when every piece fits the budget.
    2. Otherwise recurse into the oversized pieces with the finer separators.
       Once separators run out the piece is returned as-is, even if too large.
    3. Greedily merge adjacent small pieces up to the budget.
    4. Optionally prefix each chunk with the tail of the previous one.

    Any failure inside the pipeline falls back to fixed-length chunking and
    is flagged in `analysis.fallback`.
    """
    name = "recursive"

    # Default separator hierarchy (most significant first); "" splits into characters
    DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", ", ", " ", ""]

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        chunk_size = pick(options.chunk_size, 500)
        overlap = pick(options.overlap, 50)
        max_chunks = pick(options.max_chunks, 0)
        mode = pick(options.chunking_mode, "characters")
        separators = options.custom_separators if options.custom_separators is not None else self.DEFAULT_SEPARATORS

        try:
            pieces = self._split(text, list(separators), chunk_size, mode)
            pieces = self._merge(pieces, chunk_size, mode)
            if overlap > 0:
                pieces = self._apply_overlap(pieces, overlap, mode)
            if max_chunks > 0:
                pieces = pieces[:max_chunks]
        except Exception as e:
            logger.warning(f"Recursive splitting failed ({e}); falling back to fixed-length chunking.")
            from .fixed_length import FixedLengthChunker
            result = FixedLengthChunker().chunk(text, options)
            result.analysis.notes = (
                f"Recursive splitting failed ({type(e).__name__}: {e}); fell back to fixed-length chunking. "
                + result.analysis.notes
            )
            result.analysis.fallback = FixedLengthChunker.name
            return result

        chunks = [Chunk.from_text(i, piece) for i, piece in enumerate(pieces)]
        notes = f"Text was recursively split into {len(chunks)} chunks of approximately {chunk_size} {mode} each"
        if overlap > 0:
            notes += f" with {overlap} {mode} of overlap"
        notes += ", preserving natural text boundaries."
        return build_result(chunks, notes, self.name)

    @staticmethod
    def _size(text: str, mode: str) -> int:
        return len(text) if mode == "characters" else count_tokens(text)

    @staticmethod
    def _split_on(text: str, separator: str) -> List[str]:
        if separator == "":
            return list(text)
        return text.split(separator)

    def _split(self, text: str, separators: List[str], chunk_size: int, mode: str) -> List[str]:
        if not separators or self._size(text, mode) <= chunk_size:
            return [text]

        separator, finer = separators[0], separators[1:]
        segments = [s for s in self._split_on(text, separator) if s.strip()]
        fits = [self._size(s, mode) <= chunk_size for s in segments]
        if len(segments) > 1 and all(fits):
            return segments

        results: List[str] = []
        for segment, ok in zip(segments, fits):
            if ok:
                results.append(segment)
            else:
                results.extend(self._split(segment, finer, chunk_size, mode))
        return results

    @staticmethod
    def _joiner(left: str) -> str:
        return " " if left.endswith(".") else ". "

    def _merge(self, pieces: List[str], chunk_size: int, mode: str) -> List[str]:
        if len(pieces) <= 1:
            return pieces
        merged: List[str] = []
        current = pieces[0]
        current_size = self._size(current, mode)
        for piece in pieces[1:]:
            size = self._size(piece, mode)
            if current_size + size <= chunk_size:
                current = current + self._joiner(current) + piece
                current_size += size
            else:
                merged.append(current)
                current, current_size = piece, size
        merged.append(current)
        return merged

    def _apply_overlap(self, pieces: List[str], overlap: int, mode: str) -> List[str]:
        if len(pieces) <= 1:
            return pieces
        result = [pieces[0]]
        for prev, piece in zip(pieces, pieces[1:]):
            if mode == "characters":
                tail = prev[-overlap:] if len(prev) > overlap else prev
            else:
                prev_tokens = tokenize(prev)
                tail = " ".join(prev_tokens[-overlap:]) if len(prev_tokens) > overlap else prev
            result.append(tail + self._joiner(tail) + piece)
        return result
