from __future__ import annotations
import math
from functools import reduce
from typing import List, Optional
from .base import BaseChunker, Chunk, ChunkingResult, build_result
from .paragraph_based import ParagraphBasedChunker
from .sentence_based import SentenceBasedChunker
from .sliding_window import SlidingWindowChunker
from ..config import ChunkingOptions

class HybridChunker(BaseChunker):
    """
    Paragraphs first, finer splitting only where a paragraph overflows.

    `chunk_size` is a token budget (default 100). Paragraph chunks within
    budget are kept; up to twice the budget they are regrouped by sentences
    (about ten tokens per sentence); anything larger goes through token
    sliding windows. Neighbouring pieces are then folded back together while
    the pair stays within budget. `max_windows` caps the windows taken from
    any one oversized paragraph.
    """
    name = "hybrid"

    def __init__(self, max_windows: int = 100):
        self.max_windows = max_windows

    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        options = options or ChunkingOptions()
        budget = options.chunk_size or 100
        overlap = options.overlap or 0

        pieces: List[Chunk] = []
        for paragraph in ParagraphBasedChunker().chunk(text).chunks:
            if paragraph.tokens <= budget:
                pieces.append(paragraph)
            elif paragraph.tokens <= budget * 2:
                sentence_opts = ChunkingOptions(chunk_size=math.ceil(budget / 10), overlap=math.ceil(overlap / 10))
                pieces.extend(SentenceBasedChunker().chunk(paragraph.text, sentence_opts).chunks)
            else:
                window_opts = ChunkingOptions(chunk_size=budget, overlap=overlap, chunking_mode="tokens")
                pieces.extend(SlidingWindowChunker(self.max_windows).chunk(paragraph.text, window_opts).chunks)

        chunks = self.fold(pieces, budget)
        notes = (
            f"Hybrid chunking created {len(chunks)} chunks using a combination of paragraph-based, "
            f"sentence-based, and sliding window approaches. Target chunk size was {budget} tokens"
        )
        if overlap > 0:
            notes += f" with {overlap} tokens of overlap where needed"
        return build_result(chunks, notes + ".", self.name)

    @staticmethod
    def fold(pieces: List[Chunk], budget: int) -> List[Chunk]:
        """Join each piece onto the previous one while their token total fits the budget."""
        def step(acc: List[Chunk], piece: Chunk) -> List[Chunk]:
            if acc and acc[-1].tokens + piece.tokens <= budget:
                return acc[:-1] + [Chunk.from_text(acc[-1].id, acc[-1].text + "\n\n" + piece.text)]
            return acc + [piece]
        return reduce(step, pieces, [])
