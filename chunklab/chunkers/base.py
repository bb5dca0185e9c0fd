from __future__ import annotations
from dataclasses import dataclass, replace
from typing import List, Dict, Any, Optional, Iterable
from ..config import ChunkingOptions
from ..utils.text import count_tokens, round_half_up

@dataclass(frozen=True)
class Chunk:
    id: int
    text: str
    tokens: int
    characters: int

    @classmethod
    def from_text(cls, id: int, text: str) -> "Chunk":
        return cls(id=id, text=text, tokens=count_tokens(text), characters=len(text))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "text": self.text, "tokens": self.tokens, "characters": self.characters}

@dataclass
class ChunkingAnalysis:
    total_chunks: int
    average_chunk_size: Dict[str, int]
    notes: str
    strategy: str = ""
    fallback: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalChunks": self.total_chunks,
            "averageChunkSize": dict(self.average_chunk_size),
            "notes": self.notes,
        }

@dataclass
class ChunkingResult:
    chunks: List[Chunk]
    analysis: ChunkingAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chunks": [c.to_dict() for c in self.chunks],
            "analysis": self.analysis.to_dict(),
        }

def renumber(chunks: Iterable[Chunk]) -> List[Chunk]:
    """Fresh chunks with contiguous ids in iteration order."""
    return [c if c.id == i else replace(c, id=i) for i, c in enumerate(chunks)]

def build_result(chunks: List[Chunk], notes: str, strategy: str, fallback: Optional[str] = None) -> ChunkingResult:
    """Wrap chunks with the analysis summary every strategy reports."""
    chunks = renumber(chunks)
    n = len(chunks)
    total_tokens = sum(c.tokens for c in chunks)
    total_chars = sum(c.characters for c in chunks)
    analysis = ChunkingAnalysis(
        total_chunks=n,
        average_chunk_size={
            "tokens": round_half_up(total_tokens / n) if n else 0,
            "characters": round_half_up(total_chars / n) if n else 0,
        },
        notes=notes,
        strategy=strategy,
        fallback=fallback,
    )
    return ChunkingResult(chunks=chunks, analysis=analysis)

def pick(value, default):
    """Option value, or the strategy default when unset."""
    return default if value is None else value

class BaseChunker:
    name = "base"
    def chunk(self, text: str, options: Optional[ChunkingOptions] = None) -> ChunkingResult:
        raise NotImplementedError

# Legacy inference: sizes above this are read as characters when no mode is given
CHARACTER_MODE_THRESHOLD = 200

def uses_characters(chunking_mode: Optional[str], chunk_size: int) -> bool:
    """Explicit mode wins; otherwise large sizes are treated as characters."""
    if chunking_mode is not None:
        return chunking_mode == "characters"
    return chunk_size > CHARACTER_MODE_THRESHOLD
