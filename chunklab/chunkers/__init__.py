"""
chunklab chunking strategies.

Every strategy takes the text plus a ChunkingOptions and returns a
ChunkingResult with contiguous chunk ids and a summary analysis.
"""

from ..errors import UnsupportedMethodError
from .base import BaseChunker, Chunk, ChunkingAnalysis, ChunkingResult

# ============================================================================
# PRIMITIVE SPLITTERS
# ============================================================================
from .fixed_length import FixedLengthChunker, FixedLengthCharsChunker
from .sentence_based import SentenceBasedChunker
from .paragraph_based import ParagraphBasedChunker
from .sliding_window import SlidingWindowChunker
from .recursive import RecursiveChunker

# ============================================================================
# COMPOSITE AND EMBEDDING-DRIVEN SPLITTERS
# ============================================================================
from .heuristic import HeuristicStructuralChunker
from .semantic import SemanticChunker
from .hybrid import HybridChunker
from .agentic import AgenticChunker, DocumentProfile, select_strategy

# ============================================================================
# CHUNKER REGISTRY
# ============================================================================
CHUNKER_REGISTRY = {
    # Primitive
    'fixed-length': FixedLengthChunker,
    'fixed-length-chars': FixedLengthCharsChunker,
    'recursive': RecursiveChunker,
    'sentence-based': SentenceBasedChunker,
    'paragraph-based': ParagraphBasedChunker,
    'sliding-window': SlidingWindowChunker,

    # Composite
    'semantic': SemanticChunker,
    'hybrid': HybridChunker,
    'agentic': AgenticChunker,
}

# Reachable by name for delegation, not offered as a method
FALLBACK_CHUNKERS = {
    'heuristic': HeuristicStructuralChunker,
}

def get_chunker(name: str, **kwargs) -> BaseChunker:
    """Get a chunker instance by name."""
    cls = CHUNKER_REGISTRY.get(name) or FALLBACK_CHUNKERS.get(name)
    if cls is None:
        raise UnsupportedMethodError(name, list_chunkers())
    return cls(**kwargs)

def list_chunkers() -> list:
    """List all available chunker names."""
    return list(CHUNKER_REGISTRY.keys())

__all__ = [
    # Base
    'BaseChunker',
    'Chunk',
    'ChunkingAnalysis',
    'ChunkingResult',

    # Primitive
    'FixedLengthChunker',
    'FixedLengthCharsChunker',
    'SentenceBasedChunker',
    'ParagraphBasedChunker',
    'SlidingWindowChunker',
    'RecursiveChunker',

    # Composite
    'HeuristicStructuralChunker',
    'SemanticChunker',
    'HybridChunker',
    'AgenticChunker',
    'DocumentProfile',
    'select_strategy',

    # Utilities
    'CHUNKER_REGISTRY',
    'FALLBACK_CHUNKERS',
    'get_chunker',
    'list_chunkers',
]
