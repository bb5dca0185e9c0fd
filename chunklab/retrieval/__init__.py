from .in_memory import EmbeddedChunk, QueryResult, InMemoryIndex, rank

__all__ = ["EmbeddedChunk", "QueryResult", "InMemoryIndex", "rank"]
