"""
Exceptions raised by the chunking engine, embedding providers and RAG layer.
"""
from __future__ import annotations
from typing import Optional


class ChunkLabError(Exception):
    """Base exception for chunklab."""
    pass


class ConfigurationError(ChunkLabError, ValueError):
    """Invalid options or configuration; fails fast, never retried."""
    pass


class UnsupportedMethodError(ConfigurationError):
    """Raised when a chunking method name is not in the registry."""

    def __init__(self, method: str, available=None):
        self.method = method
        message = f"Unsupported chunking method: {method}"
        if available:
            message += f". Available: {list(available)}"
        super().__init__(message)


class MissingCredentialError(ConfigurationError):
    """Raised when an operation needs a provider API key and none was given."""
    pass


class ProviderError(ChunkLabError, RuntimeError):
    """An external embedding or chat provider call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class EmbeddingProviderError(ProviderError):
    pass


class ChatProviderError(ProviderError):
    pass


class RetrievalError(ChunkLabError):
    """Raised when a query cannot be answered from the embedded chunks."""
    pass
