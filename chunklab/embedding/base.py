from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List

class BaseEncoder(ABC):
    """
    Interface for all chunklab embedding providers.
    `embed` handles one text per request so callers can fan requests out
    and match results back by index.
    """

    @abstractmethod
    def embed(self, text: str) -> List[float]:
        """
        Embed a single string into a vector.
        """
        pass

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Embed a list of strings, preserving order.
        """
        return [self.embed(t) for t in texts]

    @property
    @abstractmethod
    def dimension(self) -> int:
        """
        Return the embedding dimension.
        """
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """
        Return the model name/ID.
        """
        pass
