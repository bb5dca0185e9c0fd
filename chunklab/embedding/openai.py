from __future__ import annotations
import os
import requests
from typing import List, Optional, Any
from ..errors import EmbeddingProviderError, MissingCredentialError
from ..utils.logger import logger
from .base import BaseEncoder

OPENAI_EMBEDDINGS_URL = "https://api.openai.com/v1/embeddings"

class OpenAIEncoder(BaseEncoder):
    """
    OpenAI Embedding Provider.
    Uses the given api_key or the OPENAI_API_KEY environment variable.
    """

    def __init__(self, model_name: str = "text-embedding-ada-002", api_key: Optional[str] = None,
                 timeout: float = 60.0, session: Optional[requests.Session] = None):
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self.api_key:
            logger.warning("OPENAI_API_KEY not found. OpenAI embeddings will fail unless provided.")

        self.name = model_name
        self.timeout = timeout
        self.session = session or requests
        # Common dimensions as fallback
        self._dim_map = {
            "text-embedding-3-small": 1536,
            "text-embedding-3-large": 3072,
            "text-embedding-ada-002": 1536
        }
        self._dim = self._dim_map.get(model_name, 1536)

    def _post(self, payload: dict) -> Any:
        if not self.api_key:
            raise MissingCredentialError("OpenAI API key is required for generating embeddings.")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }
        try:
            response = self.session.post(OPENAI_EMBEDDINGS_URL, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"OpenAI Embedding request failed: {e}")
            raise EmbeddingProviderError(f"OpenAI API request failed: {e}") from e

        if not response.ok:
            logger.error(f"OpenAI Embedding failed with status {response.status_code}")
            raise EmbeddingProviderError(f"OpenAI API error: {response.status_code}", status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise EmbeddingProviderError("Invalid response from OpenAI API") from e

    @staticmethod
    def _vectors(data: Any, expected: int) -> List[List[float]]:
        try:
            rows = data["data"]
            vectors = [row["embedding"] for row in rows]
        except (KeyError, TypeError) as e:
            raise EmbeddingProviderError("Invalid response from OpenAI API") from e
        if len(vectors) != expected or not all(vectors):
            raise EmbeddingProviderError("Invalid response from OpenAI API")
        return vectors

    def embed(self, text: str) -> List[float]:
        data = self._post({"input": text, "model": self.name})
        return self._vectors(data, 1)[0]

    def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        # OpenAI returns data in the same order as input
        data = self._post({"input": texts, "model": self.name})
        return self._vectors(data, len(texts))

    @property
    def dimension(self) -> int:
        return self._dim

    @property
    def model_name(self) -> str:
        return self.name
