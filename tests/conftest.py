"""Shared fixtures: sample documents and deterministic embedding providers."""
from typing import Dict, List, Optional

import pytest

from chunklab.embedding.base import BaseEncoder
from chunklab.errors import EmbeddingProviderError


class KeywordEncoder(BaseEncoder):
    """Maps each text to the vector of the first keyword it contains."""

    def __init__(self, vectors: Dict[str, List[float]], default: Optional[List[float]] = None):
        self.vectors = vectors
        self.default = default or [0.0] * len(next(iter(vectors.values())))
        self.calls: List[str] = []

    def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        for keyword, vector in self.vectors.items():
            if keyword in text:
                return list(vector)
        return list(self.default)

    @property
    def dimension(self) -> int:
        return len(self.default)

    @property
    def model_name(self) -> str:
        return "keyword-test"


class FailingEncoder(BaseEncoder):
    """Raises a provider error for any text containing `trigger` (every text by default)."""

    def __init__(self, trigger: str = ""):
        self.trigger = trigger

    def embed(self, text: str) -> List[float]:
        if self.trigger in text:
            raise EmbeddingProviderError("OpenAI API error: 500", status_code=500)
        return [1.0, 0.0]

    @property
    def dimension(self) -> int:
        return 2

    @property
    def model_name(self) -> str:
        return "failing-test"


@pytest.fixture
def three_paragraphs() -> str:
    return (
        "The first paragraph talks about the weather.\n\n"
        "The second paragraph talks about the harbour.\n\n"
        "The third paragraph talks about the market."
    )


@pytest.fixture
def topic_paragraphs() -> List[str]:
    return [
        "The cat slept on the warm windowsill all afternoon.",
        "A cat will often chase string around the living room.",
        "Every cat in the village gathered near the bakery.",
        "The rocket lifted off the pad at dawn.",
        "Engineers checked the rocket telemetry twice.",
        "A second rocket stage separated on schedule.",
        "Fresh bread cooled on the counter.",
        "The baker sliced the bread for breakfast.",
        "Sourdough bread needs a patient starter.",
    ]


@pytest.fixture
def topic_encoder() -> KeywordEncoder:
    return KeywordEncoder({
        "cat": [1.0, 0.0, 0.0],
        "rocket": [0.0, 1.0, 0.0],
        "bread": [0.0, 0.0, 1.0],
    })


@pytest.fixture
def sectioned_document() -> str:
    return (
        "# Intro\n"
        "This intro line has a handful of words in it for testing the splitter logic here.\n"
        "Second intro line continues the thought with several more words to pass the minimum.\n"
        "\n"
        "# Details\n"
        "Detail line one has plenty of words so that the chunk is long enough overall.\n"
        "Detail line two also carries enough words to make the section sizeable too."
    )
