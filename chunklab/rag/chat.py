from __future__ import annotations
import os
import requests
from typing import List, Dict, Optional, Sequence
from ..errors import ChatProviderError, MissingCredentialError
from ..utils.logger import logger

OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"
CHAT_MODELS = ("gpt-4o-mini", "gpt-4o")

SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the provided context. "
    "Only use information from the context to answer the question. "
    "If the context doesn't contain the answer, say \"I don't have enough information to answer this question.\""
)

def build_context(texts: Sequence[str]) -> str:
    return "\n\n".join(texts)

def build_user_message(context: str, question: str) -> str:
    return f"Context:\n{context}\n\nQuestion: {question}"

def build_messages(context: str, question: str) -> List[Dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_message(context, question)},
    ]

class OpenAIChat:
    """
    Minimal Chat Completions client.
    Uses the given api_key or the OPENAI_API_KEY environment variable.
    """

    def __init__(self, model: str = "gpt-4o-mini", api_key: Optional[str] = None,
                 temperature: float = 0.3, max_tokens: int = 500, timeout: float = 60.0,
                 session: Optional[requests.Session] = None):
        if model not in CHAT_MODELS:
            logger.warning(f"Chat model {model} is not one of {CHAT_MODELS}; sending it anyway.")
        self.model = model
        self.api_key = api_key or os.getenv("OPENAI_API_KEY")
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.session = session or requests

    def complete(self, messages: List[Dict[str, str]]) -> str:
        if not self.api_key:
            raise MissingCredentialError("OpenAI API key is required for querying.")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}"
        }
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        try:
            response = self.session.post(OPENAI_CHAT_URL, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"OpenAI chat request failed: {e}")
            raise ChatProviderError(f"OpenAI API request failed: {e}") from e

        if not response.ok:
            logger.error(f"OpenAI chat failed with status {response.status_code}")
            raise ChatProviderError(f"OpenAI API error: {response.status_code}", status_code=response.status_code)

        try:
            return response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ChatProviderError("Invalid response from OpenAI API") from e

    def answer(self, context: str, question: str) -> str:
        return self.complete(build_messages(context, question))
