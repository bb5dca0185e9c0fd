from .batch import BatchEmbeddingReport, embed_chunks
from .chat import OpenAIChat, SYSTEM_PROMPT, build_context, build_user_message, build_messages
from .pipeline import RagAnswer, RagPipeline

__all__ = [
    "BatchEmbeddingReport",
    "embed_chunks",
    "OpenAIChat",
    "SYSTEM_PROMPT",
    "build_context",
    "build_user_message",
    "build_messages",
    "RagAnswer",
    "RagPipeline",
]
