from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

from ..chunkers.base import Chunk
from ..config import EngineConfig
from ..embedding.base import BaseEncoder
from ..errors import RetrievalError
from ..retrieval.in_memory import EmbeddedChunk, QueryResult, rank
from ..utils.logger import logger
from ..utils.telemetry import get_tracer, init_telemetry
from .batch import BatchEmbeddingReport, embed_chunks
from .chat import OpenAIChat, build_context

tracer = get_tracer(__name__)

@dataclass
class RagAnswer:
    results: List[QueryResult]
    answer: str

class RagPipeline:
    """
    Embed chunks once, then answer questions from the closest ones.

    The question embedding and the chat call are fatal on failure; only the
    bulk chunk embedding tolerates per-chunk errors.
    """

    def __init__(self, encoder: BaseEncoder, chat: Optional[OpenAIChat] = None,
                 config: Optional[EngineConfig] = None):
        self.cfg = config or EngineConfig()
        if self.cfg.telemetry_enabled:
            init_telemetry(self.cfg.telemetry_endpoint)
        self.encoder = encoder
        self.chat = chat or OpenAIChat(
            model=self.cfg.rag.chat_model,
            api_key=self.cfg.embedding.api_key,
            temperature=self.cfg.rag.temperature,
            max_tokens=self.cfg.rag.max_tokens,
            timeout=self.cfg.rag.timeout,
        )
        self.chunks: List[EmbeddedChunk] = []

    def embed_chunks(self, chunks: Sequence[Union[Chunk, EmbeddedChunk]]) -> BatchEmbeddingReport:
        with tracer.start_as_current_span("rag.embed_chunks") as span:
            span.set_attribute("chunk_count", len(chunks))
            report = embed_chunks(
                chunks,
                self.encoder,
                batch_size=self.cfg.parallel.batch_size,
                pause_seconds=self.cfg.parallel.batch_pause_seconds,
                max_workers=self.cfg.parallel.embedding_concurrency,
            )
            span.set_attribute("error_count", len(report.errors))
        if report.errors:
            logger.warning(f"{len(report.errors)} of {len(report.chunks)} chunks could not be embedded")
        self.chunks = report.chunks
        return report

    def search(self, question: str, top_k: Optional[int] = None) -> List[QueryResult]:
        if not question or not question.strip():
            raise RetrievalError("Please enter a query")
        if not any(c.embedding is not None for c in self.chunks):
            raise RetrievalError("Please generate embeddings first")

        top_k = self.cfg.rag.top_k if top_k is None else top_k
        with tracer.start_as_current_span("rag.search") as span:
            span.set_attribute("top_k", top_k)
            query_embedding = self.encoder.embed(question)
            results = rank(query_embedding, self.chunks, top_k=top_k)
            span.set_attribute("result_count", len(results))
        if not results:
            raise RetrievalError("No relevant chunks found for your query")
        return results

    def ask(self, question: str, top_k: Optional[int] = None) -> RagAnswer:
        results = self.search(question, top_k)
        context = build_context([r.text for r in results])
        with tracer.start_as_current_span("rag.answer") as span:
            span.set_attribute("model", self.chat.model)
            answer = self.chat.answer(context, question)
        return RagAnswer(results=results, answer=answer)
