"""Tests for batch embedding, the chat client and the RAG pipeline."""
from unittest.mock import MagicMock, patch

import pytest

from chunklab.chunkers.base import Chunk
from chunklab.config import EngineConfig, ParallelConfig
from chunklab.errors import ChatProviderError, EmbeddingProviderError, MissingCredentialError, RetrievalError
from chunklab.rag import RagPipeline, SYSTEM_PROMPT, build_user_message, embed_chunks
from chunklab.rag.chat import OPENAI_CHAT_URL, OpenAIChat

from conftest import FailingEncoder, KeywordEncoder


def make_chunks(n: int):
    return [Chunk.from_text(i, f"chunk number {i}") for i in range(n)]


@pytest.fixture
def encoder() -> KeywordEncoder:
    return KeywordEncoder({"cat": [1.0, 0.0], "rocket": [0.0, 1.0]}, default=[0.5, 0.5])


@pytest.fixture
def chat() -> MagicMock:
    chat = MagicMock()
    chat.model = "gpt-4o-mini"
    chat.answer.return_value = "Cats sleep a lot."
    return chat


class TestBatchEmbedding:
    def test_embeds_every_chunk(self, encoder) -> None:
        with patch("chunklab.rag.batch.time.sleep") as sleep:
            report = embed_chunks(make_chunks(20), encoder, batch_size=15, pause_seconds=0.2)
        assert report.errors == {}
        assert report.embedded == 20
        assert [c.id for c in report.chunks] == list(range(20))
        sleep.assert_called_once_with(0.2)

    def test_no_pause_after_last_batch(self, encoder) -> None:
        with patch("chunklab.rag.batch.time.sleep") as sleep:
            embed_chunks(make_chunks(15), encoder, batch_size=15)
        sleep.assert_not_called()

    def test_failures_recorded_per_chunk(self) -> None:
        chunks = make_chunks(4)
        with patch("chunklab.rag.batch.time.sleep"):
            report = embed_chunks(chunks, FailingEncoder(trigger="number 2"), batch_size=2)
        assert list(report.errors) == [2]
        assert "OpenAI API error: 500" in report.errors[2]
        assert report.chunks[2].embedding is None
        assert all(report.chunks[i].embedding is not None for i in (0, 1, 3))


class TestPrompt:
    def test_user_message(self) -> None:
        assert build_user_message("ctx", "why?") == "Context:\nctx\n\nQuestion: why?"

    def test_system_prompt_fallback_sentence(self) -> None:
        assert SYSTEM_PROMPT.endswith('say "I don\'t have enough information to answer this question."')


class TestOpenAIChat:
    def test_payload(self) -> None:
        session = MagicMock()
        session.post.return_value.ok = True
        session.post.return_value.json.return_value = {"choices": [{"message": {"content": "42"}}]}
        client = OpenAIChat(model="gpt-4o", api_key="sk-test", session=session)

        assert client.answer("ctx", "q?") == "42"
        args, kwargs = session.post.call_args
        assert args[0] == OPENAI_CHAT_URL
        body = kwargs["json"]
        assert body["model"] == "gpt-4o"
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 500
        assert body["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert body["messages"][1]["content"] == "Context:\nctx\n\nQuestion: q?"

    def test_http_error(self) -> None:
        session = MagicMock()
        session.post.return_value.ok = False
        session.post.return_value.status_code = 401
        with pytest.raises(ChatProviderError, match="OpenAI API error: 401"):
            OpenAIChat(api_key="sk-test", session=session).answer("ctx", "q")

    def test_missing_key(self, monkeypatch) -> None:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(MissingCredentialError):
            OpenAIChat().answer("ctx", "q")


class TestRagPipeline:
    def make_pipeline(self, encoder, chat) -> RagPipeline:
        cfg = EngineConfig(parallel=ParallelConfig(batch_pause_seconds=0))
        return RagPipeline(encoder, chat=chat, config=cfg)

    def test_ask_ranks_and_answers(self, encoder, chat) -> None:
        pipeline = self.make_pipeline(encoder, chat)
        chunks = [
            Chunk.from_text(0, "The rocket launched."),
            Chunk.from_text(1, "The cat slept."),
            Chunk.from_text(2, "Nothing in particular."),
        ]
        pipeline.embed_chunks(chunks)
        answer = pipeline.ask("Where is the cat?", top_k=2)

        assert [r.chunk_id for r in answer.results] == [1, 2]
        assert answer.answer == "Cats sleep a lot."
        chat.answer.assert_called_once_with("The cat slept.\n\nNothing in particular.", "Where is the cat?")

    def test_blank_question(self, encoder, chat) -> None:
        pipeline = self.make_pipeline(encoder, chat)
        pipeline.embed_chunks(make_chunks(2))
        with pytest.raises(RetrievalError, match="Please enter a query"):
            pipeline.search("   ")

    def test_requires_embeddings(self, encoder, chat) -> None:
        with pytest.raises(RetrievalError, match="generate embeddings first"):
            self.make_pipeline(encoder, chat).search("anything")

    def test_query_embedding_failure_is_fatal(self, chat) -> None:
        pipeline = self.make_pipeline(FailingEncoder(trigger="question"), chat)
        pipeline.embed_chunks(make_chunks(2))
        with pytest.raises(EmbeddingProviderError):
            pipeline.search("a question")
        chat.answer.assert_not_called()

    def test_no_results(self, encoder, chat) -> None:
        pipeline = self.make_pipeline(encoder, chat)
        pipeline.embed_chunks(make_chunks(2))
        with pytest.raises(RetrievalError, match="No relevant chunks"):
            pipeline.search("cat", top_k=0)

    def test_partial_embedding_still_searchable(self, chat) -> None:
        pipeline = self.make_pipeline(FailingEncoder(trigger="number 0"), chat)
        report = pipeline.embed_chunks(make_chunks(3))
        assert list(report.errors) == [0]
        results = pipeline.search("query")
        assert 0 not in [r.chunk_id for r in results]
