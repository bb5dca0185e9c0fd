from .engine import chunk, ChunkingMethod
from .config import ChunkingOptions, EngineConfig, EmbeddingConfig, ParallelConfig, RagConfig, load_config
from .chunkers import Chunk, ChunkingAnalysis, ChunkingResult, get_chunker, list_chunkers
from .embedding import BaseEncoder, HashingEmbedding, OpenAIEncoder, get_encoder
from .retrieval import EmbeddedChunk, QueryResult, InMemoryIndex, rank
from .rag import RagPipeline, RagAnswer, BatchEmbeddingReport, embed_chunks
from .export import build_export, export_json, export_filename
from .errors import (
    ChunkLabError, ConfigurationError, UnsupportedMethodError, MissingCredentialError,
    ProviderError, EmbeddingProviderError, ChatProviderError, RetrievalError,
)

__version__ = "0.1.0"
