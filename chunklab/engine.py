from __future__ import annotations
from enum import Enum
from typing import Any, Dict, Optional, Union

from .chunkers import get_chunker
from .chunkers.base import ChunkingResult
from .config import ChunkingOptions, EngineConfig
from .embedding import encoder_from_config
from .embedding.base import BaseEncoder
from .errors import UnsupportedMethodError
from .utils.logger import logger
from .utils.telemetry import init_telemetry, get_tracer

tracer = get_tracer(__name__)

class ChunkingMethod(str, Enum):
    FIXED_LENGTH = "fixed-length"
    FIXED_LENGTH_CHARS = "fixed-length-chars"
    RECURSIVE = "recursive"
    SENTENCE_BASED = "sentence-based"
    PARAGRAPH_BASED = "paragraph-based"
    SLIDING_WINDOW = "sliding-window"
    SEMANTIC = "semantic"
    HYBRID = "hybrid"
    AGENTIC = "agentic"

    @classmethod
    def from_name(cls, name: Union[str, "ChunkingMethod"]) -> "ChunkingMethod":
        """Accepts the hyphenated names as well as their snake_case spelling."""
        if isinstance(name, cls):
            return name
        normalized = str(name).strip().lower().replace("_", "-")
        try:
            return cls(normalized)
        except ValueError:
            raise UnsupportedMethodError(name, [m.value for m in cls]) from None

def _coerce_options(options: Union[ChunkingOptions, Dict[str, Any], None], cfg: EngineConfig) -> ChunkingOptions:
    if isinstance(options, ChunkingOptions):
        return options
    return cfg.chunking_options(**(options or {}))

def _resolve_encoder(encoder: Optional[BaseEncoder], opts: ChunkingOptions, cfg: EngineConfig) -> Optional[BaseEncoder]:
    """Injected encoder, else the per-call key, else the configured provider when it is usable."""
    if encoder is not None or opts.embedding_api_key:
        return encoder
    if cfg.embedding.provider == "hashing" or cfg.embedding.api_key:
        return encoder_from_config(cfg.embedding)
    return None

def _chunker_kwargs(method: ChunkingMethod, encoder: Optional[BaseEncoder], cfg: EngineConfig) -> Dict[str, Any]:
    if method is ChunkingMethod.SEMANTIC:
        return {"encoder": encoder, "max_workers": cfg.parallel.embedding_concurrency}
    if method in (ChunkingMethod.SLIDING_WINDOW, ChunkingMethod.HYBRID):
        return {"max_windows": cfg.max_windows}
    if method is ChunkingMethod.AGENTIC:
        return {"encoder": encoder, "max_workers": cfg.parallel.embedding_concurrency,
                "max_windows": cfg.max_windows}
    return {}

def chunk(text: str, method: Union[str, ChunkingMethod, None] = None,
          options: Union[ChunkingOptions, Dict[str, Any], None] = None,
          encoder: Optional[BaseEncoder] = None,
          config: Optional[EngineConfig] = None) -> ChunkingResult:
    """
    Split `text` with the named strategy.

    Args:
        text: Document to split.
        method: Strategy name or ChunkingMethod; defaults to config.default_method.
        options: ChunkingOptions, or a dict with snake_case or camelCase keys.
            A dict is layered over config.default_options.
        encoder: Embedding provider for the semantic strategy. When omitted,
            an OpenAI encoder is built from options.embedding_api_key if set,
            otherwise from config.embedding when it has a key or is the
            offline hashing provider.
        config: Engine-wide settings (embedding provider, concurrency,
            sliding-window ceiling).

    Raises:
        UnsupportedMethodError: unknown strategy name.
        ConfigurationError: invalid options.
    """
    cfg = config or EngineConfig()
    if cfg.telemetry_enabled:
        init_telemetry(cfg.telemetry_endpoint, enabled=True)

    resolved = ChunkingMethod.from_name(method or cfg.default_method)
    opts = _coerce_options(options, cfg)

    if resolved in (ChunkingMethod.SEMANTIC, ChunkingMethod.AGENTIC):
        encoder = _resolve_encoder(encoder, opts, cfg)
    kwargs = _chunker_kwargs(resolved, encoder, cfg)

    with tracer.start_as_current_span("chunk") as span:
        span.set_attribute("method", resolved.value)
        span.set_attribute("text_length", len(text))
        logger.debug(f"Chunking {len(text)} characters with {resolved.value}")

        result = get_chunker(resolved.value, **kwargs).chunk(text, opts)

        span.set_attribute("chunk_count", result.analysis.total_chunks)
        span.set_attribute("fallback", result.analysis.fallback or "")
        if result.analysis.fallback:
            logger.warning(f"{resolved.value} chunking fell back to {result.analysis.fallback}")
        return result
