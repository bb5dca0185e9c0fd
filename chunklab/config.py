from __future__ import annotations
from dataclasses import dataclass, field, fields, asdict, replace
from typing import Optional, List, Dict, Any
import yaml

from .errors import ConfigurationError
from .utils.telemetry import DEFAULT_OTLP_ENDPOINT

CHUNKING_MODES = ("tokens", "characters")

# camelCase keys used by the JSON export and browser callers
_OPTION_ALIASES = {
    "chunkSize": "chunk_size",
    "maxChunks": "max_chunks",
    "apiKey": "embedding_api_key",
    "embeddingApiKey": "embedding_api_key",
    "chunkingMode": "chunking_mode",
    "customSeparators": "custom_separators",
}

@dataclass(frozen=True)
class ChunkingOptions:
    """
    Per-call chunking options. `None` means "use the strategy default";
    each strategy documents how it reads every field.
    """
    chunk_size: Optional[int] = None
    overlap: Optional[int] = None
    separator: Optional[str] = None
    max_chunks: Optional[int] = None
    embedding_api_key: Optional[str] = field(default=None, repr=False)
    chunking_mode: Optional[str] = None  # tokens|characters
    custom_separators: Optional[List[str]] = None

    def __post_init__(self):
        for name in ("chunk_size", "overlap", "max_chunks"):
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise ConfigurationError(f"{name} must be >= 0, got {value}")
        if self.chunking_mode is not None and self.chunking_mode not in CHUNKING_MODES:
            raise ConfigurationError(
                f"chunking_mode must be one of {CHUNKING_MODES}, got {self.chunking_mode!r}"
            )
        if self.custom_separators is not None and not all(isinstance(s, str) for s in self.custom_separators):
            raise ConfigurationError("custom_separators must be a list of strings")

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "ChunkingOptions":
        """Build options from snake_case or camelCase keys; unknown keys are rejected."""
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigurationError(f"Unknown chunking option: {key}")
            kwargs[name] = value
        if kwargs.get("custom_separators") is not None:
            kwargs["custom_separators"] = list(kwargs["custom_separators"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("embedding_api_key")
        return data

    def replace(self, **changes) -> "ChunkingOptions":
        return replace(self, **changes)

@dataclass
class EmbeddingConfig:
    provider: str = "openai"  # openai|hashing
    model_name: str = "text-embedding-ada-002"
    api_key: Optional[str] = field(default=None, repr=False)
    dimension: int = 1536
    timeout: float = 60.0

@dataclass
class ParallelConfig:
    embedding_concurrency: int = 8
    batch_size: int = 15
    batch_pause_seconds: float = 0.2

@dataclass
class RagConfig:
    chat_model: str = "gpt-4o-mini"  # gpt-4o-mini|gpt-4o
    top_k: int = 5
    temperature: float = 0.3
    max_tokens: int = 500
    timeout: float = 60.0

@dataclass
class EngineConfig:
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)
    rag: RagConfig = field(default_factory=RagConfig)
    default_method: str = "paragraph-based"
    default_options: Dict[str, Any] = field(default_factory=dict)
    max_windows: int = 100  # sliding-window output ceiling
    telemetry_enabled: bool = False
    telemetry_endpoint: str = DEFAULT_OTLP_ENDPOINT

    def chunking_options(self, **overrides) -> ChunkingOptions:
        data = dict(self.default_options)
        data.update(overrides)
        return ChunkingOptions.from_dict(data)

_SECTIONS = {
    "embedding": EmbeddingConfig,
    "parallel": ParallelConfig,
    "rag": RagConfig,
}

def config_from_dict(data: Optional[Dict[str, Any]]) -> EngineConfig:
    data = dict(data or {})
    kwargs = {}
    for name, section_cls in _SECTIONS.items():
        section = data.pop(name, None) or {}
        allowed = {f.name for f in fields(section_cls)}
        unknown = set(section) - allowed
        if unknown:
            raise ConfigurationError(f"Unknown keys in '{name}' section: {sorted(unknown)}")
        kwargs[name] = section_cls(**section)
    allowed = {f.name for f in fields(EngineConfig)}
    unknown = set(data) - allowed
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
    kwargs.update(data)
    cfg = EngineConfig(**kwargs)
    # Validate eagerly so a bad file fails at load time
    cfg.chunking_options()
    return cfg

def load_config(path: str) -> EngineConfig:
    """Read an EngineConfig from a YAML file."""
    with open(path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f)
    if data is not None and not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a mapping")
    return config_from_dict(data)
