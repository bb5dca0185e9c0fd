from .base import BaseEncoder
from .hashing import HashingEmbedding
from .openai import OpenAIEncoder

def get_encoder(provider: str, model_name: str = None, **kwargs) -> BaseEncoder:
    """
    Factory for embedding providers.
    """
    if provider == "openai":
        return OpenAIEncoder(model_name=model_name or "text-embedding-ada-002", **kwargs)
    elif provider == "hashing":
        return HashingEmbedding(dim=kwargs.get("dim", 256))
    else:
        raise ValueError(f"Unknown embedding provider: {provider}")

def encoder_from_config(cfg) -> BaseEncoder:
    """Build the encoder described by an EmbeddingConfig."""
    if cfg.provider == "hashing":
        return HashingEmbedding(dim=cfg.dimension)
    return get_encoder(cfg.provider, cfg.model_name, api_key=cfg.api_key, timeout=cfg.timeout)

__all__ = ["BaseEncoder", "HashingEmbedding", "OpenAIEncoder", "get_encoder", "encoder_from_config"]
