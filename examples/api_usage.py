import os
from chunklab import chunk, ChunkingOptions, EngineConfig, RagPipeline
from chunklab.embedding.hashing import HashingEmbedding
from chunklab.utils.logger import logger

SAMPLE_TEXT = """# Launch report

The rocket lifted off at dawn. Engineers watched the telemetry closely.

## Payload

The payload carried three instruments. Each instrument was calibrated twice.

## Next steps

The team will review the data next week."""

def run_api_demo():
    """
    Spans are exported over OTLP/HTTP to CHUNKLAB_OTLP_ENDPOINT (default
    http://localhost:4318/v1/traces) when a collector is listening there,
    e.g. `docker run -p 4318:4318 otel/opentelemetry-collector`.
    """
    cfg = EngineConfig(telemetry_enabled=True)
    if os.getenv("CHUNKLAB_OTLP_ENDPOINT"):
        cfg.telemetry_endpoint = os.environ["CHUNKLAB_OTLP_ENDPOINT"]
    logger.info(f"Tracing to {cfg.telemetry_endpoint}")

    # 1. Let the agentic selector choose a strategy
    result = chunk(SAMPLE_TEXT, "agentic", ChunkingOptions(max_chunks=5), config=cfg)
    logger.info(result.analysis.notes)

    # 2. Embed offline and rank; set OPENAI_API_KEY to also get a chat answer
    pipeline = RagPipeline(HashingEmbedding(dim=128), config=cfg)
    pipeline.embed_chunks(result.chunks)
    for hit in pipeline.search("What did the payload carry?", top_k=2):
        logger.info(f"[{hit.score:.3f}] chunk {hit.chunk_id}: {hit.text[:60]}")

    if os.getenv("OPENAI_API_KEY"):
        answer = pipeline.ask("What did the payload carry?")
        logger.success(answer.answer)

if __name__ == "__main__":
    run_api_demo()
