from __future__ import annotations
import time
import concurrent.futures
from dataclasses import dataclass, field
from typing import List, Dict, Sequence, Union
from opentelemetry import context

from ..chunkers.base import Chunk
from ..embedding.base import BaseEncoder
from ..retrieval.in_memory import EmbeddedChunk
from ..utils.logger import logger
from ..utils.telemetry import run_in_context

@dataclass
class BatchEmbeddingReport:
    chunks: List[EmbeddedChunk]
    errors: Dict[int, str] = field(default_factory=dict)

    @property
    def embedded(self) -> int:
        return sum(1 for c in self.chunks if c.embedding is not None)

def embed_chunks(chunks: Sequence[Union[Chunk, EmbeddedChunk]], encoder: BaseEncoder,
                 batch_size: int = 15, pause_seconds: float = 0.2, max_workers: int = 8) -> BatchEmbeddingReport:
    """
    Attach an embedding to every chunk, one request per chunk.

    Chunks go out in batches of `batch_size`; each batch runs on a thread pool
    and is waited for in full, then the loop sleeps `pause_seconds` before the
    next one. A failed request leaves that chunk without an embedding and is
    recorded in `errors` under the chunk's position; the rest carry on.
    """
    embedded = [c if isinstance(c, EmbeddedChunk) else EmbeddedChunk.from_chunk(c) for c in chunks]
    report = BatchEmbeddingReport(chunks=embedded)
    batch_size = max(1, batch_size)
    parent = context.get_current()

    for start in range(0, len(embedded), batch_size):
        batch = range(start, min(start + batch_size, len(embedded)))
        logger.info(f"Embedding chunks {batch.start + 1}-{batch.stop} of {len(embedded)}")
        with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, min(max_workers, len(batch)))) as executor:
            futures = {executor.submit(run_in_context, parent, encoder.embed, embedded[i].text): i for i in batch}
            for future in concurrent.futures.as_completed(futures):
                idx = futures[future]
                try:
                    embedded[idx].embedding = future.result()
                except Exception as e:
                    logger.error(f"Error generating embedding for chunk {idx}: {e}")
                    report.errors[idx] = str(e)

        if batch.stop < len(embedded) and pause_seconds > 0:
            time.sleep(pause_seconds)

    return report
