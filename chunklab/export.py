from __future__ import annotations
import json
import re
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Union

from .chunkers.base import ChunkingResult
from .config import ChunkingOptions

PREVIEW_CHUNKS = 2

def iso_timestamp(moment: Optional[datetime] = None) -> str:
    """UTC ISO-8601 with millisecond precision, e.g. 2024-05-01T09:30:00.000Z."""
    moment = (moment or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

def build_export(text: str, method: str, options: Optional[ChunkingOptions], result: ChunkingResult,
                 preview: bool = False, timestamp: Optional[str] = None) -> Dict[str, Any]:
    options = options or ChunkingOptions()
    chunks = [
        {
            "chunkNumber": c.id + 1,
            "metadata": {"tokens": c.tokens, "characters": c.characters},
            "content": c.text,
        }
        for c in result.chunks
    ]
    hidden = len(chunks) - PREVIEW_CHUNKS if preview else 0
    if preview:
        chunks = chunks[:PREVIEW_CHUNKS]
    doc: Dict[str, Any] = {
        "metadata": {
            "timestamp": timestamp or iso_timestamp(),
            "method": str(getattr(method, "value", method)),
            "options": {
                "chunkSize": options.chunk_size,
                "overlap": options.overlap,
                "maxChunks": options.max_chunks,
                "chunkingMode": options.chunking_mode,
            },
            "analysis": result.analysis.to_dict(),
            "textLength": len(text),
            "totalTokens": sum(c.tokens for c in result.chunks),
            "totalCharacters": sum(c.characters for c in result.chunks),
        },
        "chunks": chunks,
    }
    if hidden > 0:
        doc["note"] = f"... {hidden} more chunks (truncated for preview) ..."
    return doc

def export_json(text: str, method: str, options: Optional[ChunkingOptions], result: ChunkingResult,
                preview: bool = False) -> str:
    return json.dumps(build_export(text, method, options, result, preview=preview), ensure_ascii=False, indent=2)

def export_filename(method: str, timestamp: Union[str, datetime, None] = None) -> str:
    """Download name such as text_chunks_fixed_length_2024-05-01T09-30-00-000Z.json"""
    if not isinstance(timestamp, str):
        timestamp = iso_timestamp(timestamp)
    method_name = str(getattr(method, "value", method)).replace("-", "_")
    return f"text_chunks_{method_name}_{re.sub(r'[:.]', '-', timestamp)}.json"
