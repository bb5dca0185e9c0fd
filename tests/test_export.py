"""Tests for the JSON export document."""
import json
from datetime import datetime, timezone

from chunklab import chunk
from chunklab.config import ChunkingOptions
from chunklab.export import build_export, export_json, export_filename, iso_timestamp


def sample():
    text = "a b c d e f g h i j k l"
    options = ChunkingOptions(chunk_size=4, overlap=0, chunking_mode="tokens")
    return text, options, chunk(text, "fixed-length", options)


class TestBuildExport:
    def test_shape(self) -> None:
        text, options, result = sample()
        doc = build_export(text, "fixed-length", options, result, timestamp="2024-05-01T09:30:00.000Z")
        meta = doc["metadata"]
        assert meta["timestamp"] == "2024-05-01T09:30:00.000Z"
        assert meta["method"] == "fixed-length"
        assert meta["options"] == {"chunkSize": 4, "overlap": 0, "maxChunks": None, "chunkingMode": "tokens"}
        assert meta["analysis"]["totalChunks"] == 3
        assert meta["textLength"] == len(text)
        assert meta["totalTokens"] == 12
        assert meta["totalCharacters"] == sum(c.characters for c in result.chunks)
        assert doc["chunks"][0] == {
            "chunkNumber": 1,
            "metadata": {"tokens": 4, "characters": 7},
            "content": "a b c d",
        }

    def test_preview_keeps_first_two(self) -> None:
        text, options, result = sample()
        doc = build_export(text, "fixed-length", options, result, preview=True)
        assert [c["chunkNumber"] for c in doc["chunks"]] == [1, 2]
        assert doc["metadata"]["analysis"]["totalChunks"] == 3
        assert doc["note"] == "... 1 more chunks (truncated for preview) ..."

    def test_no_note_when_nothing_hidden(self) -> None:
        text, options, result = sample()
        assert "note" not in build_export(text, "fixed-length", options, result)
        short = chunk("a b c d", "fixed-length", options)
        assert "note" not in build_export("a b c d", "fixed-length", options, short, preview=True)

    def test_json_round_trip(self) -> None:
        text, options, result = sample()
        parsed = json.loads(export_json(text, "fixed-length", options, result))
        assert len(parsed["chunks"]) == 3


class TestFilename:
    def test_method_and_timestamp_sanitised(self) -> None:
        name = export_filename("fixed-length-chars", "2024-05-01T09:30:00.123Z")
        assert name == "text_chunks_fixed_length_chars_2024-05-01T09-30-00-123Z.json"

    def test_datetime_timestamp(self) -> None:
        moment = datetime(2024, 5, 1, 9, 30, 0, 123000, tzinfo=timezone.utc)
        assert iso_timestamp(moment) == "2024-05-01T09:30:00.123Z"
        assert export_filename("hybrid", moment) == "text_chunks_hybrid_2024-05-01T09-30-00-123Z.json"
