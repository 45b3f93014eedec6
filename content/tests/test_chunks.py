import json

import pytest
from django.core.cache import cache

from content.chunks import TemplateChunkBuffer
from core.exceptions import ValidationError


def split(payload: str, parts: int) -> list[str]:
    size = -(-len(payload) // parts)
    return [payload[i:i + size] for i in range(0, len(payload), size)]


def test_chunks_reassemble_in_any_order():
    template = {"html": "<h1>Hello</h1>" * 20, "css": "h1 { color: red; }"}
    chunks = split(json.dumps(template), 3)
    buffer = TemplateChunkBuffer()

    assert buffer.add(1, "en", "u1", 2, 3, chunks[2]) is None
    assert buffer.add(1, "en", "u1", 0, 3, chunks[0]) is None
    assert buffer.add(1, "en", "u1", 1, 3, chunks[1]) == template

    # buffer is cleared once complete
    assert cache.get(buffer._key(1, "en", "u1", 0)) is None


def test_uploads_do_not_mix():
    buffer = TemplateChunkBuffer()
    first = split(json.dumps({"html": "first"}), 2)
    second = split(json.dumps({"html": "second"}), 2)

    buffer.add(1, "en", "alice", 0, 2, first[0])
    buffer.add(1, "bn", "alice", 0, 2, second[0])
    assert buffer.add(1, "en", "alice", 1, 2, first[1]) == {"html": "first"}
    assert buffer.add(1, "bn", "alice", 1, 2, second[1]) == {"html": "second"}


def test_resending_a_chunk_overwrites_it():
    buffer = TemplateChunkBuffer()
    buffer.add(1, "en", "u", 0, 2, "garbage")
    buffer.add(1, "en", "u", 0, 2, '{"html": ')
    assert buffer.add(1, "en", "u", 1, 2, '"ok"}') == {"html": "ok"}


def test_invalid_json_is_rejected():
    buffer = TemplateChunkBuffer()
    buffer.add(1, "en", "u", 0, 2, '{"html": ')
    with pytest.raises(ValidationError) as exc:
        buffer.add(1, "en", "u", 1, 2, "oops")
    assert exc.value.field == "chunk"


def test_non_object_is_rejected():
    with pytest.raises(ValidationError):
        TemplateChunkBuffer().add(1, "en", "u", 0, 1, "[1, 2, 3]")


def test_chunk_count_is_capped():
    with pytest.raises(ValidationError) as exc:
        TemplateChunkBuffer(max_chunks=4).add(1, "en", "u", 0, 5, "{}")
    assert exc.value.field == "total"
