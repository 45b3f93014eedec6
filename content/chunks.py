# backend/content/chunks.py
"""
Reassembly buffer for templates uploaded in pieces.

Each chunk lives in the Django cache under its own key, scoped to
(page, language, upload id) and expiring after CMS_TEMPLATE_CHUNK_TTL
seconds, so abandoned uploads clean themselves up and two uploads never see
each other's pieces.
"""
import json
import logging

from django.conf import settings
from django.core.cache import cache

from core.exceptions import ValidationError

logger = logging.getLogger(__name__)


class TemplateChunkBuffer:
    def __init__(self, backend=None, ttl: int | None = None, max_chunks: int | None = None):
        self.cache = backend or cache
        self.ttl = ttl or getattr(settings, "CMS_TEMPLATE_CHUNK_TTL", 600)
        self.max_chunks = max_chunks or getattr(settings, "CMS_TEMPLATE_MAX_CHUNKS", 500)

    def _key(self, page_id, language, upload_id, index) -> str:
        return f"cms:chunk:{page_id}:{language}:{upload_id}:{index}"

    def add(self, page_id, language: str, upload_id: str, index: int, total: int, chunk: str):
        """
        Store one chunk. Returns the decoded template once every chunk
        0..total-1 has arrived, otherwise None.
        """
        if total > self.max_chunks:
            raise ValidationError(
                f"A template may be split into at most {self.max_chunks} chunks.",
                field="total",
            )

        self.cache.set(self._key(page_id, language, upload_id, index), chunk, self.ttl)

        keys = [self._key(page_id, language, upload_id, i) for i in range(total)]
        received = self.cache.get_many(keys)
        if len(received) < total:
            return None

        self.cache.delete_many(keys)
        payload = "".join(received[key] for key in keys)
        try:
            template = json.loads(payload)
        except json.JSONDecodeError as exc:
            logger.warning(
                "Discarding malformed chunked template for page %s (%s)", page_id, language
            )
            raise ValidationError("Reassembled template is not valid JSON.", field="chunk") from exc

        if not isinstance(template, dict):
            raise ValidationError("Reassembled template must be a JSON object.", field="chunk")
        return template
