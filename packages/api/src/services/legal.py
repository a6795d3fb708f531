# This project was developed with assistance from AI tools.
"""Static legal texts (terms of sale, refund policy) served from disk."""

import asyncio
import logging
from pathlib import Path

from db.enums import LegalDocument

from ..core.config import settings
from ..core.errors import DownstreamError, NotFoundError

logger = logging.getLogger(__name__)

_FILES = {
    LegalDocument.CGV: "cgv.txt",
    LegalDocument.REFUND_POLICY: "refund_policy.txt",
}


def resolve_document(name: str) -> LegalDocument:
    try:
        return LegalDocument(name)
    except ValueError as exc:
        raise NotFoundError("Document not found") from exc


async def read_legal_document(name: str, base_dir: Path | None = None) -> str:
    """Return the text of legal document ``name``.

    Raises NotFoundError for unknown names and DownstreamError when the file
    cannot be read.
    """
    doc = resolve_document(name)
    path = (base_dir or settings.LEGAL_DOCS_DIR) / _FILES[doc]
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, path.read_text, "utf-8")
    except OSError as exc:
        logger.exception("Failed to read legal document %s", path)
        raise DownstreamError("Failed to load document") from exc
