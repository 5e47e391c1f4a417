"""Bring an API document up to the current description version."""

import logging

from api_schema_metrics.config import CURRENT_VERSION_MARKER
from api_schema_metrics.parser.convert import ConversionResult, Swagger2Converter, VersionConverter

logger = logging.getLogger(__name__)


def normalize(doc: dict, converter: VersionConverter | None = None) -> dict:
    """Return ``doc`` as an OpenAPI 3.x document, best effort.

    Current-version documents come back unchanged. Anything else goes
    through ``converter``; when it fails, its partial output is used, and
    when there is none, the original document is returned. Never raises.
    """
    if CURRENT_VERSION_MARKER in doc:
        return doc

    converter = converter or Swagger2Converter()
    logger.info("Converting document to OpenAPI 3.x")
    try:
        result = converter.convert(doc)
    except Exception:
        logger.exception("Version converter raised; keeping the original document")
        return doc

    if not isinstance(result, ConversionResult):
        logger.warning("Version converter returned %r instead of a ConversionResult; keeping the original document",
                       type(result).__name__)
        return doc

    if not result.ok:
        source = "partial output" if result.partial is not None else "original document"
        logger.warning("Conversion failed (%s); falling back to %s", result.error, source)
    return result.best_effort(doc)
