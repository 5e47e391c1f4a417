"""OpenAPI 3.x operation walker.

Turns the ``paths`` section of a resolved document into Operation models,
in the document's declared key order.
"""

import logging
from collections.abc import Iterator

from api_schema_metrics.config import DEFAULT_MEDIA_TYPE, HTTP_METHODS
from api_schema_metrics.parser.base import Operation

logger = logging.getLogger(__name__)


def iter_operations(doc: dict) -> Iterator[Operation]:
    """Yield every operation of the document, paths first, then methods."""
    paths = doc.get("paths")
    if not isinstance(paths, dict):
        logger.warning("Document has no 'paths' mapping; no operations to walk")
        return

    for path, path_item in paths.items():
        if not isinstance(path_item, dict):
            continue
        path_parameters = _as_list(path_item.get("parameters"))
        for method, operation in path_item.items():
            if not isinstance(method, str) or method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            yield Operation(
                path=str(path),
                method=method,
                summary=_as_text(operation.get("summary")),
                description=_as_text(operation.get("description")),
                request_body=operation.get("requestBody") if isinstance(operation.get("requestBody"), dict) else None,
                responses=_as_responses(operation.get("responses")),
                has_responses=isinstance(operation.get("responses"), dict),
                parameters=_as_list(operation.get("parameters")),
                path_parameters=path_parameters,
            )


def json_body_schema(body: dict | None, media_type: str = DEFAULT_MEDIA_TYPE) -> dict | None:
    """Return the schema of a request body or response for one media type."""
    if not isinstance(body, dict):
        return None
    content = body.get("content")
    if not isinstance(content, dict):
        return None
    media = content.get(media_type)
    if not isinstance(media, dict):
        return None
    schema = media.get("schema")
    return schema if isinstance(schema, dict) else None


def _as_list(value) -> list:
    return list(value) if isinstance(value, list) else []


def _as_text(value) -> str:
    return value if isinstance(value, str) else ""


def _as_responses(responses) -> dict:
    if not isinstance(responses, dict):
        return {}
    # YAML reads bare status codes as ints
    return {str(code): resp for code, resp in responses.items()}
