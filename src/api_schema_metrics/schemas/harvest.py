"""Collect every body schema an OpenAPI document uses, with its origin."""

import logging

from api_schema_metrics.config import DEFAULT_MEDIA_TYPE
from api_schema_metrics.parser.openapi import iter_operations, json_body_schema
from api_schema_metrics.schemas.models import Occurrence

logger = logging.getLogger(__name__)


def harvest(doc: dict, media_type: str = DEFAULT_MEDIA_TYPE) -> list[Occurrence]:
    """Return schema occurrences in document order.

    For each operation: one response occurrence per status code with a body
    schema for ``media_type``, then one request occurrence if the operation
    has a request body schema. Operations without a ``responses`` map
    contribute nothing. The order decides which schema represents a group,
    so it follows the document's key order exactly.
    """
    occurrences: list[Occurrence] = []
    for op in iter_operations(doc):
        if not op.has_responses:
            continue
        request_schema = json_body_schema(op.request_body, media_type)
        context = {
            "path": op.path,
            "method": op.method,
            "request_schema": request_schema,
            "method_parameters": op.parameters,
            "path_parameters": op.path_parameters,
        }

        for status_code, response in op.responses.items():
            schema = json_body_schema(response, media_type)
            if schema is None:
                continue
            occurrences.append(
                Occurrence(status_code=status_code, direction="response", body_schema=schema, **context)
            )

        if request_schema is not None:
            occurrences.append(Occurrence(direction="request", body_schema=request_schema, **context))

    logger.debug("Harvested %d schema occurrences", len(occurrences))
    return occurrences
