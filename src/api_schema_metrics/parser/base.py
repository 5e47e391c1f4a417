"""Data models for operations read out of an OpenAPI document.

The parser keeps request bodies, responses and parameters as raw mappings;
only the operation envelope is modelled.
"""

from pydantic import BaseModel


class Operation(BaseModel):
    """A single HTTP operation, identified by (path, method)."""

    path: str  # /api/users/{id}
    method: str  # get / post / ... (lower case, as declared)
    summary: str = ""
    description: str = ""
    request_body: dict | None = None
    responses: dict = {}  # {status_code: response object}
    has_responses: bool = False  # the operation declared a responses map
    parameters: list = []  # method-level parameters
    path_parameters: list = []  # inherited from the path item
