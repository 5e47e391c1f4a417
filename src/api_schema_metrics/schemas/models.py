"""Records produced while harvesting and grouping body schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict

Direction = Literal["request", "response"]


class Endpoint(BaseModel):
    """An (path, method, status code) triple; requests have no status code."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: str
    status_code: str | None = None


class Occurrence(BaseModel):
    """One place in the document where a body schema is used."""

    path: str
    method: str
    status_code: str | None = None
    direction: Direction
    body_schema: dict | None = None
    request_schema: dict | None = None  # the operation's request body, for context
    method_parameters: list = []
    path_parameters: list = []

    @property
    def endpoint(self) -> Endpoint:
        return Endpoint(path=self.path, method=self.method, status_code=self.status_code)


class SchemaGroup(BaseModel):
    """Structurally equivalent schemas and every endpoint that uses them.

    ``endpoints`` and ``directions`` behave as insertion-ordered sets.
    """

    representative_schema: dict
    endpoints: list[Endpoint] = []
    directions: list[Direction] = []

    def add_endpoint(self, endpoint: Endpoint) -> None:
        if endpoint not in self.endpoints:
            self.endpoints.append(endpoint)

    def add_direction(self, direction: Direction) -> None:
        if direction not in self.directions:
            self.directions.append(direction)
