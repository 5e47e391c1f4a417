"""Swagger 2.0 to OpenAPI 3.x conversion.

Converters never raise: failures are reported through ``ConversionResult``
together with whatever part of the document was already converted.
"""

import copy
import logging
from typing import Any, Protocol

from pydantic import BaseModel

from api_schema_metrics.config import CONVERTED_VERSION, DEFAULT_MEDIA_TYPE, HTTP_METHODS
from api_schema_metrics.exceptions import ConversionError

logger = logging.getLogger(__name__)

REF_PREFIXES = {
    "#/definitions/": "#/components/schemas/",
    "#/parameters/": "#/components/parameters/",
    "#/responses/": "#/components/responses/",
}

# Swagger 2.0 parameter keys that belong in the 3.x parameter schema
SCHEMA_PARAM_KEYS = (
    "type", "format", "items", "enum", "default", "minimum", "maximum",
    "exclusiveMinimum", "exclusiveMaximum", "minLength", "maxLength", "pattern",
    "minItems", "maxItems", "uniqueItems", "multipleOf",
)


class ConversionResult(BaseModel):
    """Outcome of a conversion attempt."""

    document: dict | None = None
    partial: dict | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.document is not None

    def best_effort(self, fallback: dict) -> dict:
        """Converted document, else the partial output, else ``fallback``."""
        if self.ok:
            return self.document
        if self.partial is not None:
            return self.partial
        return fallback


class VersionConverter(Protocol):
    def convert(self, doc: dict) -> ConversionResult: ...


class Swagger2Converter:
    """Converts Swagger 2.0 documents into an OpenAPI 3.x shape.

    Covers what schema harvesting and metrics read: components, servers,
    request bodies, response content and parameter schemas.
    """

    def __init__(self, default_media_type: str = DEFAULT_MEDIA_TYPE):
        self.default_media_type = default_media_type

    def convert(self, doc: dict) -> ConversionResult:
        converted: dict[str, Any] = {}
        try:
            self._convert_into(doc, converted)
        except (ConversionError, AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Swagger 2.0 conversion failed: %s", e)
            return ConversionResult(partial=converted or None, error=str(e))
        return ConversionResult(document=converted)

    def _convert_into(self, doc: dict, converted: dict) -> None:
        swagger = doc.get("swagger")
        if not (isinstance(swagger, str) and swagger.startswith("2.")):
            raise ConversionError(f"Unsupported description version: {swagger!r}")

        v2 = _rewrite_refs(copy.deepcopy(doc))

        converted["openapi"] = CONVERTED_VERSION
        for key, value in v2.items():
            if key not in ("swagger", "host", "basePath", "schemes", "consumes", "produces",
                           "definitions", "parameters", "responses", "securityDefinitions", "paths"):
                converted[key] = value

        servers = self._servers(v2)
        if servers:
            converted["servers"] = servers

        components: dict[str, Any] = {}
        if isinstance(v2.get("definitions"), dict):
            components["schemas"] = v2["definitions"]
        if isinstance(v2.get("securityDefinitions"), dict):
            components["securitySchemes"] = v2["securityDefinitions"]
        if isinstance(v2.get("parameters"), dict):
            components["parameters"] = {
                name: self._parameter(p) for name, p in v2["parameters"].items() if p.get("in") != "body"
            }
        if isinstance(v2.get("responses"), dict):
            produces = v2.get("produces") or [self.default_media_type]
            components["responses"] = {
                name: self._response(r, produces) for name, r in v2["responses"].items()
            }
        if components:
            converted["components"] = components

        converted["paths"] = {}
        for path, path_item in (v2.get("paths") or {}).items():
            converted["paths"][path] = self._path_item(path_item, v2)

    def _servers(self, v2: dict) -> list[dict]:
        host = v2.get("host")
        base_path = v2.get("basePath", "")
        schemes = v2.get("schemes") or ["https"]
        if host:
            return [{"url": f"{scheme}://{host}{base_path}"} for scheme in schemes]
        if base_path:
            return [{"url": base_path}]
        return []

    def _path_item(self, path_item: dict, v2: dict) -> dict:
        result: dict[str, Any] = {}
        shared_body = None
        shared_params = []
        for p in path_item.get("parameters", []):
            if p.get("in") == "body":
                shared_body = p
            else:
                shared_params.append(self._parameter(p))

        for key, value in path_item.items():
            if key == "parameters":
                if shared_params:
                    result["parameters"] = shared_params
            elif key.lower() in HTTP_METHODS and isinstance(value, dict):
                result[key] = self._operation(value, v2, shared_body)
            else:
                result[key] = value
        return result

    def _operation(self, operation: dict, v2: dict, shared_body: dict | None) -> dict:
        consumes = operation.get("consumes") or v2.get("consumes") or [self.default_media_type]
        produces = operation.get("produces") or v2.get("produces") or [self.default_media_type]

        result = {k: v for k, v in operation.items()
                  if k not in ("consumes", "produces", "parameters", "responses")}

        body_param = shared_body
        form_schema = None
        form_media = "application/x-www-form-urlencoded"
        params = []
        for p in operation.get("parameters", []):
            location = p.get("in")
            if location == "body":
                body_param = p
            elif location == "formData":
                if p.get("type") == "file":
                    form_media = "multipart/form-data"
                if form_schema is None:
                    form_schema = {"type": "object", "properties": {}}
                form_schema["properties"][p.get("name", "field")] = {
                    k: v for k, v in p.items() if k in ("type", "format", "description", "items", "enum")
                }
                if p.get("required"):
                    form_schema.setdefault("required", []).append(p.get("name", "field"))
            else:
                params.append(self._parameter(p))
        if params:
            result["parameters"] = params

        if body_param is not None:
            request_body: dict[str, Any] = {
                "content": {mt: {"schema": body_param.get("schema", {})} for mt in consumes},
            }
            if body_param.get("description"):
                request_body["description"] = body_param["description"]
            if body_param.get("required"):
                request_body["required"] = True
            result["requestBody"] = request_body
        elif form_schema is not None:
            result["requestBody"] = {"content": {form_media: {"schema": form_schema}}}

        if "responses" in operation:
            result["responses"] = {
                code: self._response(resp, produces) for code, resp in operation["responses"].items()
            }
        return result

    def _parameter(self, param: dict) -> dict:
        if "$ref" in param:
            return param
        result = {k: v for k, v in param.items() if k not in SCHEMA_PARAM_KEYS and k != "collectionFormat"}
        schema = {k: v for k, v in param.items() if k in SCHEMA_PARAM_KEYS}
        if schema:
            result["schema"] = schema
        return result

    def _response(self, response: dict, produces: list[str]) -> dict:
        if "$ref" in response:
            return response
        result = {k: v for k, v in response.items() if k not in ("schema", "examples")}
        result.setdefault("description", "")
        if "schema" in response:
            result["content"] = {mt: {"schema": response["schema"]} for mt in produces}
        return result


def _rewrite_refs(node: Any) -> Any:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            for old, new in REF_PREFIXES.items():
                if ref.startswith(old):
                    node["$ref"] = new + ref[len(old):]
                    break
        for value in node.values():
            _rewrite_refs(value)
    elif isinstance(node, list):
        for item in node:
            _rewrite_refs(item)
    return node
