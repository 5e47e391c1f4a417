"""Structure and schema size metrics.

Structure metrics:
1. paths: number of path entries.
2. operations: number of HTTP operations across all paths.
3. webhooks: number of webhooks.
4. used_methods: number of distinct HTTP methods in use.
5. parametered_operations: operations declaring at least one parameter.
6. distinct_parameters: unique parameter names.
7. parameters_per_operation: used_parameters / operations.
8. used_parameters: total method-level parameters.

Schema metrics:
1. used_schemas: number of schema groups.
2. defined_schemas: entries in components.schemas.
3. properties / max_properties / min_properties: property counts over
   the object-typed group representatives.
4. distinct_properties: unique property names over those representatives.
"""

from pydantic import BaseModel

from api_schema_metrics.config import HTTP_METHODS
from api_schema_metrics.parser.openapi import iter_operations
from api_schema_metrics.schemas.models import SchemaGroup


class StructureSize(BaseModel):
    paths: int = 0
    operations: int = 0
    webhooks: int = 0
    used_methods: int = 0
    parametered_operations: int = 0
    distinct_parameters: list[str] = []
    parameters_per_operation: float = 0.0
    used_parameters: int = 0
    methods: dict[str, int] = {}


class SchemaSize(BaseModel):
    used_schemas: int = 0
    defined_schemas: int = 0
    properties: int = 0
    max_properties: int = 0
    min_properties: int = 0
    distinct_properties: list[str] = []


def calculate_structure_size(doc: dict) -> StructureSize:
    """Count paths, operations and parameters of a document."""
    size = StructureSize(methods={m: 0 for m in HTTP_METHODS})

    paths = doc.get("paths")
    if isinstance(paths, dict):
        size.paths = len(paths)
        used_methods: set[str] = set()
        names: list[str] = []
        for op in iter_operations(doc):
            method = op.method.lower()
            size.operations += 1
            size.methods[method] += 1
            used_methods.add(method)
            if op.parameters:
                size.parametered_operations += 1
            size.used_parameters += len(op.parameters)
            for param in op.parameters:
                name = param.get("name") if isinstance(param, dict) else None
                if name is not None and name not in names:
                    names.append(name)

        size.used_methods = len(used_methods)
        size.distinct_parameters = names
        if size.operations:
            size.parameters_per_operation = size.used_parameters / size.operations

    webhooks = doc.get("webhooks")
    if isinstance(webhooks, dict):
        size.webhooks = len(webhooks)

    return size


def calculate_schema_size(doc: dict, groups: list[SchemaGroup]) -> SchemaSize:
    """Measure the grouped schemas and the document's declared components."""
    size = SchemaSize(used_schemas=len(groups))

    components = doc.get("components")
    if isinstance(components, dict) and isinstance(components.get("schemas"), dict):
        size.defined_schemas = len(components["schemas"])

    counts: list[int] = []
    names: list[str] = []
    for group in groups:
        schema = group.representative_schema
        properties = schema.get("properties")
        if schema.get("type") != "object" or not isinstance(properties, dict):
            continue
        counts.append(len(properties))
        for name in properties:
            if name not in names:
                names.append(name)

    if counts:
        size.properties = sum(counts)
        size.max_properties = max(counts)
        size.min_properties = min(counts)
    size.distinct_properties = names
    return size
