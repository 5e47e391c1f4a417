"""Structural equivalence of JSON Schema fragments.

Two fragments are equivalent when they describe the same shape once
non-semantic keywords (``description`` by default) are dropped at every
schema position. Key order never matters; ``type``, ``required`` and
``enum`` are compared as unordered collections. The walk uses an explicit
stack, so nesting depth is bounded only by memory.
"""

import json
from collections.abc import Iterable
from typing import Any

from api_schema_metrics.config import DEFAULT_IGNORED_KEYWORDS

# Node kinds on the work stack
SCHEMA = "schema"
SCHEMA_MAP = "schema_map"
SCHEMA_LIST = "schema_list"
SCHEMA_OR_LIST = "schema_or_list"
UNORDERED = "unordered"
VALUE = "value"

KEYWORD_KINDS = {
    "properties": SCHEMA_MAP,
    "patternProperties": SCHEMA_MAP,
    "definitions": SCHEMA_MAP,
    "$defs": SCHEMA_MAP,
    "dependentSchemas": SCHEMA_MAP,
    "allOf": SCHEMA_LIST,
    "anyOf": SCHEMA_LIST,
    "oneOf": SCHEMA_LIST,
    "prefixItems": SCHEMA_LIST,
    "items": SCHEMA_OR_LIST,
    "not": SCHEMA,
    "additionalProperties": SCHEMA,
    "additionalItems": SCHEMA,
    "contains": SCHEMA,
    "propertyNames": SCHEMA,
    "if": SCHEMA,
    "then": SCHEMA,
    "else": SCHEMA,
    "unevaluatedItems": SCHEMA,
    "unevaluatedProperties": SCHEMA,
    "contentSchema": SCHEMA,
    "type": UNORDERED,
    "required": UNORDERED,
    "enum": UNORDERED,
}


def equivalent(a: Any, b: Any, ignore: Iterable[str] = DEFAULT_IGNORED_KEYWORDS) -> bool:
    """Return True if schema fragments ``a`` and ``b`` are structurally equal."""
    ignored = frozenset(ignore)
    stack: list[tuple[Any, Any, str]] = [(a, b, SCHEMA)]

    while stack:
        left, right, kind = stack.pop()

        if kind == SCHEMA:
            if not (isinstance(left, dict) and isinstance(right, dict)):
                # boolean schemas and anything malformed compare literally
                stack.append((left, right, VALUE))
                continue
            if _type_set(left) != _type_set(right):
                return False
            left_keys = {k for k in left if k not in ignored}
            if left_keys != {k for k in right if k not in ignored}:
                return False
            for key in left_keys:
                stack.append((left[key], right[key], KEYWORD_KINDS.get(key, VALUE)))

        elif kind == SCHEMA_MAP:
            if not (isinstance(left, dict) and isinstance(right, dict)):
                stack.append((left, right, VALUE))
                continue
            if left.keys() != right.keys():
                return False
            for key in left:
                stack.append((left[key], right[key], SCHEMA))

        elif kind == SCHEMA_LIST:
            if not (isinstance(left, list) and isinstance(right, list)):
                stack.append((left, right, VALUE))
                continue
            if len(left) != len(right):
                return False
            stack.extend(zip(left, right, [SCHEMA] * len(left)))

        elif kind == SCHEMA_OR_LIST:
            if isinstance(left, list) and isinstance(right, list):
                stack.append((left, right, SCHEMA_LIST))
            else:
                stack.append((left, right, SCHEMA))

        elif kind == UNORDERED:
            if not _same_members(left, right):
                return False

        else:
            if isinstance(left, dict) and isinstance(right, dict):
                if left.keys() != right.keys():
                    return False
                for key in left:
                    stack.append((left[key], right[key], VALUE))
            elif isinstance(left, list) and isinstance(right, list):
                if len(left) != len(right):
                    return False
                stack.extend(zip(left, right, [VALUE] * len(left)))
            elif not _same_scalar(left, right):
                return False

    return True


def _type_set(schema: dict) -> frozenset | None:
    declared = schema.get("type")
    if declared is None:
        return None
    if isinstance(declared, list):
        return frozenset(_canonical(t) for t in declared)
    return frozenset([_canonical(declared)])


def _same_members(left: Any, right: Any) -> bool:
    if not isinstance(left, list):
        left = [left]
    if not isinstance(right, list):
        right = [right]
    return sorted(map(_canonical, left)) == sorted(map(_canonical, right))


def _canonical(value: Any) -> str:
    return json.dumps(_integral(value), sort_keys=True, default=str)


def _integral(value: Any) -> Any:
    # 1.0 and 1 must canonicalize alike, matching _same_scalar
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _integral(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_integral(v) for v in value]
    return value


def _same_scalar(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    return type(left) is type(right) and left == right
