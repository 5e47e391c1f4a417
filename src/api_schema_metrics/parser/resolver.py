"""Inline local $ref pointers so the schema core sees a self-contained document."""

import logging
from copy import deepcopy
from typing import Any

from api_schema_metrics.exceptions import ExternalRefError, RefResolutionError

logger = logging.getLogger(__name__)


class RefResolver:
    """Resolves local ``#/...`` references within one document.

    A reference that points back into its own resolution chain is left in
    place as ``{"$ref": ...}``, so the resolved document is always acyclic.
    """

    def __init__(self, document: dict):
        self.document = document
        self._resolution_stack: list[str] = []

    def resolve(self) -> dict:
        """Return a deep copy of the document with every local $ref inlined."""
        return self._resolve_node(self.document)

    def _resolve_node(self, node: Any) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                return self._resolve_ref(node, ref)
            return {key: self._resolve_node(value) for key, value in node.items()}

        if isinstance(node, list):
            return [self._resolve_node(item) for item in node]

        return node

    def _resolve_ref(self, node: dict, ref: str) -> Any:
        if not ref.startswith("#"):
            raise ExternalRefError(ref)

        if ref in self._resolution_stack:
            logger.debug("Circular $ref %s left unresolved", ref)
            return deepcopy(node)

        self._resolution_stack.append(ref)
        try:
            target = self._lookup(ref)
            return self._resolve_node(deepcopy(target))
        finally:
            self._resolution_stack.pop()

    def _lookup(self, ref: str) -> Any:
        if ref in ("#", "#/"):
            return self.document
        if not ref.startswith("#/"):
            raise RefResolutionError(ref, "only JSON pointer fragments are supported")

        resolved: Any = self.document
        for part in ref[2:].split("/"):
            # JSON pointer escaping
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(resolved, dict) and part in resolved:
                resolved = resolved[part]
            elif isinstance(resolved, list) and part.isdigit() and int(part) < len(resolved):
                resolved = resolved[int(part)]
            else:
                raise RefResolutionError(ref, f"path component '{part}' not found")
        return resolved


def resolve_refs(doc: dict) -> dict:
    """Return a copy of ``doc`` with all local references inlined."""
    return RefResolver(doc).resolve()
