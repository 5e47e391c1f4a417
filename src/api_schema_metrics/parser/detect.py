"""Load API documents from disk and detect their description version."""

from pathlib import Path

import yaml

from api_schema_metrics.exceptions import DocumentLoadError


def load_document(file_path: Path) -> dict:
    """Read a JSON or YAML API document into a dict."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(str(file_path), e.strerror or str(e)) from e

    # JSON is a subset of YAML, one parser covers both
    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(str(file_path), f"YAMLError: {e}") from e

    if not isinstance(doc, dict):
        raise DocumentLoadError(str(file_path), "document root is not a mapping")
    return doc


def detect_version(doc: dict) -> str:
    """Detect the description version of a parsed document.

    Returns: 'openapi3', 'swagger2', or 'unknown'.
    """
    if "openapi" in doc:
        return "openapi3"
    swagger = doc.get("swagger")
    if isinstance(swagger, str) and swagger.startswith("2."):
        return "swagger2"
    return "unknown"
