"""Schema extraction, grouping and quality metrics for OpenAPI documents."""

__version__ = "0.1.0"
