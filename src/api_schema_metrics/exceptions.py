"""Custom exceptions for api-schema-metrics."""


class SchemaMetricsError(Exception):
    """Base exception for api-schema-metrics errors."""


class DocumentLoadError(SchemaMetricsError):
    """Raised when an API document cannot be read or parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"Cannot load {path}: {reason}")
        self.path = path
        self.reason = reason


class RefResolutionError(SchemaMetricsError):
    """Raised when a local $ref points at nothing."""

    def __init__(self, ref: str, reason: str):
        super().__init__(f"Cannot resolve $ref {ref}: {reason}")
        self.ref = ref
        self.reason = reason


class ExternalRefError(RefResolutionError):
    """Raised when an external $ref is encountered."""

    def __init__(self, ref: str):
        super().__init__(ref, "external references are not supported")


class ConversionError(SchemaMetricsError):
    """Raised inside a converter when a document cannot be upgraded.

    Converters catch it themselves and report it through ``ConversionResult``.
    """

    def __init__(self, message: str, partial: dict | None = None):
        super().__init__(message)
        self.partial = partial
