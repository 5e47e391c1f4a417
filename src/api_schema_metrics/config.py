"""Analysis settings.

Defaults live in module constants; ``AnalysisConfig.from_env`` lets the
environment override them.
"""

import os

from pydantic import BaseModel

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

DEFAULT_MEDIA_TYPE = "application/json"
DEFAULT_IGNORED_KEYWORDS = ("description",)

# Documents carrying this top-level key are already OpenAPI 3.x
CURRENT_VERSION_MARKER = "openapi"
CONVERTED_VERSION = "3.0.3"

ENV_MEDIA_TYPE = "API_SCHEMA_METRICS_MEDIA_TYPE"
ENV_IGNORE = "API_SCHEMA_METRICS_IGNORE"


class AnalysisConfig(BaseModel):
    """Settings for one analysis run."""

    media_type: str = DEFAULT_MEDIA_TYPE
    ignored_keywords: tuple[str, ...] = DEFAULT_IGNORED_KEYWORDS

    @classmethod
    def from_env(cls, extra_ignored: tuple[str, ...] = ()) -> "AnalysisConfig":
        media_type = os.getenv(ENV_MEDIA_TYPE, DEFAULT_MEDIA_TYPE)
        env_ignored = tuple(k.strip() for k in os.getenv(ENV_IGNORE, "").split(",") if k.strip())
        return cls(
            media_type=media_type,
            ignored_keywords=_merge_keywords(DEFAULT_IGNORED_KEYWORDS, env_ignored, extra_ignored),
        )


def _merge_keywords(*groups: tuple[str, ...]) -> tuple[str, ...]:
    merged: list[str] = []
    for group in groups:
        for keyword in group:
            if keyword not in merged:
                merged.append(keyword)
    return tuple(merged)
