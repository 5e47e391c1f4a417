"""Full analysis pipeline: normalize, harvest, group, measure."""

import logging

from pydantic import BaseModel

from api_schema_metrics.config import AnalysisConfig
from api_schema_metrics.metrics.documentation import DocumentationMetrics, calculate_documentation_metrics
from api_schema_metrics.metrics.structure import (
    SchemaSize,
    StructureSize,
    calculate_schema_size,
    calculate_structure_size,
)
from api_schema_metrics.parser.convert import VersionConverter
from api_schema_metrics.parser.normalize import normalize
from api_schema_metrics.schemas.grouping import group
from api_schema_metrics.schemas.harvest import harvest
from api_schema_metrics.schemas.models import SchemaGroup

logger = logging.getLogger(__name__)


class AnalysisReport(BaseModel):
    schema_groups: list[SchemaGroup]
    structure_size: StructureSize
    schema_size: SchemaSize
    documentation: DocumentationMetrics


def extract_schema_groups(
    doc: dict,
    config: AnalysisConfig | None = None,
    converter: VersionConverter | None = None,
) -> tuple[dict, list[SchemaGroup]]:
    """Normalize ``doc`` and group its body schemas.

    Returns the normalized document alongside the groups, since metrics
    are computed against the converted form.
    """
    config = config or AnalysisConfig()
    normalized = normalize(doc, converter)
    occurrences = harvest(normalized, media_type=config.media_type)
    groups = group(occurrences, ignore=config.ignored_keywords)
    logger.info("Grouped %d schema occurrences into %d groups", len(occurrences), len(groups))
    return normalized, groups


def analyze(
    doc: dict,
    config: AnalysisConfig | None = None,
    converter: VersionConverter | None = None,
) -> AnalysisReport:
    """Run the whole pipeline over a resolved document."""
    normalized, groups = extract_schema_groups(doc, config, converter)
    return AnalysisReport(
        schema_groups=groups,
        structure_size=calculate_structure_size(normalized),
        schema_size=calculate_schema_size(normalized, groups),
        documentation=calculate_documentation_metrics(normalized),
    )
