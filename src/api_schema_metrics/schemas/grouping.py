"""Incremental clustering of harvested schemas into equivalence groups."""

import logging
from collections.abc import Iterable

from api_schema_metrics.config import DEFAULT_IGNORED_KEYWORDS
from api_schema_metrics.schemas.compare import equivalent
from api_schema_metrics.schemas.models import Direction, Occurrence, SchemaGroup

logger = logging.getLogger(__name__)

PASS_ORDER: tuple[Direction, ...] = ("response", "request")


def representative_fragment(schema: dict) -> dict:
    """Unwrap one level of array payload; nested arrays are left as they are."""
    items = schema.get("items")
    if isinstance(items, dict):
        return items
    return schema


class SchemaGrouper:
    """Assigns schema occurrences to groups of structurally equivalent schemas.

    Groups are scanned in creation order and the first equivalent one wins.
    A group's representative is the first schema that created it and is
    never replaced; groups are never merged with each other.
    """

    def __init__(self, ignore: Iterable[str] = DEFAULT_IGNORED_KEYWORDS):
        self.ignore = tuple(ignore)
        self.groups: list[SchemaGroup] = []

    def group(self, occurrences: list[Occurrence]) -> list[SchemaGroup]:
        """Run the response pass, then the request pass, and return the groups."""
        for direction in PASS_ORDER:
            for occurrence in occurrences:
                if occurrence.direction == direction:
                    self.add(occurrence)
        return self.groups

    def add(self, occurrence: Occurrence) -> SchemaGroup | None:
        """Place one occurrence; occurrences without a body schema are skipped."""
        if not occurrence.body_schema:
            return None

        fragment = representative_fragment(occurrence.body_schema)
        match = self._find_similar(fragment)
        if match is None:
            match = SchemaGroup(representative_schema=fragment)
            self.groups.append(match)
            logger.debug("New schema group #%d from %s %s", len(self.groups), occurrence.method, occurrence.path)

        match.add_endpoint(occurrence.endpoint)
        match.add_direction(occurrence.direction)
        return match

    def _find_similar(self, fragment: dict) -> SchemaGroup | None:
        for group in self.groups:
            try:
                if equivalent(group.representative_schema, fragment, self.ignore):
                    return group
            except Exception:
                logger.warning("Schema comparison failed; treating pair as different", exc_info=True)
        return None


def group(occurrences: list[Occurrence], ignore: Iterable[str] = DEFAULT_IGNORED_KEYWORDS) -> list[SchemaGroup]:
    """Group occurrences by structurally equivalent body schema."""
    return SchemaGrouper(ignore=ignore).group(occurrences)
