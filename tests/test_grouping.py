from unittest.mock import patch

from api_schema_metrics.schemas.grouping import SchemaGrouper, group, representative_fragment
from api_schema_metrics.schemas.models import Endpoint, Occurrence

USER = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "name": {"type": "string"},
    },
}

ERROR = {
    "type": "object",
    "properties": {"message": {"type": "string"}},
}


def _occ(path: str, method: str = "get", code: str | None = "200", direction: str = "response", schema=None) -> Occurrence:
    return Occurrence(
        path=path,
        method=method,
        status_code=code if direction == "response" else None,
        direction=direction,
        body_schema=schema,
    )


def _as_sets(groups):
    return [(g.representative_schema, set(g.endpoints), set(g.directions)) for g in groups]


class TestRepresentativeFragment:
    def test_unwraps_array_items(self):
        assert representative_fragment({"type": "array", "items": USER}) == USER

    def test_object_used_as_is(self):
        assert representative_fragment(USER) == USER

    def test_shallow_unwrap_only(self):
        nested = {"type": "array", "items": {"type": "array", "items": USER}}
        assert representative_fragment(nested) == {"type": "array", "items": USER}

    def test_array_without_items_kept(self):
        assert representative_fragment({"type": "array"}) == {"type": "array"}


class TestGroupScenarios:
    def test_identical_responses_share_one_group(self):
        groups = group([_occ("/users", schema=USER), _occ("/admins", schema=USER)])
        assert len(groups) == 1
        assert set(groups[0].endpoints) == {
            Endpoint(path="/users", method="get", status_code="200"),
            Endpoint(path="/admins", method="get", status_code="200"),
        }
        assert groups[0].directions == ["response"]

    def test_array_payload_joins_object_group(self):
        groups = group([
            _occ("/users", schema=USER),
            _occ("/admins", schema={"type": "array", "items": USER}),
        ])
        assert len(groups) == 1
        assert len(groups[0].endpoints) == 2

    def test_request_merges_into_response_group(self):
        groups = group([
            _occ("/users", schema=USER),
            _occ("/users", method="post", direction="request", schema=USER),
        ])
        assert len(groups) == 1
        assert groups[0].directions == ["response", "request"]
        assert Endpoint(path="/users", method="post", status_code=None) in groups[0].endpoints

    def test_responses_processed_before_requests(self):
        described_user = {**USER, "description": "request copy"}
        groups = group([
            _occ("/users", method="post", direction="request", schema=described_user),
            _occ("/users", schema=USER),
        ])
        assert len(groups) == 1
        # the response pass runs first, so the response schema is the representative
        assert groups[0].representative_schema == USER
        assert groups[0].directions == ["response", "request"]

    def test_different_schemas_create_groups_in_order(self):
        groups = group([_occ("/users", schema=USER), _occ("/errors", code="500", schema=ERROR)])
        assert [g.representative_schema for g in groups] == [USER, ERROR]

    def test_first_seen_representative_kept(self):
        described = {**USER, "description": "first"}
        groups = group([_occ("/a", schema=described), _occ("/b", schema=USER)])
        assert groups[0].representative_schema == described

    def test_empty_schemas_skipped(self):
        groups = group([_occ("/a", schema=None), _occ("/b", schema={}), _occ("/c", schema=USER)])
        assert len(groups) == 1
        assert groups[0].endpoints == [Endpoint(path="/c", method="get", status_code="200")]

    def test_duplicate_endpoint_not_added_twice(self):
        groups = group([_occ("/a", schema=USER), _occ("/a", schema=USER)])
        assert len(groups[0].endpoints) == 1

    def test_groups_never_merged_with_each_other(self):
        grouper = SchemaGrouper()
        grouper.group([_occ("/a", schema=USER), _occ("/b", schema=ERROR)])
        grouper.add(_occ("/c", method="post", direction="request", schema=USER))
        assert len(grouper.groups) == 2
        assert len(grouper.groups[0].endpoints) == 2
        assert len(grouper.groups[1].endpoints) == 1


class TestGroupProperties:
    def _occurrences(self):
        return [
            _occ("/users", schema=USER),
            _occ("/users", code="404", schema=ERROR),
            _occ("/admins", schema={"type": "array", "items": USER}),
            _occ("/admins", method="post", direction="request", schema=USER),
            _occ("/errors", method="put", direction="request", schema=ERROR),
            _occ("/empty", schema=None),
        ]

    def test_idempotent(self):
        occurrences = self._occurrences()
        assert _as_sets(group(occurrences)) == _as_sets(group(occurrences))

    def test_deterministic_order(self):
        first = group(self._occurrences())
        second = group(self._occurrences())
        assert [g.representative_schema for g in first] == [g.representative_schema for g in second]

    def test_coverage_per_direction(self):
        occurrences = self._occurrences()
        groups = group(occurrences)
        for direction in ("response", "request"):
            expected = len([o for o in occurrences if o.direction == direction and o.body_schema])
            endpoints = [
                e for g in groups for e in g.endpoints
                if (e.status_code is None) == (direction == "request")
            ]
            assert len(endpoints) == expected


class TestComparisonErrors:
    def test_failing_comparison_treated_as_different(self):
        with patch("api_schema_metrics.schemas.grouping.equivalent", side_effect=TypeError("boom")):
            groups = group([_occ("/a", schema=USER), _occ("/b", schema=USER)])
        assert len(groups) == 2

    def test_failing_comparison_is_logged(self, caplog):
        with patch("api_schema_metrics.schemas.grouping.equivalent", side_effect=ValueError("bad")):
            group([_occ("/a", schema=USER), _occ("/b", schema=USER)])
        assert "Schema comparison failed" in caplog.text

    def test_later_group_still_matched_after_failure(self):
        calls = []

        def flaky(a, b, ignore):
            calls.append(a)
            if len(calls) == 2:
                raise TypeError("malformed")
            return a == b

        with patch("api_schema_metrics.schemas.grouping.equivalent", side_effect=flaky):
            groups = group([_occ("/a", schema=USER), _occ("/b", schema=ERROR), _occ("/c", schema=ERROR)])
        assert len(groups) == 2
        assert len(groups[1].endpoints) == 2
