"""End-to-end pipeline tests over the fixture documents."""

from pathlib import Path

from api_schema_metrics.analysis import analyze, extract_schema_groups
from api_schema_metrics.config import AnalysisConfig
from api_schema_metrics.parser.detect import load_document
from api_schema_metrics.parser.resolver import resolve_refs
from api_schema_metrics.schemas.grouping import group
from api_schema_metrics.schemas.harvest import harvest
from api_schema_metrics.schemas.models import Endpoint

FIXTURES = Path(__file__).parent / "fixtures"


def _load(name: str) -> dict:
    return resolve_refs(load_document(FIXTURES / name))


class TestExtractSchemaGroups:
    def test_petstore_groups(self):
        _, groups = extract_schema_groups(_load("petstore.yaml"))
        assert len(groups) == 2

        pet, error = groups
        assert set(pet.representative_schema["properties"]) == {"id", "name", "tag"}
        assert set(pet.endpoints) == {
            Endpoint(path="/pets", method="get", status_code="200"),
            Endpoint(path="/pets/{petId}", method="get", status_code="200"),
            Endpoint(path="/pets", method="post", status_code=None),
        }
        assert pet.directions == ["response", "request"]

        assert set(error.representative_schema["properties"]) == {"code", "message"}
        assert len(error.endpoints) == 3
        assert error.directions == ["response"]

    def test_swagger2_converted_and_grouped(self):
        normalized, groups = extract_schema_groups(_load("swagger2_petstore.yaml"))
        assert normalized["openapi"] == "3.0.3"
        assert len(groups) == 1
        assert set(groups[0].endpoints) == {
            Endpoint(path="/pets", method="get", status_code="200"),
            Endpoint(path="/pets/{petId}", method="get", status_code="200"),
            Endpoint(path="/pets", method="post", status_code=None),
        }

    def test_deterministic_across_runs(self):
        _, first = extract_schema_groups(_load("petstore.yaml"))
        _, second = extract_schema_groups(_load("petstore.yaml"))
        assert [g.model_dump() for g in first] == [g.model_dump() for g in second]

    def test_ignored_keywords_from_config(self):
        doc = {"openapi": "3.0.0", "paths": {
            "/a": {"get": {"responses": {"200": {"content": {"application/json": {
                "schema": {"type": "object", "title": "A"}}}}}}},
            "/b": {"get": {"responses": {"200": {"content": {"application/json": {
                "schema": {"type": "object", "title": "B"}}}}}}},
        }}
        _, default_groups = extract_schema_groups(doc)
        _, relaxed_groups = extract_schema_groups(doc, AnalysisConfig(ignored_keywords=("description", "title")))
        assert len(default_groups) == 2
        assert len(relaxed_groups) == 1


USER = {
    "type": "object",
    "properties": {
        "id": {"type": "integer"},
        "name": {"type": "string"},
    },
}


def _get_200(schema: dict) -> dict:
    return {"get": {"responses": {"200": {
        "description": "ok",
        "content": {"application/json": {"schema": schema}},
    }}}}


class TestUsersAdminsDocument:
    def test_shared_object_response(self):
        doc = {"openapi": "3.0.0", "paths": {"/users": _get_200(USER), "/admins": _get_200(USER)}}
        groups = group(harvest(doc))
        assert len(groups) == 1
        assert set(groups[0].endpoints) == {
            Endpoint(path="/users", method="get", status_code="200"),
            Endpoint(path="/admins", method="get", status_code="200"),
        }
        assert groups[0].directions == ["response"]

    def test_array_response_joins_object_group(self):
        doc = {"openapi": "3.0.0", "paths": {
            "/users": _get_200(USER),
            "/admins": _get_200({"type": "array", "items": USER}),
        }}
        groups = group(harvest(doc))
        assert len(groups) == 1
        assert groups[0].representative_schema == USER
        assert len(groups[0].endpoints) == 2

    def test_request_body_merges_into_response_group(self):
        users = _get_200(USER)
        users["post"] = {
            "requestBody": {"content": {"application/json": {"schema": USER}}},
            "responses": {"204": {"description": "created"}},
        }
        doc = {"openapi": "3.0.0", "paths": {"/users": users, "/admins": _get_200(USER)}}
        groups = group(harvest(doc))
        assert len(groups) == 1
        assert groups[0].directions == ["response", "request"]
        assert Endpoint(path="/users", method="post", status_code=None) in groups[0].endpoints


class TestAnalyze:
    def test_report_sections(self):
        report = analyze(_load("petstore.yaml"))
        assert len(report.schema_groups) == 2
        assert report.structure_size.operations == 3
        assert report.schema_size.used_schemas == 2
        assert report.schema_size.defined_schemas == 2
        assert report.schema_size.properties == 5
        assert report.documentation.endpoints_desc_coverage == 1.0

    def test_document_without_paths(self):
        report = analyze({"openapi": "3.0.0"})
        assert report.schema_groups == []
        assert report.structure_size.operations == 0

    def test_report_serializes(self):
        data = analyze(_load("petstore.yaml")).model_dump(mode="json")
        assert data["schema_groups"][0]["endpoints"][0] == {"path": "/pets", "method": "get", "status_code": "200"}
