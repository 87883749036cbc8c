from pathlib import Path
from unittest.mock import patch

import pytest

from swagger_diff.config import Settings
from swagger_diff.diff.document import DocumentDiff, compare_documents
from swagger_diff.errors import MissingDocumentError
from swagger_diff.parser.base import (
    Document,
    HttpMethod,
    ObjectNode,
    Operation,
    Parameter,
    ParamLocation,
    PathEntry,
    PrimitiveNode,
    Response,
)
from swagger_diff.parser.swagger import load_document

FIXTURES = Path(__file__).parent / "fixtures"

INTEGER = PrimitiveNode(type="integer")
STRING = PrimitiveNode(type="string")


def _make_document(
    limit_required: bool = False,
    response_properties: dict | None = None,
    extra_operations: dict | None = None,
) -> Document:
    get_pets = Operation(
        summary="List all pets",
        parameters=[
            Parameter(name="limit", location=ParamLocation.QUERY, required=limit_required, shape=INTEGER)
        ],
        responses={"200": Response(shape=ObjectNode(properties=response_properties or {"id": INTEGER}))},
    )
    operations = {HttpMethod.GET: get_pets, **(extra_operations or {})}
    return Document(paths={"/pets": PathEntry(operations=operations)})


def _keys(endpoints) -> set[tuple[HttpMethod, str]]:
    return {(e.method, e.path_url) for e in endpoints}


class TestScenarios:
    def test_identical_documents(self):
        result = DocumentDiff().diff(_make_document(), _make_document())
        assert result.new_endpoints == []
        assert result.missing_endpoints == []
        assert result.changed_endpoints == []
        assert result.is_empty

    def test_response_property_added(self):
        old = _make_document()
        new = _make_document(response_properties={"id": INTEGER, "name": STRING})
        result = DocumentDiff().diff(old, new)

        assert result.new_endpoints == []
        assert result.missing_endpoints == []
        assert len(result.changed_endpoints) == 1
        endpoint = result.changed_endpoints[0]
        assert endpoint.path_url == "/pets"
        assert list(endpoint.changed_operations) == [HttpMethod.GET]
        operation = endpoint.changed_operations[HttpMethod.GET]
        assert [p.el for p in operation.add_props] == ["name"]
        assert operation.missing_props == []
        assert operation.summary == "List all pets"

    def test_parameter_required_flip(self):
        result = DocumentDiff().diff(_make_document(), _make_document(limit_required=True))
        operation = result.changed_endpoints[0].changed_operations[HttpMethod.GET]
        assert operation.add_parameters == []
        assert operation.missing_parameters == []
        assert len(operation.changed_parameters) == 1
        changed = operation.changed_parameters[0]
        assert changed.new.name == "limit"
        assert changed.change_required is True

    def test_endpoint_removed(self):
        result = DocumentDiff().diff(_make_document(), Document())
        assert _keys(result.missing_endpoints) == {(HttpMethod.GET, "/pets")}
        assert result.new_endpoints == []
        assert result.changed_endpoints == []

    def test_new_operation_on_existing_path(self):
        new = _make_document(extra_operations={HttpMethod.POST: Operation(summary="Create a pet")})
        result = DocumentDiff().diff(_make_document(), new)
        assert _keys(result.new_endpoints) == {(HttpMethod.POST, "/pets")}
        assert result.new_endpoints[0].summary == "Create a pet"
        assert result.missing_endpoints == []
        assert result.changed_endpoints == []

    def test_unchanged_operation_not_reported_next_to_changed_one(self):
        get_only = _make_document(extra_operations={HttpMethod.DELETE: Operation(summary="Delete")})
        new = _make_document(
            response_properties={"id": INTEGER, "name": STRING},
            extra_operations={HttpMethod.DELETE: Operation(summary="Delete")},
        )
        result = DocumentDiff().diff(get_only, new)
        assert list(result.changed_endpoints[0].changed_operations) == [HttpMethod.GET]


class TestSuccessResponse:
    def test_other_status_codes_ignored(self):
        old = Document(paths={"/pets": PathEntry(operations={
            HttpMethod.POST: Operation(responses={"201": Response(shape=ObjectNode(properties={"id": INTEGER}))})
        })})
        new = Document(paths={"/pets": PathEntry(operations={
            HttpMethod.POST: Operation(responses={"201": Response(shape=ObjectNode(properties={}))})
        })})
        assert DocumentDiff().diff(old, new).is_empty
        assert not DocumentDiff(success_status="201").diff(old, new).is_empty

    def test_success_response_added(self):
        old = Document(paths={"/pets": PathEntry(operations={HttpMethod.GET: Operation()})})
        new = Document(paths={"/pets": PathEntry(operations={
            HttpMethod.GET: Operation(responses={"200": Response(shape=STRING)})
        })})
        operation = DocumentDiff().diff(old, new).changed_endpoints[0].changed_operations[HttpMethod.GET]
        assert [p.el for p in operation.add_props] == [""]

    def test_compare_documents_uses_settings(self):
        old = Document(paths={"/pets": PathEntry(operations={
            HttpMethod.POST: Operation(responses={"201": Response(shape=STRING)})
        })})
        new = Document(paths={"/pets": PathEntry(operations={
            HttpMethod.POST: Operation(responses={"201": Response(shape=INTEGER)})
        })})
        with patch("swagger_diff.diff.document.get_settings", return_value=Settings(success_status="201")):
            assert not compare_documents(old, new).is_empty
        with patch("swagger_diff.diff.document.get_settings", return_value=Settings(success_status="200")):
            assert compare_documents(old, new).is_empty


class TestMissingDocument:
    def test_old_missing(self):
        with pytest.raises(MissingDocumentError) as exc_info:
            DocumentDiff().diff(None, Document())
        assert exc_info.value.side == "old"

    def test_new_missing(self):
        with pytest.raises(ValueError):
            DocumentDiff().diff(Document(), None)


class TestPetstoreFixtures:
    def test_equal(self):
        doc = load_document(FIXTURES / "petstore_v1.yaml")
        assert DocumentDiff().diff(doc, doc).is_empty

    def test_new_api(self):
        result = DocumentDiff().diff(
            load_document(FIXTURES / "petstore_empty.yaml"),
            load_document(FIXTURES / "petstore_v1.yaml"),
        )
        assert len(result.new_endpoints) == 5
        assert result.missing_endpoints == []
        assert result.changed_endpoints == []

    def test_deprecated_api(self):
        result = DocumentDiff().diff(
            load_document(FIXTURES / "petstore_v1.yaml"),
            load_document(FIXTURES / "petstore_empty.yaml"),
        )
        assert result.new_endpoints == []
        assert len(result.missing_endpoints) == 5
        assert result.changed_endpoints == []

    def test_diff(self):
        result = DocumentDiff().diff(
            load_document(FIXTURES / "petstore_v1.yaml"),
            load_document(FIXTURES / "petstore_v2.yaml"),
        )
        assert result.old_version == "1.0.0"
        assert result.new_version == "2.0.0"
        assert [(e.method, e.path_url) for e in result.new_endpoints] == [
            (HttpMethod.GET, "/orders"),
            (HttpMethod.PUT, "/pets/{petId}"),
        ]
        assert [(e.method, e.path_url) for e in result.missing_endpoints] == [
            (HttpMethod.GET, "/stores"),
            (HttpMethod.DELETE, "/pets/{petId}"),
        ]
        assert [e.path_url for e in result.changed_endpoints] == ["/pets", "/pets/{petId}"]

        pets = result.changed_endpoints[0].changed_operations
        list_pets = pets[HttpMethod.GET]
        assert [p.name for p in list_pets.add_parameters] == ["offset"]
        assert [(p.new.name, p.change_required) for p in list_pets.changed_parameters] == [("limit", True)]
        assert [p.el for p in list_pets.add_props] == ["[].status", "[].tags[].label"]
        assert [p.el for p in list_pets.missing_props] == ["[].tags[].name"]

        create_pet = pets[HttpMethod.POST]
        assert [p.el for p in create_pet.changed_parameters[0].increased] == ["pet.age"]
        assert create_pet.is_diff_prop is False

        pet_by_id = result.changed_endpoints[1]
        assert list(pet_by_id.changed_operations) == [HttpMethod.GET]
        assert set(pet_by_id.new_operations) == {HttpMethod.PUT}
        assert set(pet_by_id.missing_operations) == {HttpMethod.DELETE}
        get_pet = pet_by_id.changed_operations[HttpMethod.GET]
        assert [p.el for p in get_pet.add_props] == ["status", "tags[].label"]
        assert get_pet.changed_parameters == []

    def test_swap_law(self):
        v1 = load_document(FIXTURES / "petstore_v1.yaml")
        v2 = load_document(FIXTURES / "petstore_v2.yaml")
        forward = DocumentDiff().diff(v1, v2)
        backward = DocumentDiff().diff(v2, v1)

        assert _keys(forward.new_endpoints) == _keys(backward.missing_endpoints)
        assert _keys(forward.missing_endpoints) == _keys(backward.new_endpoints)

        forward_ops = forward.changed_endpoints[0].changed_operations[HttpMethod.GET]
        backward_ops = backward.changed_endpoints[0].changed_operations[HttpMethod.GET]
        assert forward_ops.add_parameters == backward_ops.missing_parameters
        assert {p.el for p in forward_ops.add_props} == {p.el for p in backward_ops.missing_props}
        assert {p.el for p in forward_ops.missing_props} == {p.el for p in backward_ops.add_props}

    def test_inputs_not_mutated(self):
        v1 = load_document(FIXTURES / "petstore_v1.yaml")
        v2 = load_document(FIXTURES / "petstore_v2.yaml")
        before = (v1.model_dump(), v2.model_dump())
        DocumentDiff().diff(v1, v2)
        assert (v1.model_dump(), v2.model_dump()) == before


class TestCyclicFixture:
    def test_reflexive(self):
        doc = load_document(FIXTURES / "cyclic.yaml")
        assert DocumentDiff().diff(doc, doc).is_empty

    def test_modified_copy_terminates(self):
        doc = load_document(FIXTURES / "cyclic.yaml")
        definitions = dict(doc.definitions)
        company = definitions["Company"]
        definitions["Company"] = ObjectNode(properties={**company.properties, "founded": INTEGER})
        modified = doc.model_copy(update={"definitions": definitions})

        result = DocumentDiff().diff(doc, modified)
        assert [e.path_url for e in result.changed_endpoints] == ["/people"]
        operation = result.changed_endpoints[0].changed_operations[HttpMethod.GET]
        assert [p.el for p in operation.add_props] == ["employer.founded"]
        assert doc.definitions["Company"] is company
