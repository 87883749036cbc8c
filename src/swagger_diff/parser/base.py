"""Normalized data models for a parsed API description.

The Swagger 2.0 and OpenAPI 3.x loaders both convert their input into
these models; the diff engine only ever sees this shape.
"""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class HttpMethod(str, Enum):
    GET = "GET"
    PUT = "PUT"
    POST = "POST"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    PATCH = "PATCH"


class ParamLocation(str, Enum):
    QUERY = "query"
    PATH = "path"
    HEADER = "header"
    BODY = "body"
    FORM = "form"


class PrimitiveNode(BaseModel):
    """A scalar value: string, integer, number, boolean, file."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["primitive"] = "primitive"
    type: str
    format: str | None = None
    description: str | None = None


class ObjectNode(BaseModel):
    """An object with named properties."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    properties: dict[str, "Node"] = {}
    description: str | None = None


class ArrayNode(BaseModel):
    """An array; ``items`` is None when the document leaves it unspecified."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["array"] = "array"
    items: "Node | None" = None
    description: str | None = None


class RefNode(BaseModel):
    """A reference to a named definition of the same document."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["ref"] = "ref"
    ref: str
    description: str | None = None


Node = Annotated[
    Union[PrimitiveNode, ObjectNode, ArrayNode, RefNode],
    Field(discriminator="kind"),
]

ObjectNode.model_rebuild()
ArrayNode.model_rebuild()


class Parameter(BaseModel):
    """A single operation parameter, identified by (name, location)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: ParamLocation
    required: bool = False
    description: str | None = None
    shape: Node | None = None

    @property
    def key(self) -> tuple[str, ParamLocation]:
        return self.name, self.location


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str | None = None
    shape: Node | None = None


class Operation(BaseModel):
    """The behavior of one HTTP method on one path."""

    model_config = ConfigDict(frozen=True)

    summary: str | None = None
    parameters: list[Parameter] = []
    responses: dict[str, Response] = {}


class PathEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    operations: dict[HttpMethod, Operation] = {}


class Document(BaseModel):
    """One version of an API description."""

    model_config = ConfigDict(frozen=True)

    title: str | None = None
    version: str | None = None
    paths: dict[str, PathEntry] = {}
    definitions: dict[str, Node] = {}
