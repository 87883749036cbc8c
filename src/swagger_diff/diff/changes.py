"""Change set models handed to renderers.

All models are frozen: a change set is built once per diff and is
read-only afterwards.
"""

from pydantic import BaseModel, ConfigDict

from swagger_diff.parser.base import HttpMethod, Node, Operation, Parameter


class ElProperty(BaseModel):
    """A schema node and the path expression locating it, e.g. ``pet.tags[].name``."""

    model_config = ConfigDict(frozen=True)

    el: str
    node: Node


class Endpoint(BaseModel):
    """A wholly added or wholly removed operation."""

    model_config = ConfigDict(frozen=True)

    path_url: str
    method: HttpMethod
    summary: str | None = None
    operation: Operation


class ChangedParameter(BaseModel):
    model_config = ConfigDict(frozen=True)

    old: Parameter
    new: Parameter
    change_required: bool = False
    change_description: bool = False
    increased: list[ElProperty] = []
    missing: list[ElProperty] = []

    @property
    def is_diff(self) -> bool:
        return bool(
            self.change_required
            or self.change_description
            or self.increased
            or self.missing
        )


class ChangedOperation(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: str | None = None
    add_parameters: list[Parameter] = []
    missing_parameters: list[Parameter] = []
    changed_parameters: list[ChangedParameter] = []
    add_props: list[ElProperty] = []
    missing_props: list[ElProperty] = []

    @property
    def is_diff_param(self) -> bool:
        return bool(self.add_parameters or self.missing_parameters or self.changed_parameters)

    @property
    def is_diff_prop(self) -> bool:
        return bool(self.add_props or self.missing_props)

    @property
    def is_diff(self) -> bool:
        return self.is_diff_param or self.is_diff_prop


class ChangedEndpoint(BaseModel):
    """A path present in both documents.

    ``new_operations`` and ``missing_operations`` are informational: the same
    operations are also listed as top-level endpoints of the change set.
    """

    model_config = ConfigDict(frozen=True)

    path_url: str
    new_operations: dict[HttpMethod, Operation] = {}
    missing_operations: dict[HttpMethod, Operation] = {}
    changed_operations: dict[HttpMethod, ChangedOperation] = {}

    @property
    def is_diff(self) -> bool:
        return bool(self.changed_operations)


class ChangeSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    old_version: str | None = None
    new_version: str | None = None
    new_endpoints: list[Endpoint] = []
    missing_endpoints: list[Endpoint] = []
    changed_endpoints: list[ChangedEndpoint] = []

    @property
    def is_empty(self) -> bool:
        return not (self.new_endpoints or self.missing_endpoints or self.changed_endpoints)
