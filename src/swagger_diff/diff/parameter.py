"""Comparison of two operations' parameter lists."""

from collections.abc import Mapping
from dataclasses import dataclass, field

from swagger_diff.diff.changes import ChangedParameter
from swagger_diff.diff.keyed import keyed_diff
from swagger_diff.diff.schema import SchemaDiff
from swagger_diff.parser.base import Node, Parameter


@dataclass(frozen=True)
class ParameterDiffResult:
    increased: list[Parameter] = field(default_factory=list)
    missing: list[Parameter] = field(default_factory=list)
    # One entry per matched pair, whether or not it differs.
    changed: list[ChangedParameter] = field(default_factory=list)


class ParameterDiff:
    """Matches parameters by (name, location) and compares each matched pair."""

    def __init__(
        self,
        old_definitions: Mapping[str, Node] | None = None,
        new_definitions: Mapping[str, Node] | None = None,
    ):
        self.schema_diff = SchemaDiff(old_definitions, new_definitions)

    def diff(self, old_params: list[Parameter] | None, new_params: list[Parameter] | None) -> ParameterDiffResult:
        old_by_key = {p.key: p for p in old_params or []}
        new_by_key = {p.key: p for p in new_params or []}
        params = keyed_diff(old_by_key, new_by_key)

        changed = [
            self._diff_pair(old_by_key[key], new_by_key[key])
            for key in params.shared_keys
        ]
        return ParameterDiffResult(
            increased=list(params.increased.values()),
            missing=list(params.missing.values()),
            changed=changed,
        )

    def _diff_pair(self, old: Parameter, new: Parameter) -> ChangedParameter:
        shapes = self.schema_diff.diff(old.shape, new.shape, el=new.name)
        return ChangedParameter(
            old=old,
            new=new,
            change_required=old.required != new.required,
            change_description=old.description != new.description,
            increased=shapes.increased,
            missing=shapes.missing,
        )
