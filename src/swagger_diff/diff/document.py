"""Document-level comparison.

Walks paths, then methods, then the parameters and success-response
schema of every operation present in both documents.
"""

import structlog

from swagger_diff.config import get_settings
from swagger_diff.diff.changes import ChangedEndpoint, ChangedOperation, ChangeSet, Endpoint
from swagger_diff.diff.keyed import keyed_diff
from swagger_diff.diff.parameter import ParameterDiff
from swagger_diff.diff.schema import SchemaDiff
from swagger_diff.errors import MissingDocumentError
from swagger_diff.parser.base import Document, HttpMethod, Node, Operation, PathEntry

logger = structlog.get_logger()


class DocumentDiff:
    """Compares two documents into a ChangeSet.

    An operation added to a path that already exists is reported in
    ``new_endpoints`` exactly like an operation of a brand-new path;
    removals are handled the same way.
    """

    def __init__(self, success_status: str = "200"):
        self.success_status = success_status

    def diff(self, old: Document | None, new: Document | None) -> ChangeSet:
        if old is None:
            raise MissingDocumentError("old")
        if new is None:
            raise MissingDocumentError("new")

        param_diff = ParameterDiff(old.definitions, new.definitions)
        schema_diff = SchemaDiff(old.definitions, new.definitions)

        paths = keyed_diff(old.paths, new.paths)
        logger.debug(
            "Compared paths",
            increased=len(paths.increased),
            missing=len(paths.missing),
            shared=len(paths.shared_keys),
        )
        new_endpoints = _endpoints_of_paths(paths.increased)
        missing_endpoints = _endpoints_of_paths(paths.missing)
        changed_endpoints: list[ChangedEndpoint] = []

        for path_url in paths.shared_keys:
            old_ops = old.paths[path_url].operations
            new_ops = new.paths[path_url].operations
            ops = keyed_diff(old_ops, new_ops)

            changed_operations: dict[HttpMethod, ChangedOperation] = {}
            for method in ops.shared_keys:
                changed = self._diff_operation(old_ops[method], new_ops[method], param_diff, schema_diff)
                if changed.is_diff:
                    changed_operations[method] = changed

            new_endpoints.extend(_endpoints(path_url, ops.increased))
            missing_endpoints.extend(_endpoints(path_url, ops.missing))

            endpoint = ChangedEndpoint(
                path_url=path_url,
                new_operations=ops.increased,
                missing_operations=ops.missing,
                changed_operations=changed_operations,
            )
            if endpoint.is_diff:
                changed_endpoints.append(endpoint)

        logger.debug(
            "Compared documents",
            new_endpoints=len(new_endpoints),
            missing_endpoints=len(missing_endpoints),
            changed_endpoints=len(changed_endpoints),
        )
        return ChangeSet(
            old_version=old.version,
            new_version=new.version,
            new_endpoints=new_endpoints,
            missing_endpoints=missing_endpoints,
            changed_endpoints=changed_endpoints,
        )

    def _diff_operation(
        self,
        old: Operation,
        new: Operation,
        param_diff: ParameterDiff,
        schema_diff: SchemaDiff,
    ) -> ChangedOperation:
        params = param_diff.diff(old.parameters, new.parameters)
        props = schema_diff.diff(self._response_shape(old), self._response_shape(new))
        return ChangedOperation(
            summary=new.summary,
            add_parameters=params.increased,
            missing_parameters=params.missing,
            changed_parameters=[p for p in params.changed if p.is_diff],
            add_props=props.increased,
            missing_props=props.missing,
        )

    def _response_shape(self, operation: Operation) -> Node | None:
        response = operation.responses.get(self.success_status)
        return response.shape if response else None


def compare_documents(old: Document | None, new: Document | None) -> ChangeSet:
    """Compare two documents using the configured success status code."""
    return DocumentDiff(success_status=get_settings().success_status).diff(old, new)


def _endpoints(path_url: str, operations: dict[HttpMethod, Operation]) -> list[Endpoint]:
    return [
        Endpoint(path_url=path_url, method=method, summary=op.summary, operation=op)
        for method, op in operations.items()
    ]


def _endpoints_of_paths(paths: dict[str, PathEntry]) -> list[Endpoint]:
    endpoints = []
    for path_url, entry in paths.items():
        endpoints.extend(_endpoints(path_url, entry.operations))
    return endpoints
