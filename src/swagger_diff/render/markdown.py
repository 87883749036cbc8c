"""Markdown changelog renderer."""

from swagger_diff.diff.changes import ChangedOperation, ChangedParameter, ChangeSet, ElProperty, Endpoint
from swagger_diff.parser.base import Parameter

H3 = "### "
HR = "---\n"
LI = "* "
PRE_LI = "    "
PRE_CODE = "    "


def render_markdown(change_set: ChangeSet) -> str:
    """Render a change set as three Markdown sections: new, deprecated, changed."""
    parts = []
    if change_set.old_version or change_set.new_version:
        parts.append(f"## Changes from {change_set.old_version or '?'} to {change_set.new_version or '?'}\n\n")

    parts.append(f"{H3}What's New\n{HR}")
    parts.append(_endpoint_list(change_set.new_endpoints))
    parts.append(f"\n{H3}What's Deprecated\n{HR}")
    parts.append(_endpoint_list(change_set.missing_endpoints))
    parts.append(f"\n{H3}What's Changed\n{HR}")
    parts.append(_changed_list(change_set))
    return "".join(parts)


def _endpoint_list(endpoints: list[Endpoint]) -> str:
    return "".join(_endpoint_item(e.method.value, e.path_url, e.summary) + "\n" for e in endpoints)


def _endpoint_item(method: str, path_url: str, summary: str | None) -> str:
    line = f"{LI}`{method}` {path_url}"
    if summary:
        line += f" {summary}"
    return line


def _changed_list(change_set: ChangeSet) -> str:
    lines = []
    for endpoint in change_set.changed_endpoints:
        for method, operation in endpoint.changed_operations.items():
            lines.append(_endpoint_item(method.value, endpoint.path_url, operation.summary) + "  \n")
            if operation.is_diff_param:
                lines.append(f"{PRE_LI}Parameters\n\n")
                lines.extend(_line(text) for text in _param_changes(operation))
            if operation.is_diff_prop:
                lines.append(f"{PRE_LI}Return Type\n\n")
                lines.extend(_line(text) for text in _response_changes(operation))
    return "".join(lines)


def _line(text: str) -> str:
    return f"{PRE_LI}{PRE_CODE}{text}\n"


def _param_changes(operation: ChangedOperation) -> list[str]:
    # Additions first, then modifications, then removals
    changes = [_added(p.name, p.description) for p in operation.add_parameters]
    for param in operation.changed_parameters:
        changes.extend(_added_prop(prop) for prop in param.increased)
    for param in operation.changed_parameters:
        if param.change_required or param.change_description:
            changes.append(_changed_param(param))
    for param in operation.changed_parameters:
        changes.extend(_deleted_prop(prop) for prop in param.missing)
    changes.extend(_deleted(p.name, p.description) for p in operation.missing_parameters)
    return changes


def _response_changes(operation: ChangedOperation) -> list[str]:
    changes = [_added_prop(prop) for prop in operation.add_props]
    changes.extend(_deleted_prop(prop) for prop in operation.missing_props)
    return changes


def _added(name: str, description: str | None) -> str:
    return f"Add {name}" + _comment(description)


def _deleted(name: str, description: str | None) -> str:
    return f"Delete {name}" + _comment(description)


def _added_prop(prop: ElProperty) -> str:
    return _added(prop.el or "(root)", prop.node.description)


def _deleted_prop(prop: ElProperty) -> str:
    return _deleted(prop.el or "(root)", prop.node.description)


def _changed_param(param: ChangedParameter) -> str:
    text = param.new.name
    if param.change_required:
        text += " changed to " + ("required" if param.new.required else "optional")
    if param.change_description:
        text += f" description changed from {_text(param.old)} to {_text(param.new)}"
    return text


def _text(param: Parameter) -> str:
    return f'"{param.description}"' if param.description is not None else "(none)"


def _comment(description: str | None) -> str:
    return f" //{description}" if description else ""
