"""HTML changelog renderer.

Produces a standalone page with the same three sections as the Markdown
report. Styling is left to an external stylesheet; every method label is
a ``span`` whose class is the HTTP method so it can be colored.
"""

from html import escape

from swagger_diff.diff.changes import ChangedOperation, ChangedParameter, ChangeSet, ElProperty, Endpoint
from swagger_diff.parser.base import Parameter

DEFAULT_TITLE = "API change log"
DEFAULT_CSS = "demo.css"


def render_html(change_set: ChangeSet, title: str = DEFAULT_TITLE, css_url: str = DEFAULT_CSS) -> str:
    """Render a change set as an HTML page."""
    title = escape(title)
    heading = title
    if change_set.old_version or change_set.new_version:
        versions = f"{change_set.old_version or '?'} to {change_set.new_version or '?'}"
        heading += f" <small>{escape(versions)}</small>"

    sections = "".join([
        _section("What's New", _endpoint_list(change_set.new_endpoints, removed=False)),
        _section("What's Deprecated", _endpoint_list(change_set.missing_endpoints, removed=True)),
        _section("What's Changed", _changed_list(change_set)),
    ])
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        f"<title>{title}</title>\n"
        f'<link rel="stylesheet" href="{escape(css_url)}">\n'
        "</head>\n"
        "<body>\n"
        f"<header><h1>{heading}</h1></header>\n"
        f'<div class="article">\n{sections}</div>\n'
        "</body>\n"
        "</html>\n"
    )


def _section(heading: str, items: str) -> str:
    return f"<div><h2>{heading}</h2><hr><ol>\n{items}</ol></div>\n"


def _endpoint_list(endpoints: list[Endpoint], removed: bool) -> str:
    items = []
    for e in endpoints:
        path = f"<del>{escape(e.path_url)}</del>" if removed else escape(e.path_url)
        items.append(f"<li>{_method(e.method.value)}{path}{_summary(e.summary)}</li>\n")
    return "".join(items)


def _changed_list(change_set: ChangeSet) -> str:
    items = []
    for endpoint in change_set.changed_endpoints:
        for method, operation in endpoint.changed_operations.items():
            detail = ""
            if operation.is_diff_param:
                detail += _detail("Parameters", "param", _param_changes(operation))
            if operation.is_diff_prop:
                detail += _detail("Return Type", "response", _response_changes(operation))
            items.append(
                f"<li>{_method(method.value)}{escape(endpoint.path_url)}{_summary(operation.summary)}"
                f'<ul class="detail">{detail}</ul></li>\n'
            )
    return "".join(items)


def _detail(heading: str, kind: str, changes: list[str]) -> str:
    return f'<li><h3>{heading}</h3><ul class="change {kind}">{"".join(changes)}</ul></li>'


def _param_changes(operation: ChangedOperation) -> list[str]:
    # Same order as the Markdown report
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
    return f"<li>Add {escape(name)}{_comment(description)}</li>"


def _deleted(name: str, description: str | None) -> str:
    return f'<li class="missing">Delete <del>{escape(name)}</del>{_comment(description)}</li>'


def _added_prop(prop: ElProperty) -> str:
    return _added(prop.el or "(root)", prop.node.description)


def _deleted_prop(prop: ElProperty) -> str:
    return _deleted(prop.el or "(root)", prop.node.description)


def _changed_param(param: ChangedParameter) -> str:
    text = escape(param.new.name)
    if param.change_required:
        text += " changed to " + ("required" if param.new.required else "optional")
    if param.change_description:
        text += (
            f' description changed from <del class="comment">{_text(param.old)}</del>'
            f' to <span class="comment">{_text(param.new)}</span>'
        )
    return f"<li>{text}</li>"


def _text(param: Parameter) -> str:
    return escape(param.description) if param.description is not None else "(none)"


def _method(method: str) -> str:
    return f'<span class="{method}">{method}</span> '


def _summary(summary: str | None) -> str:
    return f" <span>{escape(summary)}</span>" if summary else ""


def _comment(description: str | None) -> str:
    return f' <span class="comment">//{escape(description)}</span>' if description else ""
