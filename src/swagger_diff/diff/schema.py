"""Recursive schema comparison.

Walks two schema graphs side by side, resolving references against the
definition table of their own document. Whenever a reference is involved,
the pair of nodes being compared is expanded once per diff call: a pair
reached again while it is still being expanded is a cycle and counts as
equal, and a pair that was already fully expanded reuses its result under
the new path.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from swagger_diff.diff.changes import ElProperty
from swagger_diff.diff.keyed import keyed_diff
from swagger_diff.parser.base import ArrayNode, Node, ObjectNode, PrimitiveNode, RefNode

logger = structlog.get_logger()

# A reference name, or the id() of an inline node
_Side = str | int


@dataclass(frozen=True)
class SchemaDiffResult:
    increased: list[ElProperty] = field(default_factory=list)
    missing: list[ElProperty] = field(default_factory=list)


@dataclass
class _Walk:
    """Mutable state of a single ``SchemaDiff.diff`` call.

    ``in_progress`` and ``expanded`` are shared by every nested walk of the
    call; the result lists belong to one expansion.
    """

    in_progress: set[tuple[_Side, _Side]] = field(default_factory=set)
    expanded: dict[tuple[_Side, _Side], SchemaDiffResult] = field(default_factory=dict)
    increased: list[ElProperty] = field(default_factory=list)
    missing: list[ElProperty] = field(default_factory=list)

    def nested(self) -> "_Walk":
        return _Walk(in_progress=self.in_progress, expanded=self.expanded)


def join_el(prefix: str, name: str) -> str:
    return f"{prefix}.{name}" if prefix else name


def rebase_el(prefix: str, relative: str) -> str:
    """Place a path computed from the empty root under ``prefix``."""
    if not relative:
        return prefix
    if relative.startswith("["):
        return f"{prefix}{relative}"
    return join_el(prefix, relative)


def resolve(node: Node, definitions: Mapping[str, Node]) -> Node | None:
    """Follow a chain of references to a concrete node.

    Returns None for a dangling reference or a reference loop without
    any concrete node in it.
    """
    seen: set[str] = set()
    current: Node | None = node
    while isinstance(current, RefNode):
        if current.ref in seen:
            return None
        seen.add(current.ref)
        current = definitions.get(current.ref)
    return current


class SchemaDiff:
    """Compares schema nodes of two documents.

    Each side keeps its own definition table; references are never
    resolved across sides.
    """

    def __init__(
        self,
        old_definitions: Mapping[str, Node] | None = None,
        new_definitions: Mapping[str, Node] | None = None,
    ):
        self.old_definitions = old_definitions or {}
        self.new_definitions = new_definitions or {}

    def diff(self, old: Node | None, new: Node | None, el: str = "") -> SchemaDiffResult:
        """Return the properties added and removed between ``old`` and ``new``.

        ``el`` is the path expression of the compared nodes; every reported
        property path is built from it.
        """
        walk = _Walk()
        self._walk(old, new, el, walk)
        return SchemaDiffResult(increased=walk.increased, missing=walk.missing)

    def _walk(self, old: Node | None, new: Node | None, el: str, walk: _Walk) -> None:
        if old is None and new is None:
            return
        if old is None:
            walk.increased.append(ElProperty(el=el, node=new))
            return
        if new is None:
            walk.missing.append(ElProperty(el=el, node=old))
            return

        old_ref = old.ref if isinstance(old, RefNode) else None
        new_ref = new.ref if isinstance(new, RefNode) else None
        if old_ref is None and new_ref is None:
            self._compare(old, new, old, new, el, walk)
            return

        old_resolved = resolve(old, self.old_definitions) if old_ref else old
        new_resolved = resolve(new, self.new_definitions) if new_ref else new
        if old_resolved is None or new_resolved is None:
            # Opaque leaf: only the reference names can be compared.
            logger.debug("Unresolved reference", el=el, old_ref=old_ref, new_ref=new_ref)
            if old_ref != new_ref:
                self._replace(old, new, el, walk)
            return

        key = (
            old_ref if old_ref is not None else id(old),
            new_ref if new_ref is not None else id(new),
        )
        if key in walk.in_progress:
            logger.debug("Reference cycle, stop descending", el=el, old_ref=old_ref, new_ref=new_ref)
            return

        result = walk.expanded.get(key)
        if result is None:
            walk.in_progress.add(key)
            nested = walk.nested()
            self._compare(old_resolved, new_resolved, old, new, "", nested)
            walk.in_progress.discard(key)
            result = SchemaDiffResult(increased=nested.increased, missing=nested.missing)
            walk.expanded[key] = result

        walk.increased.extend(ElProperty(el=rebase_el(el, p.el), node=p.node) for p in result.increased)
        walk.missing.extend(ElProperty(el=rebase_el(el, p.el), node=p.node) for p in result.missing)

    def _compare(
        self,
        old: Node,
        new: Node,
        old_original: Node,
        new_original: Node,
        el: str,
        walk: _Walk,
    ) -> None:
        """Compare two concrete (non-reference) nodes."""
        if isinstance(old, ObjectNode) and isinstance(new, ObjectNode):
            props = keyed_diff(old.properties, new.properties)
            for name, node in props.increased.items():
                walk.increased.append(ElProperty(el=join_el(el, name), node=node))
            for name, node in props.missing.items():
                walk.missing.append(ElProperty(el=join_el(el, name), node=node))
            for name in props.shared_keys:
                self._walk(old.properties[name], new.properties[name], join_el(el, name), walk)
        elif isinstance(old, ArrayNode) and isinstance(new, ArrayNode):
            self._walk(old.items, new.items, f"{el}[]", walk)
        elif isinstance(old, PrimitiveNode) and isinstance(new, PrimitiveNode):
            if old.type != new.type:
                self._replace(old_original, new_original, el, walk)
        else:
            self._replace(old_original, new_original, el, walk)

    def _replace(self, old: Node, new: Node, el: str, walk: _Walk) -> None:
        """Report a type change as a removal plus an addition at the same path."""
        walk.missing.append(ElProperty(el=el, node=old))
        walk.increased.append(ElProperty(el=el, node=new))
