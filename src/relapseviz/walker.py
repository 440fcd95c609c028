"""Depth-first translation of a Relapse AST into a ``GraphSpec``.

Each visited AST node becomes one graph node named after its variant plus a
generated suffix; each traversed field becomes one edge labeled with the
field name. Structural fields are always traversed. ``Keyword`` and ``Space``
fields are lexical trivia: they are summarized in the parent's label and only
traversed in full mode.
"""

from enum import Enum
from typing import Any, Iterator

from relapse.models import NODE_TYPES, FieldView, Keyword, Node, Role, Space

from .errors import UnknownNodeError
from .graph.models import ATTR_LABEL, EdgeKind, EdgeSpec, GraphSpec, NodeRole, NodeSpec
from .identity import IdentityGenerator
from .label import LabelBuilder, escape

ROOT_MARKER = "root"

_TRIVIA_TYPES = (Keyword, Space)


def variant_name(node: Any) -> str:
    """Name of the AST variant ``node`` belongs to.

    Raises:
        UnknownNodeError: If ``node`` is not one of the known variants
    """
    if type(node) not in NODE_TYPES:
        raise UnknownNodeError(node)
    return type(node).__name__


def is_absent(value: Any) -> bool:
    """True for unset fields: None, empty strings and empty lists."""
    if value is None:
        return True
    return isinstance(value, (str, bytes, list)) and len(value) == 0


def format_scalar(value: Any) -> str:
    """Render a scalar field value as escaped label text."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, bytes):
        return escape(value.decode("utf-8", errors="replace"))
    return escape(str(value))


def format_trivia(value: Keyword | Space) -> str:
    """Inline summary of a trivia field for its parent's label."""
    if isinstance(value, Keyword):
        return escape(value.value)
    return '\\"' + escape(str(value)) + '\\"'


class TreeWalker:
    """Walks one AST into a graph.

    Args:
        graph: Graph builder receiving nodes and edges
        ids: Suffix source for structural nodes, one per translation
        full: Also traverse trivia fields
        trivia_ids: Suffix source for Keyword and Space nodes; shares
            ``ids`` when omitted. A separate stream keeps structural node
            names identical with and without ``full``.
    """

    def __init__(
        self,
        graph: GraphSpec,
        ids: IdentityGenerator,
        full: bool = False,
        trivia_ids: IdentityGenerator | None = None,
    ):
        self.graph = graph
        self.ids = ids
        self.trivia_ids = ids if trivia_ids is None else trivia_ids
        self.full = full

    def walk(self, node: Node, parent_id: str | None = None, edge_label: str | None = None) -> str:
        """Visit ``node`` and its subtree; return the graph id of ``node``.

        Without ``parent_id`` the node is the root and is named with the root
        marker instead of a generated suffix.
        """
        name = variant_name(node)
        if parent_id is None:
            node_id = name + ROOT_MARKER
            role = NodeRole.ROOT
        else:
            trivia = isinstance(node, _TRIVIA_TYPES)
            node_id = name + next(self.trivia_ids if trivia else self.ids)
            role = NodeRole.TRIVIA if trivia else NodeRole.STRUCTURAL
            self.graph.add_edge(EdgeSpec(
                src=parent_id,
                dst=node_id,
                label=edge_label,
                kind=EdgeKind.TRIVIA if trivia else EdgeKind.STRUCTURAL,
            ))

        label = LabelBuilder(name)
        descend = []
        for view in node.iter_fields():
            if is_absent(view.value):
                continue
            if view.role is Role.SCALAR:
                for line_name, text in _scalar_lines(view):
                    label.line(line_name, text)
            elif view.role is Role.TRIVIA:
                label.line(view.label, format_trivia(view.value))
                if self.full:
                    descend.append((view.label, view.value))
            else:
                label.line(view.label, view.label)
                if view.role is Role.CHILDREN:
                    descend.extend((f"{view.label}[{i}]", item) for i, item in enumerate(view.value))
                else:
                    descend.append((view.label, view.value))

        self.graph.add_node(NodeSpec(
            id=node_id,
            attrs={ATTR_LABEL: label.finalize()},
            role=role,
            variant=name,
        ))
        for child_label, child in descend:
            self.walk(child, node_id, child_label)
        return node_id


def _scalar_lines(view: FieldView) -> Iterator[tuple[str, str]]:
    """Label lines for a scalar field; list values get one indexed line per item."""
    items = enumerate(view.value) if isinstance(view.value, list) else [(None, view.value)]
    for index, item in items:
        text = format_scalar(item)
        if view.quoted:
            text = '\\"' + text + '\\"'
        yield (view.label if index is None else f"{view.label}[{index}]"), text
