"""Graphviz DOT renderer for grammar graphs."""

import re

from ..label import escape
from .framework import GraphRenderer
from .models import GraphSpec

_PLAIN_ID = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

# Reserved in DOT regardless of case
_KEYWORDS = frozenset({"graph", "digraph", "subgraph", "node", "edge", "strict"})


class DotRenderer(GraphRenderer):
    """Renders a graph in the Graphviz DOT language.

    Node attribute values are written verbatim since they are stored already
    quoted; edge labels are quoted here.
    """

    @property
    def format_name(self) -> str:
        return "dot"

    def get_file_extension(self) -> str:
        return ".dot"

    def render(self, spec: GraphSpec) -> str:
        keyword = "digraph" if spec.directed else "graph"
        lines = [f"{keyword} {_dot_id(spec.name)} {{"]

        for node in spec.nodes.values():
            if node.attrs:
                lines.append(f"\t{_dot_id(node.id)} [ {self._render_attrs(node.attrs)} ];")
            else:
                lines.append(f"\t{_dot_id(node.id)};")

        for edge in spec.edges:
            op = "->" if spec.directed and edge.directed else "--"
            lines.append(f'\t{_dot_id(edge.src)}{op}{_dot_id(edge.dst)} [ label="{escape(edge.label)}" ];')

        lines.append("}")
        return "\n".join(lines) + "\n"

    def _render_attrs(self, attrs: dict[str, str]) -> str:
        return ", ".join(f"{name}={value}" for name, value in attrs.items())


def _dot_id(value: str) -> str:
    if _PLAIN_ID.fullmatch(value) and value.lower() not in _KEYWORDS:
        return value
    return f'"{escape(value)}"'
