"""Mermaid diagram renderer for grammar graphs."""

import logging
import re

from ..label import plain_text
from .framework import GraphRenderer
from .models import EdgeKind, GraphSpec, NodeRole, NodeSpec

logger = logging.getLogger(__name__)


class MermaidRenderer(GraphRenderer):
    """Mermaid flowchart renderer for grammar graphs."""

    @property
    def format_name(self) -> str:
        return "mermaid"

    def get_file_extension(self) -> str:
        return ".mmd"

    def render(self, spec: GraphSpec) -> str:
        """Render graph specification as Mermaid flowchart."""
        logger.debug(f"Rendering {len(spec.nodes)} nodes as Mermaid flowchart")
        lines = []

        # Header
        lines.append("flowchart TD")
        lines.append(f"    %% {spec.name}")
        lines.append("")

        # Nodes
        lines.append("    %% Nodes")
        for node in spec.nodes.values():
            lines.append(f"    {self._render_node(node)}")

        lines.append("")

        # Edges
        if spec.edges:
            lines.append("    %% Edges")
            for edge in spec.edges:
                lines.append(f"    {self._render_edge(edge)}")
            lines.append("")

        # Styling based on node roles
        lines.extend(self._render_styling(spec))

        return "\n".join(lines)

    def _render_node(self, node: NodeSpec) -> str:
        """Render a single node."""
        label = self._escape_label(plain_text(node.label) or node.id)

        if node.role == NodeRole.ROOT:
            # Root: hexagon
            return f'{node.safe_id}{{{{"{label}"}}}}'
        elif node.role == NodeRole.TRIVIA:
            # Trivia: stadium
            return f'{node.safe_id}(["{label}"])'
        else:
            return f'{node.safe_id}["{label}"]'

    def _render_edge(self, edge) -> str:
        """Render a single edge."""
        from_safe = self._get_safe_id(edge.src)
        to_safe = self._get_safe_id(edge.dst)
        arrow = "-.->" if edge.kind == EdgeKind.TRIVIA else "-->"
        return f'{from_safe} {arrow}|"{self._escape_label(edge.label)}"| {to_safe}'

    def _render_styling(self, spec: GraphSpec) -> list:
        """Render node styling based on roles."""
        lines = []

        roots = [node for node in spec.nodes.values() if node.role == NodeRole.ROOT]
        if roots:
            lines.append("    %% Root styling")
            lines.append("    classDef root fill:#e1f5fe,stroke:#01579b,stroke-width:2px")
            for node in roots:
                lines.append(f"    class {node.safe_id} root")

        trivia = [node for node in spec.nodes.values() if node.role == NodeRole.TRIVIA]
        if trivia:
            lines.append("    %% Trivia styling")
            lines.append("    classDef trivia fill:#f5f5f5,stroke:#9e9e9e,stroke-dasharray: 3 3")
            for node in trivia:
                lines.append(f"    class {node.safe_id} trivia")

        return lines

    def _escape_label(self, label: str) -> str:
        """Escape label for Mermaid rendering."""
        if not label:
            return ""

        label = label.replace("&", "#amp;")
        label = label.replace('"', "#quot;")
        label = label.replace("<", "#lt;")
        label = label.replace(">", "#gt;")
        label = label.replace("\r", "")
        label = label.replace("\n", "<br/>")
        return label

    def _get_safe_id(self, node_id: str) -> str:
        """Get safe ID for node reference."""
        return re.sub(r"[^a-zA-Z0-9_]", "_", node_id)
