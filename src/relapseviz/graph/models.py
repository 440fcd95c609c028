"""Graph data models for grammar diagrams."""

import re
from dataclasses import dataclass, field
from enum import Enum

ATTR_LABEL = "label"


class NodeRole(str, Enum):
    """Node roles used for diagram styling."""
    ROOT = "root"
    STRUCTURAL = "structural"
    TRIVIA = "trivia"


class EdgeKind(str, Enum):
    """Edge kinds used for diagram styling."""
    STRUCTURAL = "structural"
    TRIVIA = "trivia"


@dataclass
class NodeSpec:
    """Specification for a grammar node."""
    id: str  # Unique within one graph
    attrs: dict[str, str] = field(default_factory=dict)  # DOT attribute values, already quoted
    role: NodeRole = NodeRole.STRUCTURAL
    variant: str = ""  # AST variant the node was generated from

    @property
    def label(self) -> str:
        return self.attrs.get(ATTR_LABEL, "")

    @property
    def safe_id(self) -> str:
        """Get ID safe for diagram rendering (alphanumeric + underscore)."""
        return re.sub(r"[^a-zA-Z0-9_]", "_", self.id)


@dataclass
class EdgeSpec:
    """Specification for a parent to child edge."""
    src: str
    dst: str
    label: str  # Field name, e.g. LeftPattern or Elems[2]
    directed: bool = True
    kind: EdgeKind = EdgeKind.STRUCTURAL


@dataclass
class GraphSpec:
    """Complete graph specification for rendering."""
    name: str = "Relapse"
    directed: bool = True
    nodes: dict[str, NodeSpec] = field(default_factory=dict)
    edges: list[EdgeSpec] = field(default_factory=list)

    def add_node(self, node: NodeSpec) -> None:
        """Add a node, merging attributes into an existing node of the same id."""
        existing = self.nodes.get(node.id)
        if existing is not None:
            existing.attrs.update(node.attrs)
            return
        self.nodes[node.id] = node

    def add_edge(self, edge: EdgeSpec) -> None:
        """Add an edge to the graph."""
        self.edges.append(edge)

    def children(self, node_id: str) -> list[EdgeSpec]:
        """Outgoing edges of ``node_id`` in insertion order."""
        return [edge for edge in self.edges if edge.src == node_id]

    def roots(self) -> list[str]:
        """Nodes without inbound edges."""
        targets = {edge.dst for edge in self.edges}
        return [node_id for node_id in self.nodes if node_id not in targets]

    def nodes_of(self, variant: str) -> list[NodeSpec]:
        """Nodes generated for the given AST variant name."""
        return [node for node in self.nodes.values() if node.variant == variant]

    def is_tree(self) -> bool:
        """True when there is one root and every other node has exactly one parent."""
        inbound: dict[str, int] = {}
        for edge in self.edges:
            inbound[edge.dst] = inbound.get(edge.dst, 0) + 1
            if edge.src not in self.nodes or edge.dst not in self.nodes:
                return False
        roots = self.roots()
        if len(roots) != 1:
            return False
        return all(inbound.get(node_id, 0) == 1 for node_id in self.nodes if node_id != roots[0])
