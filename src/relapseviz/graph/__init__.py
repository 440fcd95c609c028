"""Graph model and renderers for relapseviz.

Grammar graphs are built as a ``GraphSpec`` and rendered to Graphviz DOT
(primary), Mermaid, or SVG laid out by Graphviz.
"""

from .dot import DotRenderer
from .framework import GraphRenderer
from .mermaid import MermaidRenderer
from .models import EdgeKind, EdgeSpec, GraphSpec, NodeRole, NodeSpec
from .svg import SvgRenderer, massage_svg, render_dot_svg

__all__ = [
    "GraphRenderer",
    "DotRenderer",
    "MermaidRenderer",
    "SvgRenderer",
    "massage_svg",
    "render_dot_svg",
    "GraphSpec",
    "NodeSpec",
    "EdgeSpec",
    "NodeRole",
    "EdgeKind",
]
