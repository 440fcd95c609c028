"""Diagram generation driven by configuration."""

import logging

from relapse import Grammar, parse

from .config import RelapsevizConfig
from .graph.dot import DotRenderer
from .graph.framework import GraphRenderer
from .graph.mermaid import MermaidRenderer
from .graph.models import GraphSpec
from .graph.svg import SvgRenderer
from .translate import translate_grammar

logger = logging.getLogger(__name__)


class DiagramGenerator:
    """Turns grammar source into rendered diagrams.

    Renderers are looked up by their ``format_name``; translation options
    come from the ``render`` section of the configuration.
    """

    def __init__(self, config: RelapsevizConfig):
        self.config = config
        self.renderers: dict[str, GraphRenderer] = {}

    def add_renderer(self, renderer: GraphRenderer) -> None:
        """Add a graph renderer."""
        self.renderers[renderer.format_name] = renderer

    def add_default_renderers(self) -> None:
        """Register the DOT, Mermaid and SVG renderers."""
        self.add_renderer(DotRenderer())
        self.add_renderer(MermaidRenderer())
        self.add_renderer(SvgRenderer(
            engine=self.config.render.engine,
            strip_titles=self.config.svg.strip_titles,
            strip_size=self.config.svg.strip_size,
        ))

    def generate(self, source: str) -> GraphSpec:
        """Parse grammar source and translate it into a graph.

        Raises:
            ParseError: If ``source`` is not a valid grammar
        """
        return self.generate_from_grammar(parse(source))

    def generate_from_grammar(self, grammar: Grammar) -> GraphSpec:
        """Translate a parsed grammar into a graph."""
        render = self.config.render
        logger.info(f"Generating {'full' if render.full else 'structural'} graph '{render.graph_name}'")
        return translate_grammar(
            grammar,
            render.full,
            seed=render.seed,
            graph_name=render.graph_name,
            strict_ids=render.strict_ids,
        )

    def render_graph(self, spec: GraphSpec, format_name: str | None = None) -> str:
        """Render graph specification to string.

        Args:
            spec: Graph specification to render
            format_name: Output format ('dot', 'mermaid', 'svg'); defaults to
                the configured format

        Returns:
            Rendered graph as string
        """
        if format_name is None:
            format_name = self.config.render.format
        if format_name not in self.renderers:
            available = list(self.renderers.keys())
            raise ValueError(f"Unknown format '{format_name}'. Available: {available}")

        renderer = self.renderers[format_name]
        logger.info(f"Rendering graph with {renderer.format_name} renderer")
        return renderer.render(spec)
