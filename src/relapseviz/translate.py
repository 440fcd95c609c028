"""Grammar-to-graph translation entry points."""

import logging
from typing import TextIO

from relapse import Grammar, parse

from .graph.models import GraphSpec
from .graph.svg import SvgRenderer
from .identity import DEFAULT_SEED, IdentityGenerator, UniqueIdentityGenerator
from .walker import TreeWalker

logger = logging.getLogger(__name__)

DEFAULT_GRAPH_NAME = "Relapse"


def translate(
    source: str,
    full: bool = False,
    *,
    seed: int = DEFAULT_SEED,
    graph_name: str = DEFAULT_GRAPH_NAME,
    strict_ids: bool = False,
) -> GraphSpec:
    """Parse grammar source text and translate it into a graph.

    Args:
        source: Relapse grammar source
        full: Also include keyword and whitespace nodes
        seed: Seed for node identity suffixes
        graph_name: Name of the resulting graph
        strict_ids: Redraw identity suffixes instead of accepting a repeat

    Returns:
        GraphSpec rooted at the ``Grammarroot`` node

    Raises:
        ParseError: If ``source`` is not a valid grammar
    """
    grammar = parse(source)
    return translate_grammar(grammar, full, seed=seed, graph_name=graph_name, strict_ids=strict_ids)


def translate_grammar(
    grammar: Grammar,
    full: bool = False,
    *,
    seed: int = DEFAULT_SEED,
    graph_name: str = DEFAULT_GRAPH_NAME,
    strict_ids: bool = False,
) -> GraphSpec:
    """Translate an already parsed grammar into a graph.

    The same grammar, flag and seed always produce the same graph.
    """
    generator = UniqueIdentityGenerator if strict_ids else IdentityGenerator
    graph = GraphSpec(name=graph_name)
    # Keyword and Space nodes draw from their own stream, so full mode only adds nodes
    TreeWalker(graph, generator(seed), full=full, trivia_ids=generator(seed)).walk(grammar)
    logger.debug(f"Translated grammar into {len(graph.nodes)} nodes and {len(graph.edges)} edges (full={full})")
    return graph


def write_svg(
    graph: GraphSpec,
    out: TextIO,
    *,
    engine: str = "dot",
    strip_titles: bool = True,
    strip_size: bool = True,
) -> None:
    """Lay out ``graph`` with Graphviz and write the cleaned SVG to ``out``.

    Raises:
        RenderError: If Graphviz is unavailable or produces unusable output
    """
    renderer = SvgRenderer(engine=engine, strip_titles=strip_titles, strip_size=strip_size)
    out.write(renderer.render(graph))
