"""SVG rendering for grammar graphs.

DOT text is laid out by the Graphviz ``dot`` binary through the ``graphviz``
package; the resulting SVG is then massaged into a standalone, scalable image:
no XML prolog, no DOCTYPE, no comments, no tooltip titles and no fixed size.
"""

import logging
import re
import xml.etree.ElementTree as ET

import graphviz
from defusedxml import DefusedXmlException
from defusedxml.ElementTree import ParseError, fromstring

from ..errors import RenderError
from .dot import DotRenderer
from .framework import GraphRenderer
from .models import GraphSpec

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

ET.register_namespace("", SVG_NS)
ET.register_namespace("xlink", XLINK_NS)

_PROLOG = re.compile(r"<\?xml.*?\?>", re.DOTALL)
_DOCTYPE = re.compile(r"<!DOCTYPE[^>\[]*(\[.*?\])?\s*>", re.DOTALL)
_COMMENT = re.compile(r"<!--.*?-->", re.DOTALL)


def render_dot_svg(dot_source: str, engine: str = "dot") -> str:
    """Lay out DOT text with Graphviz and return the raw SVG.

    Raises:
        RenderError: If the Graphviz executable is missing or fails
    """
    try:
        return graphviz.Source(dot_source, engine=engine).pipe(format="svg", encoding="utf-8")
    except graphviz.ExecutableNotFound as e:
        raise RenderError(f"Graphviz executable not found: {e}") from e
    except graphviz.CalledProcessError as e:
        stderr = e.stderr.decode("utf-8", errors="replace") if isinstance(e.stderr, bytes) else e.stderr
        raise RenderError(f"Graphviz {engine} failed: {stderr or e}") from e


def massage_svg(svg: str, strip_titles: bool = True, strip_size: bool = True) -> str:
    """Clean up Graphviz SVG output.

    Args:
        svg: Raw SVG text
        strip_titles: Remove <title> elements (node and edge tooltips)
        strip_size: Remove the root width/height so the image scales to its viewBox

    Returns:
        Cleaned SVG text

    Raises:
        RenderError: If the SVG cannot be parsed
    """
    text = _COMMENT.sub("", _DOCTYPE.sub("", _PROLOG.sub("", svg))).strip()
    try:
        root = fromstring(text)
    except (ParseError, DefusedXmlException) as e:
        raise RenderError(f"Invalid SVG from renderer: {e}") from e

    if strip_titles:
        title_tag = f"{{{SVG_NS}}}title"
        removed = 0
        for parent in list(root.iter()):
            for element in list(parent):
                if element.tag == title_tag:
                    parent.remove(element)
                    removed += 1
        logger.debug(f"Removed {removed} title elements")

    if strip_size:
        root.attrib.pop("width", None)
        root.attrib.pop("height", None)

    return ET.tostring(root, encoding="unicode")


class SvgRenderer(GraphRenderer):
    """Renders a graph to a cleaned-up SVG image via DOT."""

    def __init__(self, engine: str = "dot", strip_titles: bool = True, strip_size: bool = True):
        self.engine = engine
        self.strip_titles = strip_titles
        self.strip_size = strip_size
        self.dot_renderer = DotRenderer()

    @property
    def format_name(self) -> str:
        return "svg"

    def get_file_extension(self) -> str:
        return ".svg"

    def render(self, spec: GraphSpec) -> str:
        logger.info(f"Laying out {len(spec.nodes)} nodes with Graphviz {self.engine}")
        raw = render_dot_svg(self.dot_renderer.render(spec), self.engine)
        return massage_svg(raw, strip_titles=self.strip_titles, strip_size=self.strip_size)
