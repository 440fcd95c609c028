"""relapseviz - Graph visualizer for Relapse grammars.

relapseviz translates the parse tree of a Relapse grammar into a directed
graph and renders it as Graphviz DOT, Mermaid, or a cleaned-up SVG image.
"""

__version__ = "0.1.0"
__description__ = "Graph visualizer for Relapse grammar parse trees"

from relapseviz.config import RelapsevizConfig
from relapseviz.errors import LabelSealedError, RelapsevizError, RenderError, UnknownNodeError
from relapseviz.generator import DiagramGenerator
from relapseviz.translate import translate, translate_grammar, write_svg

__all__ = [
    "__version__",
    "__description__",
    "RelapsevizConfig",
    "DiagramGenerator",
    "translate",
    "translate_grammar",
    "write_svg",
    "RelapsevizError",
    "UnknownNodeError",
    "LabelSealedError",
    "RenderError",
]
