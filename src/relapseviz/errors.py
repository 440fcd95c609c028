"""Error types for grammar graph translation and rendering."""


class RelapsevizError(Exception):
    """Base class for relapseviz errors."""


class UnknownNodeError(TypeError):
    """The walker met an AST node outside the known variant set.

    This signals that the AST model and the walker drifted apart. It is a
    programming defect, so nothing in relapseviz catches it.
    """

    def __init__(self, node: object):
        super().__init__(
            f'unknown ast node of type "{type(node).__module__}.{type(node).__qualname__}" '
            f'and value "{node!r}"'
        )
        self.node = node


class LabelSealedError(RuntimeError):
    """A label builder was appended to after it was finalized."""


class RenderError(RelapsevizError):
    """Diagram text could not be turned into an image."""
