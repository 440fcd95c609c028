"""Unit tests for the configuration-driven diagram generator."""

import pytest

from relapse import ParseError, parse
from relapseviz.config import RelapsevizConfig
from relapseviz.generator import DiagramGenerator
from relapseviz.graph import DotRenderer, SvgRenderer


def _generator(**render) -> DiagramGenerator:
    generator = DiagramGenerator(RelapsevizConfig(render=render))
    generator.add_default_renderers()
    return generator


class TestDiagramGenerator:
    """Test renderer registry and translation settings."""

    def test_default_renderers(self):
        generator = _generator()
        assert sorted(generator.renderers) == ["dot", "mermaid", "svg"]

    def test_svg_renderer_follows_config(self):
        config = RelapsevizConfig(render={"engine": "twopi"}, svg={"stripTitles": False})
        generator = DiagramGenerator(config)
        generator.add_default_renderers()
        renderer = generator.renderers["svg"]
        assert isinstance(renderer, SvgRenderer)
        assert renderer.engine == "twopi"
        assert renderer.strip_titles is False
        assert renderer.strip_size is True

    def test_add_renderer(self):
        generator = DiagramGenerator(RelapsevizConfig())
        generator.add_renderer(DotRenderer())
        assert list(generator.renderers) == ["dot"]

    def test_unknown_format(self):
        generator = _generator()
        spec = generator.generate("*")
        with pytest.raises(ValueError, match="Unknown format 'png'"):
            generator.render_graph(spec, "png")

    def test_render_uses_configured_format(self):
        generator = _generator(format="mermaid")
        assert generator.render_graph(generator.generate("*")).startswith("flowchart TD")

    def test_generate_uses_render_settings(self):
        spec = _generator(graphName="Stars", full=True).generate("*")
        assert spec.name == "Stars"
        assert spec.nodes_of("Keyword")

    def test_seed_setting(self):
        first = _generator(seed=1).generate("*")
        second = _generator(seed=2).generate("*")
        assert set(first.nodes) != set(second.nodes)

    def test_generate_from_grammar(self):
        generator = _generator()
        assert list(generator.generate_from_grammar(parse("*")).nodes) == list(generator.generate("*").nodes)

    def test_parse_error_propagates(self):
        with pytest.raises(ParseError):
            _generator().generate("(")
