#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for template engines and the engine registry."""

from __future__ import annotations

import pytest

from docrender.ast import Paragraph, Text
from docrender.engines import (
    JinjaEngine,
    TemplateEngine,
    get_engine,
    list_engines,
    register_engine,
    unregister_engine,
)
from docrender.exceptions import DependencyError, ValidationError
from docrender.options import ConverterOptions


class EchoEngine(TemplateEngine):
    """Engine returning the template source unchanged."""

    name = "echo"
    extension = "echo"

    def compile(self, source, name=None):
        return lambda context: source


@pytest.mark.unit
class TestJinjaEngine:
    """Test the built-in Jinja2 engine."""

    def test_name_and_extension(self):
        """The engine names its subdirectory and file extension."""
        assert JinjaEngine.name == "jinja2"
        assert JinjaEngine.extension == "jinja2"

    def test_compile_and_render(self):
        """Compiled templates are callables over a context mapping."""
        render = JinjaEngine().compile("Hello {{ who }}")
        assert render({"who": "world"}) == "Hello world"

    def test_no_autoescape(self):
        """Output is not auto-escaped; templates escape explicitly."""
        render = JinjaEngine().compile("{{ value }}|{{ value | escape_xml }}")
        assert render({"value": "<b>"}) == "<b>|&lt;b&gt;"

    def test_to_dict_filter(self):
        """The to_dict filter serializes nodes."""
        render = JinjaEngine().compile("{{ (node | to_dict).node_name }}")
        assert render({"node": Paragraph(children=[Text(text="x")])}) == "paragraph"

    def test_strict_undefined(self):
        """Undefined variables raise by default."""
        from jinja2 import UndefinedError

        render = JinjaEngine().compile("{{ nope }}")
        with pytest.raises(UndefinedError):
            render({})

    def test_syntax_error(self):
        """Malformed templates raise at compile time."""
        from jinja2 import TemplateSyntaxError

        with pytest.raises(TemplateSyntaxError):
            JinjaEngine().compile("{% for %}", name="broken.jinja2")

    def test_invalid_environment_option(self):
        """Unknown environment keywords are validation errors."""
        engine = JinjaEngine(ConverterOptions(engine_options={"not_an_option": 1}))
        with pytest.raises(ValidationError, match="Invalid Jinja2 environment option"):
            engine.compile("x")

    def test_missing_jinja_raises_dependency_error(self, monkeypatch):
        """A missing jinja2 package raises DependencyError with install hint."""
        import importlib

        real_import = importlib.import_module

        def fake_import(name, *args, **kwargs):
            if name == "jinja2":
                raise ImportError("No module named 'jinja2'")
            return real_import(name, *args, **kwargs)

        monkeypatch.setattr(importlib, "import_module", fake_import)
        with pytest.raises(DependencyError, match="pip install"):
            JinjaEngine().compile("x")


@pytest.mark.unit
class TestEngineRegistry:
    """Test looking up engines by name."""

    def test_default_engine(self):
        """The default options select Jinja2."""
        assert isinstance(get_engine(ConverterOptions()), JinjaEngine)

    def test_engine_receives_options(self):
        """Engines are constructed with the converter options."""
        options = ConverterOptions(strict_undefined=False)
        assert get_engine(options).options is options

    def test_unknown_engine(self):
        """Unknown engine names raise ValidationError listing the available ones."""
        with pytest.raises(ValidationError, match="jinja2"):
            get_engine(ConverterOptions(template_engine="mustache"))

    def test_engine_instance(self):
        """An engine instance in the options is used directly."""
        engine = EchoEngine()
        assert get_engine(ConverterOptions(template_engine=engine)) is engine

    def test_register_and_unregister(self):
        """Custom engines can be registered by name."""
        register_engine(EchoEngine)
        try:
            assert "echo" in list_engines()
            assert isinstance(get_engine(ConverterOptions(template_engine="echo")), EchoEngine)
        finally:
            assert unregister_engine("echo") is True
        assert unregister_engine("echo") is False

    def test_register_requires_name(self):
        """Engines without a name cannot be registered."""

        class Nameless(EchoEngine):
            name = ""

        with pytest.raises(ValidationError):
            register_engine(Nameless)
