#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Unit tests for the template converter."""

from __future__ import annotations

import pytest
from utils import paragraph, write_template

from docrender.ast import Document, Paragraph, Table, Text
from docrender.converters.template import TemplateConverter
from docrender.engines import JinjaEngine, TemplateEngine
from docrender.exceptions import (
    ConversionError,
    TemplateCompileError,
    TemplateNotFoundError,
    TemplateRenderError,
)
from docrender.options import ConverterOptions


def attach(converter, *children) -> Document:
    """Wrap nodes in a document converted with ``converter``."""
    return Document(children=list(children), converter=converter)


@pytest.mark.unit
class TestHandles:
    """Test capability checks."""

    def test_handles_matches_resolution(self, temp_dir):
        """handles() is true exactly when a template resolves."""
        write_template(temp_dir, "paragraph.jinja2", "<p/>")
        converter = TemplateConverter("html5", [str(temp_dir)])

        assert converter.handles("paragraph") is True
        assert converter.handles("table") is False

    def test_handles_with_no_directories(self):
        """An empty directory list handles nothing."""
        assert TemplateConverter("html5", []).handles("paragraph") is False


@pytest.mark.unit
class TestConvert:
    """Test rendering through templates."""

    def test_renders_node_content(self, temp_dir):
        """Templates render nested content through node.content."""
        write_template(temp_dir, "paragraph.jinja2", '<p class="x">{{ node.content }}</p>')
        write_template(temp_dir, "text.jinja2", "{{ node.text | upper }}")
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = paragraph("hi")
        attach(converter, para)

        assert converter.convert(para) == '<p class="x">HI</p>'

    def test_context_variables(self, temp_dir):
        """Templates see node, document, backend, opts and extra context."""
        write_template(
            temp_dir,
            "paragraph.jinja2",
            "{{ backend }}|{{ document.title }}|{{ opts.role }}|{{ site }}|{{ node.node_name }}",
        )
        options = ConverterOptions(extra_context={"site": "docs"})
        converter = TemplateConverter("html5", [str(temp_dir)], options)
        para = Paragraph()
        doc = attach(converter, para)
        doc.title = "T"

        assert converter.convert(para, opts={"role": "lead"}) == "html5|T|lead|docs|paragraph"

    def test_transform_selects_template(self, temp_dir):
        """The transform argument picks the template instead of the node kind."""
        write_template(temp_dir, "admonition.jinja2", "ADMONITION")
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = paragraph("x")
        attach(converter, para)

        assert converter.convert(para, transform="admonition") == "ADMONITION"

    def test_filters_available(self, temp_dir):
        """The escaping filters are registered with the environment."""
        write_template(temp_dir, "text.jinja2", "{{ node.text | escape_html }}|{{ node.text | escape_roff }}")
        converter = TemplateConverter("html5", [str(temp_dir)])
        text = Text(text="<a-b>")
        attach(converter, text)

        assert converter.convert(text) == "&lt;a-b&gt;|<a\\-b>"

    def test_include_sibling_template(self, temp_dir):
        """Templates can include other files from the template directories."""
        write_template(temp_dir, "_wrap.jinja2", "[{{ inner }}]")
        write_template(temp_dir, "paragraph.jinja2", '{% set inner = "p" %}{% include "_wrap.jinja2" %}')
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = Paragraph()
        attach(converter, para)

        assert converter.convert(para) == "[p]"

    def test_engine_options_are_applied(self, temp_dir):
        """Engine options are passed to the Jinja2 environment."""
        write_template(temp_dir, "paragraph.jinja2", "{% if true %}\nyes\n{% endif %}\n")
        options = ConverterOptions(engine_options={"trim_blocks": True})
        converter = TemplateConverter("html5", [str(temp_dir)], options)
        para = Paragraph()
        attach(converter, para)

        assert converter.convert(para) == "yes\n"


@pytest.mark.unit
class TestFailures:
    """Test error reporting."""

    def test_not_found(self, temp_dir):
        """Converting an unmatched kind raises TemplateNotFoundError."""
        converter = TemplateConverter("html5", [str(temp_dir)])
        table = Table()

        with pytest.raises(TemplateNotFoundError) as exc_info:
            converter.convert(table)
        assert exc_info.value.node_name == "table"
        assert exc_info.value.backend == "html5"
        assert "table" in str(exc_info.value)

    def test_compile_error_names_kind_and_path(self, temp_dir):
        """A malformed template raises TemplateCompileError with kind and path."""
        path = write_template(temp_dir, "paragraph.jinja2", "{% if %}")
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = Paragraph()
        attach(converter, para)

        with pytest.raises(TemplateCompileError) as exc_info:
            converter.convert(para)
        message = str(exc_info.value)
        assert "paragraph" in message
        assert str(path) in message
        assert exc_info.value.template_path == str(path)

    def test_render_error_on_undefined(self, temp_dir):
        """Undefined variables fail rendering under strict undefined."""
        path = write_template(temp_dir, "paragraph.jinja2", "{{ missing_variable }}")
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = Paragraph()
        attach(converter, para)

        with pytest.raises(TemplateRenderError) as exc_info:
            converter.convert(para)
        assert exc_info.value.template_path == str(path)
        assert exc_info.value.node_name == "paragraph"

    def test_lenient_undefined(self, temp_dir):
        """Undefined variables render empty when strict_undefined is off."""
        write_template(temp_dir, "paragraph.jinja2", "[{{ missing_variable }}]")
        converter = TemplateConverter("html5", [str(temp_dir)], ConverterOptions(strict_undefined=False))
        para = Paragraph()
        attach(converter, para)

        assert converter.convert(para) == "[]"

    def test_nested_errors_are_not_rewrapped(self, temp_dir):
        """Errors from nested content keep their own type."""
        write_template(temp_dir, "paragraph.jinja2", "{{ node.content }}")
        write_template(temp_dir, "text.jinja2", "{% if %}")
        converter = TemplateConverter("html5", [str(temp_dir)])
        para = paragraph("x")
        attach(converter, para)

        with pytest.raises(TemplateCompileError) as exc_info:
            converter.convert(para)
        assert exc_info.value.node_name == "text"

    def test_detached_node_content_fails(self, temp_dir):
        """Rendering node.content requires the node to belong to a document."""
        write_template(temp_dir, "paragraph.jinja2", "{{ node.content }}")
        converter = TemplateConverter("html5", [str(temp_dir)])

        with pytest.raises(ConversionError):
            converter.convert(paragraph("x"))


class UpperEngine(TemplateEngine):
    """Engine that upper-cases the template source."""

    name = "upper"
    extension = "txt"

    def __init__(self, options=None):
        super().__init__(options)
        self.compiled = 0

    def compile(self, source, name=None):
        self.compiled += 1
        return lambda context: source.upper()


@pytest.mark.unit
class TestEngines:
    """Test engine selection."""

    def test_default_engine_is_jinja(self):
        """Jinja2 is the default engine."""
        assert isinstance(TemplateConverter("html5", []).engine, JinjaEngine)

    def test_engine_instance(self, temp_dir):
        """An engine instance decides the subdirectory and extension."""
        write_template(temp_dir, "upper/html5/paragraph.txt", "deep")
        write_template(temp_dir, "paragraph.jinja2", "jinja")
        converter = TemplateConverter("html5", [str(temp_dir)], ConverterOptions(template_engine=UpperEngine()))
        para = Paragraph()
        attach(converter, para)

        assert converter.convert(para) == "DEEP"

    def test_compiled_templates_cached(self, temp_dir):
        """With template_cache, each kind is compiled once."""
        write_template(temp_dir, "paragraph.txt", "p")
        engine = UpperEngine()
        converter = TemplateConverter(
            "html5", [str(temp_dir)], ConverterOptions(template_engine=engine, template_cache=True)
        )
        para = Paragraph()
        attach(converter, para)

        converter.convert(para)
        converter.convert(para)
        assert engine.compiled == 1

    def test_compiled_templates_not_cached_by_default(self, temp_dir):
        """Without template_cache, templates are compiled on every call."""
        write_template(temp_dir, "paragraph.txt", "p")
        engine = UpperEngine()
        converter = TemplateConverter("html5", [str(temp_dir)], ConverterOptions(template_engine=engine))
        para = Paragraph()
        attach(converter, para)

        converter.convert(para)
        converter.convert(para)
        assert engine.compiled == 2
