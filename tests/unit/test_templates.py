"""
Unit tests for the Jinja2 template renderer.
"""

import pytest

from exportkit.attributes.model import Argument, Function
from exportkit.codegen.templates import JinjaTemplateRenderer, get_renderer


class TestJinjaTemplateRenderer:
    """Test template loading and rendering."""

    def setup_method(self):
        self.renderer = JinjaTemplateRenderer()

    def test_bundled_templates(self):
        assert set(self.renderer.list_templates()) >= {
            "doc_placeholder.j2", "loader.j2", "shim_function.j2",
        }
        assert self.renderer.template_dir.name == "templates"

    def test_shared_renderer(self):
        assert get_renderer() is get_renderer()

    def test_render_placeholder(self):
        """Test a documentation placeholder keeps its comment lines."""
        rendered = self.renderer.render_file("doc_placeholder.j2", {
            "roxygen": ["#' Twice x"],
            "name": "twice",
            "argument_names": ["x"],
        })

        assert rendered == "\n#' Twice x\ntwice<- function(x) {}\n\n"

    def test_render_shim_with_default_argument(self):
        function = Function("scale", "double", (Argument("x", "double"),
                                                Argument("k", "int", "2")))
        rendered = self.renderer.render_file("shim_function.j2", {
            "function": function,
            "module_name": "RcppExports",
        })

        assert rendered.splitlines()[1] == (
            '        static double(*p_scale)(double,int) = '
            'Rcpp::GetCppCallable("RcppExports", "scale");'
        )

    def test_missing_variable_raises(self):
        """Test undefined context variables are errors, not blanks."""
        with pytest.raises(ValueError):
            self.renderer.render_file("loader.j2", {"exports": ["a"]})

    def test_custom_template_dir(self, tmp_path):
        (tmp_path / "hello.j2").write_text("hello {{ name }}\n")
        renderer = JinjaTemplateRenderer(str(tmp_path))

        assert renderer.render_file("hello.j2", {"name": "world"}) == "hello world\n"
