"""
Template rendering engine.

Artifact snippets are rendered from Jinja2 templates shipped in the
``templates`` directory next to this module.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError


class JinjaTemplateRenderer:
    """Jinja2-based template renderer for generated artifacts."""

    def __init__(self, template_dir: Optional[str] = None):
        """Initialize the template renderer."""
        if template_dir is None:
            template_dir = os.path.join(os.path.dirname(__file__), "templates")

        self._template_dir = Path(template_dir)
        self._env = Environment(
            loader=FileSystemLoader(str(self._template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

    @property
    def template_dir(self) -> Path:
        return self._template_dir

    def render_file(self, template_path: str, context: Dict[str, Any]) -> str:
        """Render a template file with the given context."""
        try:
            template = self._env.get_template(template_path)
            return template.render(**context)
        except TemplateError as e:
            raise ValueError(f"Template '{template_path}' rendering failed: {e}") from e

    def list_templates(self) -> List[str]:
        """List available template files."""
        return self._env.list_templates()


_default_renderer: Optional[JinjaTemplateRenderer] = None


def get_renderer() -> JinjaTemplateRenderer:
    """Return the shared renderer for the bundled templates."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = JinjaTemplateRenderer()
    return _default_renderer
