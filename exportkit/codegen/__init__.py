"""
Code generation for exports artifacts.
"""

from .base import (
    ExportsGenerator,
    GENERATOR_TOKEN,
    GENERATOR_NOTICE,
    EXPORTS_MODULE_NAME,
    format_preamble,
)
from .generators import (
    RegistrationModuleGenerator,
    CrossModuleShimGenerator,
    HostLoaderGenerator,
    render_module,
    render_module_functions,
)
from .generator_set import ExportsGenerators
from .templates import JinjaTemplateRenderer, get_renderer

__all__ = [
    'ExportsGenerator',
    'GENERATOR_TOKEN',
    'GENERATOR_NOTICE',
    'EXPORTS_MODULE_NAME',
    'format_preamble',
    'RegistrationModuleGenerator',
    'CrossModuleShimGenerator',
    'HostLoaderGenerator',
    'render_module',
    'render_module_functions',
    'ExportsGenerators',
    'JinjaTemplateRenderer',
    'get_renderer',
]
