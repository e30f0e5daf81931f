"""
Concrete exports generators.

- :class:`RegistrationModuleGenerator` writes ``src/RcppExports.cpp``,
  registering every exported function with the exports module.
- :class:`HostLoaderGenerator` writes ``R/RcppExports.R``, which loads the
  module and carries documentation placeholders.
- :class:`CrossModuleShimGenerator` writes ``inst/include/<package>.hpp``,
  inline functions that let other native modules call the exports.
"""

import os
from typing import List, Optional, Sequence

from .base import EXPORTS_MODULE_NAME, ExportsGenerator, format_preamble
from .templates import JinjaTemplateRenderer, get_renderer
from ..attributes.model import (
    HIDDEN_PREFIX,
    INTERFACE_CPP,
    INTERFACE_R,
    Attribute,
    SourceFileAttributes,
)
from ..utils.logging import ExportsLogger


def render_module_functions(attributes: SourceFileAttributes,
                            exports_logger: Optional[ExportsLogger] = None) -> str:
    """Render one registration line per exported function."""
    lines = []
    for attribute in attributes.exported_functions():
        if exports_logger is not None:
            exports_logger.log_exported_function(attribute.function.signature())
        lines.append(
            f'    Rcpp::function("{attribute.exported_name()}", &{attribute.function.name});\n'
        )
    return "".join(lines)


def render_module(module_name: str, attributes: SourceFileAttributes, verbose: bool = False) -> str:
    """Render a complete module registration block for one source file."""
    exports_logger = ExportsLogger(__name__, verbose)
    return (
        f"RCPP_MODULE({module_name}) {{\n"
        f"{render_module_functions(attributes, exports_logger)}"
        "}\n"
    )


class RegistrationModuleGenerator(ExportsGenerator):
    """Generates the native module registration source."""

    def __init__(self, package_dir: str):
        super().__init__(os.path.join(package_dir, "src", "RcppExports.cpp"), "//")

    def write_begin(self) -> None:
        self.write(f"RCPP_MODULE({EXPORTS_MODULE_NAME}) {{\n")

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool) -> None:
        exports_logger = ExportsLogger(__name__, verbose)
        exports_logger.log_unit_start(attributes.source_file)
        self.write(render_module_functions(attributes, exports_logger))

    def write_end(self) -> None:
        self.write("}\n")

    def commit(self, includes: Sequence[str], prototypes: Sequence[str]) -> bool:
        return self._commit(format_preamble(includes, prototypes))


class CrossModuleShimGenerator(ExportsGenerator):
    """
    Generates the header other native modules include to call the exports.

    Only source files declaring the ``cpp`` interface contribute. If none
    do, the header is deleted on commit.
    """

    def __init__(self, package_dir: str, scope: str,
                 renderer: Optional[JinjaTemplateRenderer] = None):
        super().__init__(os.path.join(package_dir, "inst", "include", f"{scope}.hpp"), "//")
        self._scope = scope
        self._renderer = renderer or get_renderer()
        self._has_cpp_interface = False

    @property
    def has_cpp_interface(self) -> bool:
        return self._has_cpp_interface

    def write_begin(self) -> None:
        self.write(f"namespace {self._scope} {{\n")

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool) -> None:
        if not attributes.has_interface(INTERFACE_CPP):
            return
        self._has_cpp_interface = True

        for attribute in attributes.exported_functions():
            function = attribute.function.renamed_to(attribute.exported_name())
            # hidden functions are host-only
            if function.name.startswith(HIDDEN_PREFIX):
                continue
            self.write(self._renderer.render_file("shim_function.j2", {
                "function": function,
                "module_name": EXPORTS_MODULE_NAME,
            }))

    def write_end(self) -> None:
        self.write("}\n")

    def commit(self, includes: Sequence[str], prototypes: Sequence[str]) -> bool:
        if not self._has_cpp_interface:
            self.remove()
            return False

        return self._commit(format_preamble(includes))


class HostLoaderGenerator(ExportsGenerator):
    """
    Generates the host script that loads the exports module.

    Documented exports get a placeholder declaration so that
    documentation tooling can pick up their comments.
    """

    def __init__(self, package_dir: str, renderer: Optional[JinjaTemplateRenderer] = None):
        super().__init__(os.path.join(package_dir, "R", "RcppExports.R"), "#")
        self._renderer = renderer or get_renderer()
        self._exports: List[str] = []

    @property
    def exports(self) -> List[str]:
        return list(self._exports)

    def write_begin(self) -> None:
        pass

    def write_functions(self, attributes: SourceFileAttributes, verbose: bool) -> None:
        if not attributes.has_interface(INTERFACE_R):
            return

        for attribute in attributes.exported_functions():
            self._exports.append(attribute.exported_name())
            if attribute.roxygen:
                self.write(self._render_placeholder(attribute))

    def _render_placeholder(self, attribute: Attribute) -> str:
        return self._renderer.render_file("doc_placeholder.j2", {
            "roxygen": attribute.roxygen,
            "name": attribute.exported_name(),
            "argument_names": [arg.name for arg in attribute.function.arguments],
        })

    def write_end(self) -> None:
        prefix = f'Rcpp::loadModule("{EXPORTS_MODULE_NAME}", what = c('
        self.write(self._renderer.render_file("loader.j2", {
            "exports": self._exports,
            "prefix": prefix,
            "padding": " " * len(prefix),
            "module_name": EXPORTS_MODULE_NAME,
        }))

    def commit(self, includes: Sequence[str], prototypes: Sequence[str]) -> bool:
        return self._commit()
