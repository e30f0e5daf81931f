"""
Unit tests for the exports generators.

Covers overwrite safety, idempotent commits and the content rules of the
registration module, cross-module shim and host loader generators.
"""

import os

import pytest

from exportkit.attributes.model import (
    Argument,
    Attribute,
    EXPORT_ATTRIBUTE,
    Function,
    INTERFACE_CPP,
    INTERFACE_R,
    Param,
    SourceFileAttributes,
)
from exportkit.codegen.base import GENERATOR_TOKEN, format_preamble
from exportkit.codegen.generators import (
    CrossModuleShimGenerator,
    HostLoaderGenerator,
    RegistrationModuleGenerator,
    render_module,
)
from exportkit.utils.exceptions import OverwriteConflictError
from tests.helpers import read, set_mtime


CPP_HEADER = (
    "// This file was generated by Rcpp::compileAttributes\n"
    f"// Generator token: {GENERATOR_TOKEN}\n"
    "\n"
)
R_HEADER = (
    "# This file was generated by Rcpp::compileAttributes\n"
    f"# Generator token: {GENERATOR_TOKEN}\n"
    "\n"
)

ADD = Function("add", "int", (Argument("a", "int"), Argument("b", "int")))
HELPER = Function("helper", "int")


@pytest.fixture
def sum_unit() -> SourceFileAttributes:
    return SourceFileAttributes(
        source_file="src/sum.cpp",
        attributes=(Attribute(EXPORT_ATTRIBUTE, (Param("sum"),), ADD),),
        interfaces=frozenset({INTERFACE_R, INTERFACE_CPP}),
        prototypes=("int add(int a, int b)",),
    )


@pytest.fixture
def helper_unit() -> SourceFileAttributes:
    return SourceFileAttributes(
        source_file="src/helper.cpp",
        attributes=(Attribute(EXPORT_ATTRIBUTE, (), HELPER),),
        prototypes=("int helper()",),
    )


def run(generator, units, includes=(), prototypes=()):
    generator.write_begin()
    for unit in units:
        generator.write_functions(unit, False)
    generator.write_end()
    return generator.commit(list(includes), list(prototypes))


class TestOverwriteSafety:
    """Test generators refuse to clobber foreign files."""

    def test_foreign_file_rejected(self, package_dir):
        """Test a target without the generator token raises."""
        target = package_dir / "src" / "RcppExports.cpp"
        target.write_text("// hand written\nint main() {}\n")

        with pytest.raises(OverwriteConflictError) as exc_info:
            RegistrationModuleGenerator(str(package_dir))

        assert exc_info.value.path == str(target)
        assert read(target) == "// hand written\nint main() {}\n"

    def test_non_utf8_foreign_file_rejected(self, package_dir):
        """Test a hand-written target in another encoding is still protected."""
        target = package_dir / "R" / "RcppExports.R"
        target.write_bytes(b"# caf\xe9\nhello <- function() 1\n")

        with pytest.raises(OverwriteConflictError):
            HostLoaderGenerator(str(package_dir))

        assert target.read_bytes() == b"# caf\xe9\nhello <- function() 1\n"

    def test_generated_file_accepted(self, package_dir, helper_unit):
        """Test a target carrying the token may be rewritten."""
        target = package_dir / "src" / "RcppExports.cpp"
        target.write_text(f"// old\n// Generator token: {GENERATOR_TOKEN}\n")

        generator = RegistrationModuleGenerator(str(package_dir))
        assert generator.is_safe_to_overwrite()
        assert run(generator, [helper_unit])
        assert "Rcpp::function(\"helper\", &helper);" in read(target)

    def test_missing_file_is_safe(self, package_dir):
        """Test an absent target is safe to create."""
        generator = HostLoaderGenerator(str(package_dir))
        assert generator.is_safe_to_overwrite()


class TestRegistrationModuleGenerator:
    """Test the module registration source."""

    def test_content(self, package_dir, sum_unit, helper_unit):
        """Test includes, prototypes and one line per export."""
        generator = RegistrationModuleGenerator(str(package_dir))
        prototypes = list(sum_unit.prototypes + helper_unit.prototypes)

        assert run(generator, [sum_unit, helper_unit], ["#include <Rcpp.h>"], prototypes)
        assert read(generator.target_file) == (
            CPP_HEADER
            + "#include <Rcpp.h>\n"
            "\n"
            "int add(int a, int b);\n"
            "int helper();\n"
            "\n"
            "RCPP_MODULE(RcppExports) {\n"
            '    Rcpp::function("sum", &add);\n'
            '    Rcpp::function("helper", &helper);\n'
            "}\n"
        )

    def test_non_export_attributes_ignored(self, package_dir):
        """Test depends attributes and empty exports emit nothing."""
        unit = SourceFileAttributes("a.cpp", (
            Attribute("depends", (Param("BH"),)),
            Attribute(EXPORT_ATTRIBUTE),
        ))
        generator = RegistrationModuleGenerator(str(package_dir))
        run(generator, [unit])

        assert generator.code == "RCPP_MODULE(RcppExports) {\n}\n"

    def test_idempotent_commit(self, package_dir, helper_unit):
        """Test a second identical run leaves the file untouched."""
        assert run(RegistrationModuleGenerator(str(package_dir)), [helper_unit])
        target = package_dir / "src" / "RcppExports.cpp"
        set_mtime(target, 1000000000)

        assert not run(RegistrationModuleGenerator(str(package_dir)), [helper_unit])
        assert os.stat(target).st_mtime == 1000000000

    def test_render_module(self, sum_unit):
        """Test the standalone module block used for one-off builds."""
        assert render_module("sourceCpp_42", sum_unit) == (
            "RCPP_MODULE(sourceCpp_42) {\n"
            '    Rcpp::function("sum", &add);\n'
            "}\n"
        )


class TestCrossModuleShimGenerator:
    """Test the cross-module calling header."""

    def test_forwarding_function(self, package_dir, sum_unit):
        """Test one inline forwarder per export, under the alias."""
        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")

        assert run(generator, [sum_unit], ["#include <Rcpp.h>"], sum_unit.prototypes)
        assert generator.target_file == os.path.join(str(package_dir), "inst", "include", "mypkg.hpp")
        assert read(generator.target_file) == (
            CPP_HEADER
            + "#include <Rcpp.h>\n"
            "\n"
            "namespace mypkg {\n"
            "    inline int sum(int a, int b) {\n"
            '        static int(*p_sum)(int,int) = Rcpp::GetCppCallable("RcppExports", "sum");\n'
            "        return p_sum(a,b);\n"
            "    }\n"
            "}\n"
        )

    def test_no_arguments(self, package_dir):
        """Test forwarding a function without arguments."""
        unit = SourceFileAttributes(
            "a.cpp",
            (Attribute(EXPORT_ATTRIBUTE, (), HELPER),),
            interfaces=frozenset({INTERFACE_CPP}),
        )
        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")
        run(generator, [unit])

        assert "static int(*p_helper)() = " in generator.code
        assert "return p_helper();" in generator.code

    def test_hidden_exports_skipped(self, package_dir):
        """Test exports aliased with a leading dot are not forwarded."""
        unit = SourceFileAttributes(
            "a.cpp",
            (
                Attribute(EXPORT_ATTRIBUTE, (Param(".internal"),), HELPER),
                Attribute(EXPORT_ATTRIBUTE, (Param("sum"),), ADD),
            ),
            interfaces=frozenset({INTERFACE_R, INTERFACE_CPP}),
        )
        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")
        run(generator, [unit])

        assert ".internal" not in generator.code
        assert "inline int sum(int a, int b)" in generator.code

    def test_units_without_cpp_interface_ignored(self, package_dir, sum_unit, helper_unit):
        """Test only cpp-interface units contribute."""
        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")
        run(generator, [helper_unit, sum_unit])

        assert "helper" not in generator.code
        assert generator.has_cpp_interface

    def test_removed_without_cpp_interface(self, package_dir, helper_unit):
        """Test the header is deleted when no unit declares cpp."""
        include_dir = package_dir / "inst" / "include"
        include_dir.mkdir(parents=True)
        target = include_dir / "mypkg.hpp"
        target.write_text(CPP_HEADER + "namespace mypkg {\n}\n")

        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")
        assert not run(generator, [helper_unit])
        assert not target.exists()

    def test_not_created_without_cpp_interface(self, package_dir, helper_unit):
        """Test nothing is written when the header never existed."""
        generator = CrossModuleShimGenerator(str(package_dir), "mypkg")

        assert not run(generator, [helper_unit])
        assert not (package_dir / "inst").exists()


class TestHostLoaderGenerator:
    """Test the host loader script."""

    def test_loader_lists_all_exports(self, package_dir, sum_unit, helper_unit):
        """Test aliases from every host-interface unit, in order."""
        generator = HostLoaderGenerator(str(package_dir))

        assert run(generator, [sum_unit, helper_unit], ["#include <Rcpp.h>"])
        assert generator.exports == ["sum", "helper"]
        assert read(generator.target_file) == (
            R_HEADER
            + 'Rcpp::loadModule("RcppExports", what = c("sum",\n'
            + " " * 41 + '"helper"))\n'
        )

    def test_no_exports(self, package_dir):
        """Test the explicit empty loader form."""
        generator = HostLoaderGenerator(str(package_dir))
        run(generator, [])

        assert generator.code == 'Rcpp::loadModule("RcppExports", what = character())\n'

    def test_documentation_placeholders(self, package_dir):
        """Test documented exports get their comments and a placeholder."""
        unit = SourceFileAttributes("a.cpp", (
            Attribute(EXPORT_ATTRIBUTE, (Param("sum"),), ADD,
                      roxygen=("#' Add two numbers", "#' @export")),
            Attribute(EXPORT_ATTRIBUTE, (), HELPER),
        ))
        generator = HostLoaderGenerator(str(package_dir))
        run(generator, [unit])

        assert generator.code == (
            "\n"
            "#' Add two numbers\n"
            "#' @export\n"
            "sum<- function(a, b) {}\n"
            "\n"
            'Rcpp::loadModule("RcppExports", what = c("sum",\n'
            + " " * 41 + '"helper"))\n'
        )

    def test_units_without_r_interface_ignored(self, package_dir, helper_unit):
        """Test cpp-only units are not loaded from the host."""
        unit = SourceFileAttributes(
            "a.cpp",
            (Attribute(EXPORT_ATTRIBUTE, (Param("sum"),), ADD, roxygen=("#' doc",)),),
            interfaces=frozenset({INTERFACE_CPP}),
        )
        generator = HostLoaderGenerator(str(package_dir))
        run(generator, [unit, helper_unit])

        assert generator.exports == ["helper"]
        assert "#' doc" not in generator.code

    def test_commit_ignores_preamble(self, package_dir, helper_unit):
        """Test includes and prototypes never reach the host script."""
        generator = HostLoaderGenerator(str(package_dir))
        run(generator, [helper_unit], ["#include <Rcpp.h>"], ["int helper()"])

        assert "#include" not in read(generator.target_file)


class TestFormatPreamble:
    """Test preamble formatting."""

    def test_groups(self):
        """Test each group ends with a blank line."""
        assert format_preamble(["#include <a.h>"], ["int f()"]) == "#include <a.h>\n\nint f();\n\n"

    def test_empty(self):
        """Test empty groups are omitted."""
        assert format_preamble([], []) == ""
        assert format_preamble([], ["int f()"]) == "int f();\n\n"
