"""
Command-line interface.

``exportkit compile`` regenerates a package's exports artifacts and
``exportkit context`` prints the build context for a source file or a
snippet of inline code.
"""

import argparse
import json
import sys
from typing import List, Optional

import exportkit
from .pipeline import compile_attributes
from .runtime.caching import DynlibCache, resolve_build_context
from .utils.config import ExportKitConfig, get_config, set_config
from .utils.exceptions import ExportKitError
from .utils.logging import setup_logging


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exportkit",
        description="Generate exports artifacts from annotated native sources.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {exportkit.__version__}")
    parser.add_argument("--config", help="Configuration file (JSON or YAML)")
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ...)")

    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser("compile", help="Regenerate package exports")
    compile_parser.add_argument("package_dir", nargs="?", default=".", help="Package root directory")
    compile_parser.add_argument("--name", help="Package name (default: from DESCRIPTION)")
    compile_parser.add_argument("--include", action="append", dest="includes",
                                help="Include directive for generated native files (repeatable)")
    compile_parser.add_argument("-v", "--verbose", action="store_true", default=None,
                                help="Report the exports found in each file")

    context_parser = subparsers.add_parser("context", help="Print the build context as JSON")
    source = context_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("file", nargs="?", help="Source file")
    source.add_argument("--code", help="Inline source code")

    return parser


def _configure(args: argparse.Namespace) -> ExportKitConfig:
    config = ExportKitConfig(args.config) if args.config else get_config()
    set_config(config)

    log_file = config.logging.log_file if config.logging.enable_file_logging else None
    setup_logging(args.log_level or config.logging.level, log_file)
    return config


def run_compile(args: argparse.Namespace) -> int:
    changed = compile_attributes(
        args.package_dir,
        package_name=args.name,
        includes=args.includes,
        verbose=args.verbose,
    )
    print("Exports files updated" if changed else "Exports files already up to date")
    return 0


def run_context(args: argparse.Namespace, config: ExportKitConfig) -> int:
    dynlib, build_required = resolve_build_context(
        DynlibCache(),
        source_path=args.file,
        code=args.code,
        build_config=config.build,
    )
    print(json.dumps(dynlib.to_dict(build_required), indent=2))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the exportkit command."""
    parser = build_argument_parser()
    args = parser.parse_args(argv)
    if args.command == "context" and not (args.file or args.code):
        parser.error("context: a source file or non-empty --code is required")

    try:
        config = _configure(args)
        if args.command == "compile":
            return run_compile(args)
        return run_context(args, config)
    except ExportKitError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
