"""
Attribute parser for annotated native source files.

Recognises line-oriented attributes of the form::

    //' Documentation line attached to the next attribute (as #')
    // [[Rcpp::export(alias)]]
    int add(int a, int b) { ... }

    // [[Rcpp::depends(pkgA, pkgB)]]
    // [[Rcpp::interfaces(r, cpp)]]

Export attributes bind to the function declaration that follows them.
The parser is a pure function of the file contents.
"""

import re
from typing import List, Optional, Protocol, Tuple

from .model import (
    Argument,
    Attribute,
    DEPENDS_ATTRIBUTE,
    EXPORT_ATTRIBUTE,
    Function,
    INTERFACE_CPP,
    INTERFACE_R,
    INTERFACES_ATTRIBUTE,
    Param,
    SourceFileAttributes,
)
from ..utils.exceptions import FileIOError, ParseError, SourceNotFoundError
from ..utils.fileinfo import FileInfo
from ..utils.logging import get_logger

logger = get_logger(__name__)

ATTRIBUTE_NAMESPACE = "Rcpp::"
KNOWN_ATTRIBUTES = (EXPORT_ATTRIBUTE, DEPENDS_ATTRIBUTE, INTERFACES_ATTRIBUTE)
KNOWN_INTERFACES = (INTERFACE_R, INTERFACE_CPP)

_ATTRIBUTE_START = re.compile(r'^\s*//\s*\[\[(?P<body>.*)$')
_ATTRIBUTE_BODY = re.compile(
    r'^\s*(?P<name>[A-Za-z_]\w*)\s*(?:\((?P<params>.*)\))?\s*\]\]\s*$'
)
_ROXYGEN_LINE = re.compile(r"^\s*//'")
_COMMENT_LINE = re.compile(r'^\s*//')
_TRAILING_IDENTIFIER = re.compile(r'^(?P<head>.*?)(?P<name>[A-Za-z_]\w*)\s*$', re.DOTALL)

_OPENERS = {'(': ')', '<': '>', '[': ']', '{': '}'}
_CLOSERS = {v: k for k, v in _OPENERS.items()}


class SourceParser(Protocol):
    """Anything that turns a source path into its parsed attributes."""

    def parse(self, path: str) -> SourceFileAttributes:
        ...


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """
    Split ``text`` on ``separator`` outside of brackets and string literals.

    Raises:
        ValueError: If the brackets in ``text`` are unbalanced
    """
    parts = []
    stack = []
    current = []
    quote = None

    for char in text:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
            continue
        if char in ('"', "'"):
            quote = char
        elif char in _OPENERS:
            stack.append(char)
        elif char in _CLOSERS:
            if not stack or stack[-1] != _CLOSERS[char]:
                raise ValueError(f"unbalanced '{char}'")
            stack.pop()
        elif char == separator and not stack:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)

    if stack or quote:
        raise ValueError(f"unbalanced '{quote or stack[-1]}'")

    parts.append("".join(current))
    return parts


def _normalize_type(text: str) -> str:
    return " ".join(text.split())


class AttributesParser:
    """
    Default source parser.

    Instances are stateless; :meth:`parse` may be called repeatedly.
    """

    def parse(self, path: str) -> SourceFileAttributes:
        """
        Parse the attributes of a source file.

        Args:
            path: Path to the native source file

        Returns:
            Parsed attributes in declaration order

        Raises:
            SourceNotFoundError: If ``path`` does not exist
            FileIOError: If ``path`` cannot be read
            ParseError: On malformed attribute syntax
        """
        path = str(path)
        if not FileInfo(path).exists:
            raise SourceNotFoundError(path)

        try:
            with open(path, 'r', encoding='utf-8') as f:
                text = f.read()
        except OSError as e:
            raise FileIOError.from_os_error(path, e) from e
        except UnicodeDecodeError as e:
            raise FileIOError(path, reason=f"not valid UTF-8 at byte {e.start}") from e

        return self.parse_text(text, path)

    def parse_text(self, text: str, path: str = "<string>") -> SourceFileAttributes:
        """Parse attributes from already-loaded source text."""
        lines = text.splitlines()
        attributes: List[Attribute] = []
        interfaces = set()
        interfaces_declared = False
        prototypes: List[str] = []
        roxygen: List[str] = []

        for index, line in enumerate(lines):
            if _ROXYGEN_LINE.match(line):
                # host documentation comments use '#' in place of '//'
                roxygen.append("#" + line.strip()[2:])
                continue

            match = _ATTRIBUTE_START.match(line)
            if match is None or not match.group('body').lstrip().startswith(ATTRIBUTE_NAMESPACE):
                if line.strip():
                    roxygen = []
                continue

            name, params = self._parse_attribute(match.group('body'), path, index + 1)
            function = Function.empty()

            if name == EXPORT_ATTRIBUTE:
                function = self._parse_function(lines, index + 1, path)
                prototypes.append(function.signature())
            elif name == INTERFACES_ATTRIBUTE:
                interfaces_declared = True
                for param in params:
                    if param.name not in KNOWN_INTERFACES:
                        raise ParseError(
                            f"Unrecognized interface '{param.name}'", path, index + 1
                        )
                    interfaces.add(param.name)
            elif name not in KNOWN_ATTRIBUTES:
                logger.warning(f"{path}:{index + 1}: unrecognized attribute '{name}'")

            attributes.append(Attribute(
                name=name,
                params=params,
                function=function,
                roxygen=tuple(roxygen),
            ))
            roxygen = []

        if not interfaces_declared:
            interfaces.add(INTERFACE_R)

        return SourceFileAttributes(
            source_file=path,
            attributes=tuple(attributes),
            interfaces=frozenset(interfaces),
            prototypes=tuple(prototypes),
        )

    def _parse_attribute(self, body: str, path: str, line: int) -> Tuple[str, Tuple[Param, ...]]:
        body = body.lstrip()[len(ATTRIBUTE_NAMESPACE):]
        match = _ATTRIBUTE_BODY.match(body)
        if match is None:
            raise ParseError(f"Malformed attribute '[[{ATTRIBUTE_NAMESPACE}{body.strip()}'", path, line)

        params_text = match.group('params')
        if params_text is None or not params_text.strip():
            return match.group('name'), ()

        try:
            items = split_top_level(params_text)
        except ValueError as e:
            raise ParseError(f"Malformed attribute parameters: {e}", path, line) from e

        params = []
        for item in items:
            param_name, _, value = item.partition('=')
            param_name = param_name.strip()
            if not param_name:
                raise ParseError("Empty attribute parameter", path, line)
            params.append(Param(param_name, value.strip().strip('"')))
        return match.group('name'), tuple(params)

    def _parse_function(self, lines: List[str], start: int, path: str) -> Function:
        """Parse the declaration following an export attribute."""
        collected = []
        first_line: Optional[int] = None

        for index in range(start, len(lines)):
            line = lines[index]
            if first_line is None and (not line.strip() or _COMMENT_LINE.match(line)):
                continue
            if first_line is None:
                first_line = index + 1

            end = min((pos for pos in (line.find('{'), line.find(';')) if pos >= 0), default=-1)
            if end >= 0:
                collected.append(line[:end])
                return self._parse_signature(" ".join(collected), path, first_line)
            collected.append(line)

        raise ParseError("No function found for export attribute", path, start)

    def _parse_signature(self, text: str, path: str, line: int) -> Function:
        open_paren = text.find('(')
        close_paren = text.rfind(')')
        if open_paren < 0 or close_paren < open_paren:
            raise ParseError(f"Invalid function declaration '{text.strip()}'", path, line)

        head = _TRAILING_IDENTIFIER.match(text[:open_paren])
        if head is None or not head.group('head').strip():
            raise ParseError(f"Function declaration lacks a return type: '{text.strip()}'", path, line)

        try:
            raw_args = split_top_level(text[open_paren + 1:close_paren])
        except ValueError as e:
            raise ParseError(f"Malformed argument list: {e}", path, line) from e

        arguments = []
        for raw in raw_args:
            raw = raw.strip()
            if not raw or (raw == "void" and len(raw_args) == 1):
                continue
            declaration, has_default, default = raw.partition('=')
            match = _TRAILING_IDENTIFIER.match(declaration)
            if match is None or not match.group('head').strip():
                raise ParseError(f"Argument '{raw}' has no type", path, line)
            arguments.append(Argument(
                name=match.group('name'),
                type=_normalize_type(match.group('head')),
                default_value=default.strip() if has_default else None,
            ))

        return Function(
            name=head.group('name'),
            type=_normalize_type(head.group('head')),
            arguments=tuple(arguments),
        )


def parse_source_file(path: str) -> SourceFileAttributes:
    """Parse ``path`` with the default parser."""
    return AttributesParser().parse(path)
