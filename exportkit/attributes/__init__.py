"""
Attribute model and parser.
"""

from .model import (
    Argument,
    Function,
    Param,
    Attribute,
    SourceFileAttributes,
    EXPORT_ATTRIBUTE,
    DEPENDS_ATTRIBUTE,
    INTERFACES_ATTRIBUTE,
    INTERFACE_R,
    INTERFACE_CPP,
    HIDDEN_PREFIX,
)
from .parser import AttributesParser, SourceParser, parse_source_file

__all__ = [
    'Argument',
    'Function',
    'Param',
    'Attribute',
    'SourceFileAttributes',
    'EXPORT_ATTRIBUTE',
    'DEPENDS_ATTRIBUTE',
    'INTERFACES_ATTRIBUTE',
    'INTERFACE_R',
    'INTERFACE_CPP',
    'HIDDEN_PREFIX',
    'AttributesParser',
    'SourceParser',
    'parse_source_file',
]
