"""
Runtime support for one-off builds: build contexts and their cache.
"""

from .dynlib import SourceDynlib, Platform, default_dynlib_ext
from .caching import DynlibCache, code_fingerprint, resolve_build_context

__all__ = [
    'SourceDynlib',
    'Platform',
    'default_dynlib_ext',
    'DynlibCache',
    'code_fingerprint',
    'resolve_build_context',
]
