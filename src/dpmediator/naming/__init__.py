"""Attribute-name resolution.

This subpackage reconciles caller-facing attribute names with the names a
security policy governs.  It provides:

* **qualify** / **qualify_all** -- left-pad partial names to the canonical
  ``collection/group/attribute`` form.
* **PatternCompiler** / **compile_pattern** -- wildcard names to anchored,
  cached matchers.
* **build_candidates** -- concrete governed names reachable under a request.
* **NameResolver** -- requested names to governed names, with in-place
  fallback for unmatched wildcards.
* **resolve_protected_name** -- one wildcarded protected name back to a
  concrete caller-facing name.
"""
from __future__ import annotations

from dpmediator.naming.candidates import build_candidates
from dpmediator.naming.patterns import PatternCompiler, compile_pattern
from dpmediator.naming.qualifier import (
    has_leaf_wildcard,
    is_wildcarded,
    qualify,
    qualify_all,
    require_concrete_leaves,
    split_name,
)
from dpmediator.naming.resolver import Expansion, NameResolver, resolve_names
from dpmediator.naming.reverse import resolve_protected_name, strip_provider_prefix

__all__ = [
    "qualify",
    "qualify_all",
    "split_name",
    "is_wildcarded",
    "has_leaf_wildcard",
    "require_concrete_leaves",
    "PatternCompiler",
    "compile_pattern",
    "build_candidates",
    "NameResolver",
    "Expansion",
    "resolve_names",
    "resolve_protected_name",
    "strip_provider_prefix",
]
