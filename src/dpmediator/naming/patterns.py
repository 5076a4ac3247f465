"""Wildcard pattern compilation for attribute names.

An attribute name containing ``*`` is turned into a regular expression:

* every regex metacharacter of the literal text is escaped;
* every ``*`` becomes ``[^/]*`` -- it matches any run of characters inside
  one segment but never crosses a ``/``;
* matching is always whole-string (``fullmatch``).

Compiled patterns are cached by input string.  The cache is keyed on the
exact name, so a changed name can never hit a stale entry.
"""
from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from dpmediator.core.types import WILDCARD

_ESCAPED_WILDCARD = re.escape(WILDCARD)
_SEGMENT_WILDCARD = "[^/]*"


def to_regex(name: str) -> str:
    """Return the regular-expression source for *name*."""
    return re.escape(name).replace(_ESCAPED_WILDCARD, _SEGMENT_WILDCARD)


# ---------------------------------------------------------------------------
# Compiled pattern cache (module-level)
# ---------------------------------------------------------------------------

@lru_cache(maxsize=1024)
def compile_pattern(name: str) -> re.Pattern[str]:
    """Compile and cache the matcher for *name*."""
    return re.compile(to_regex(name))


# ---------------------------------------------------------------------------
# PatternCompiler
# ---------------------------------------------------------------------------

class PatternCompiler:
    """Stateless front-end over the shared pattern cache."""

    def compile(self, name: str) -> re.Pattern[str]:
        return compile_pattern(name)

    def matches(self, pattern_name: str, candidate: str) -> bool:
        """Return ``True`` if *candidate* is matched by *pattern_name* as a whole."""
        return compile_pattern(pattern_name).fullmatch(candidate) is not None

    def filter(self, pattern_name: str, candidates: list[str]) -> list[str]:
        """Return the *candidates* matched by *pattern_name*, in order."""
        pattern = compile_pattern(pattern_name)
        return [c for c in candidates if pattern.fullmatch(c) is not None]

    # -- cache management ---------------------------------------------------

    @staticmethod
    def clear_cache() -> None:
        """Clear the compiled pattern cache."""
        compile_pattern.cache_clear()

    @staticmethod
    def cache_info() -> Any:
        """Return cache statistics."""
        return compile_pattern.cache_info()


# ---------------------------------------------------------------------------
# Shapes of wildcarded governed names
# ---------------------------------------------------------------------------

LEADING_TWO_WILDCARDS = re.compile(r"([^/*]*\*/[^/*]*\*/)([^/*]*)")
"""``<c>*/<g>*/leaf`` -- collection and group wildcarded, leaf concrete.

Group 1 is the wildcarded prefix (trailing ``/`` included), group 2 the leaf.
"""

LEADING_ONE_WILDCARD = re.compile(r"([^/*]*\*/)([^/*]*/[^/*]*)")
"""``<c>*/group/leaf`` -- only the collection wildcarded.

Group 1 is the wildcarded collection (trailing ``/`` included), group 2 the
concrete ``group/leaf`` remainder.
"""
