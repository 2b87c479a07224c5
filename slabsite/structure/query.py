"""
slabsite/structure/query.py

Parse a free-text surface query such as "Au(111)" into an element symbol and
a three-digit Miller index.

Parsing never fails: a query without a leading element symbol falls back to
DEFAULT_ELEMENT, and a query without a parenthesised index falls back to 111.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from slabsite.elements import DEFAULT_ELEMENT

DEFAULT_MILLER: str = "111"

# Capital letter plus optional lowercase letter, anchored at the start
_ELEMENT_RE = re.compile(r"^([A-Z][a-z]?)")

# "(111)" and the spaced form "(1 1 1)"
_MILLER_RE = re.compile(r"\(\s*(\d)\s?(\d)\s?(\d)\s*\)")


class SurfaceQuery(NamedTuple):
    element: str
    miller: str          # bare digits, e.g. "111"
    element_matched: bool
    miller_matched: bool

    @property
    def miller_index(self) -> str:
        """Display form, e.g. "(111)"."""
        return f"({self.miller})"


def parse_query(query: str | None) -> SurfaceQuery:
    """
    Extract the element symbol and Miller index from a query string.

    Examples
    --------
    >>> parse_query("Au(111)")
    SurfaceQuery(element='Au', miller='111', element_matched=True, miller_matched=True)
    >>> parse_query("garbage").element
    'Cu'
    """
    text = (query or "").strip()

    m_elem = _ELEMENT_RE.match(text)
    m_face = _MILLER_RE.search(text)

    element = m_elem.group(1) if m_elem else DEFAULT_ELEMENT
    miller = "".join(m_face.groups()) if m_face else DEFAULT_MILLER

    return SurfaceQuery(
        element=element,
        miller=miller,
        element_matched=m_elem is not None,
        miller_matched=m_face is not None,
    )
