"""Text utilities for the console line: prefix measurement and display width.

Provides case-sensitive and case-insensitive common-prefix lengths used by
completion, whitespace classification, grapheme segmentation for cursor
movement, and terminal width measurement for column alignment.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Grapheme segmentation
# ---------------------------------------------------------------------------


def graphemes(text: str) -> list[str]:
    """Split *text* into user-perceived characters (grapheme clusters)."""
    return list(grapheme.graphemes(text))


# ---------------------------------------------------------------------------
# Character classes
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
)


def is_whitespace_char(char: str) -> bool:
    """Return ``True`` if *char* is a whitespace character.

    The empty string (what lies past the end of the line) is not whitespace.
    """
    return char in (" ", "\t", "\n", "\r", "\f", "\v")


# ---------------------------------------------------------------------------
# Common prefixes
# ---------------------------------------------------------------------------


def longest_prefix_size(a: str, b: str) -> int:
    """Length of the longest common prefix of *a* and *b*."""
    n = min(len(a), len(b))
    i = 0
    while i < n and a[i] == b[i]:
        i += 1
    return i


def longest_iprefix_size(a: str, b: str) -> int:
    """Length of the longest common prefix of *a* and *b*, ignoring case."""
    n = min(len(a), len(b))
    i = 0
    while i < n and a[i].casefold() == b[i].casefold():
        i += 1
    return i


# ---------------------------------------------------------------------------
# Width
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # VS16, ZWJ sequences and skin tone modifiers render as wide emoji
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF:
            return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    ANSI escape sequences are ignored. Pure ASCII text takes a fast path;
    everything else is measured per grapheme cluster and cached.
    """
    if not text:
        return 0

    stripped = _STRIP_RE.sub("", text)
    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[stripped] = total
    return total
