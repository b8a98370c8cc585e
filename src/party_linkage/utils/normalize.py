"""Normalization helpers shared by the comparators.

Provides punctuation stripping, whitespace folding and the PO Box
recognizers used by address classification.
"""

from __future__ import annotations

import re

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")

PO_BOX_PATTERNS = (
    re.compile(r"^P\.?\s*O\.?\s*BOX\s+[A-Z0-9]+", re.IGNORECASE),
    re.compile(r"^POST\s*OFFICE\s*BOX\s+[A-Z0-9]+", re.IGNORECASE),
    re.compile(r"^PO\s*BO\s*X\s*[A-Z0-9]+", re.IGNORECASE),
    re.compile(r"^BOX\s+[A-Z0-9]+", re.IGNORECASE),
)

# Secondary unit types that on their own mark a box address
_PO_BOX_UNIT_TYPES = frozenset({"PO BOX", "P O BOX", "POBOX", "BOX", "POST OFFICE BOX"})


def strip_punctuation(text: str) -> str:
    """Remove punctuation, keeping letters, digits, underscores and spaces.

    Examples:
        "Mary-Anne" -> "MaryAnne"
        "O'Brien" -> "OBrien"
    """
    return _PUNCTUATION.sub("", text)


def normalize_text(text: str | None) -> str:
    """Upper-case and collapse runs of whitespace.

    Examples:
        "  smith,  john " -> "SMITH, JOHN"
    """
    if not text:
        return ""
    return _WHITESPACE.sub(" ", text).strip().upper()


def looks_like_po_box(text: str | None) -> bool:
    """Whether a free-text address fragment is a PO Box designation."""
    if not text:
        return False
    candidate = text.strip()
    if any(pattern.match(candidate) for pattern in PO_BOX_PATTERNS):
        return True
    folded = normalize_text(strip_punctuation(candidate))
    return folded in _PO_BOX_UNIT_TYPES


def split_words(text: str | None) -> list[str]:
    """Split on whitespace, dropping empty fragments."""
    if not text:
        return []
    return [w for w in _WHITESPACE.split(text.strip()) if w]
