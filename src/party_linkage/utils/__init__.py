"""Party Linkage utilities."""

from .normalize import (
    PO_BOX_PATTERNS,
    looks_like_po_box,
    normalize_text,
    split_words,
    strip_punctuation,
)
from .similarity import (
    exact_similarity,
    round_score,
    term_similarity,
    weighted_levenshtein,
)

__all__ = [
    # Normalize utilities
    "PO_BOX_PATTERNS",
    "looks_like_po_box",
    "normalize_text",
    "split_words",
    "strip_punctuation",
    # Similarity primitives
    "exact_similarity",
    "round_score",
    "term_similarity",
    "weighted_levenshtein",
]
