"""Term similarity primitives.

All comparators bottom out in a vowel-weighted edit distance: substituting
one vowel for another is cheap (spelling drift such as SMITH/SMYTH), a
consonant for a consonant costs a full edit, and mixed substitutions sit in
between.

Examples:
    term_similarity("SMITH", "smith") -> 1.0
    term_similarity("SMITH", "SMYTH") -> 0.9842105263
    term_similarity("", "") -> 1.0
    term_similarity("", "A") -> 0.0
"""
from __future__ import annotations

VOWELS = frozenset("aeiouy")

VOWEL_SUBSTITUTION_COST = (6 * 5) / (20 * 19)
CONSONANT_SUBSTITUTION_COST = 1.0
MIXED_SUBSTITUTION_COST = 12 / 19
INSERT_DELETE_COST = 1.0

PRECISION = 10


def round_score(value: float) -> float:
    """Round a score to the engine-wide precision."""
    return round(value, PRECISION)


def substitution_cost(a: str, b: str) -> float:
    """Cost of replacing character ``a`` with ``b`` (lower-case input)."""
    if a == b:
        return 0.0
    a_vowel = a in VOWELS
    b_vowel = b in VOWELS
    if a_vowel and b_vowel:
        return VOWEL_SUBSTITUTION_COST
    if not a_vowel and not b_vowel:
        return CONSONANT_SUBSTITUTION_COST
    return MIXED_SUBSTITUTION_COST


def weighted_levenshtein(a: str, b: str) -> float:
    """Edit distance with character-class dependent substitution costs.

    Case-insensitive. Uses a two-row dynamic program.
    """
    a = a.lower()
    b = b.lower()
    if not a:
        return float(len(b)) * INSERT_DELETE_COST
    if not b:
        return float(len(a)) * INSERT_DELETE_COST

    previous = [j * INSERT_DELETE_COST for j in range(len(b) + 1)]
    for i, ca in enumerate(a, start=1):
        current = [i * INSERT_DELETE_COST]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + INSERT_DELETE_COST,
                    current[j - 1] + INSERT_DELETE_COST,
                    previous[j - 1] + substitution_cost(ca, cb),
                )
            )
        previous = current
    return previous[-1]


def term_similarity(a: str | None, b: str | None) -> float:
    """Similarity in [0, 1] derived from :func:`weighted_levenshtein`.

    ``None`` is treated as the empty string.
    """
    a = a or ""
    b = b or ""
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0
    distance = weighted_levenshtein(a, b)
    longest = max(len(a), len(b))
    return round_score(min(1.0, max(0.0, 1.0 - distance / longest)))


def exact_similarity(a: str | None, b: str | None) -> float:
    """1.0 for case-insensitive equality after trimming, else 0.0."""
    return 1.0 if (a or "").strip().upper() == (b or "").strip().upper() else 0.0
