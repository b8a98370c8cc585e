"""Name comparators.

Individual names score as the better of two methods:

- weighted fields: last 0.5, first 0.4, other 0.1 over fields present on
  both sides;
- word permutation: every word of every field matched in free order, for
  names whose parts landed in different fields ("SMITH JOHN" vs
  "JOHN SMITH").

Household and identifier names compare their single string. Names of
different variants compare their display strings.
"""
from __future__ import annotations

from itertools import permutations

from party_linkage.comparison.weighted import (
    CalculatorKind,
    ComparisonContext,
    ScoreOrDetail,
    WeightedComponent,
    score_of,
    single_component,
    weighted_result,
)
from party_linkage.config import PermutationSettings
from party_linkage.models.names import HouseholdName, IdentifierName, IndividualName
from party_linkage.utils.normalize import normalize_text, split_words, strip_punctuation
from party_linkage.utils.similarity import round_score, term_similarity

NAME_KINDS = frozenset(
    {
        CalculatorKind.INDIVIDUAL_NAME,
        CalculatorKind.HOUSEHOLD_NAME,
        CalculatorKind.IDENTIFIER_NAME,
    }
)

AnyName = IndividualName | HouseholdName | IdentifierName


# =============================================================================
# Permutation matching
# =============================================================================


def _field_words(name: IndividualName) -> list[str]:
    return [
        f.strip()
        for f in (name.first_name, name.last_name, name.other_names)
        if f and f.strip()
    ]


def _expand(words: list[str]) -> list[str]:
    """Split multi-word fields (dropping 1-char fragments), strip punctuation."""
    expanded: list[str] = []
    for word in words:
        parts = split_words(word)
        if len(parts) > 1:
            expanded.extend(p for p in parts if len(p) > 1)
        else:
            expanded.append(word)
    cleaned = (strip_punctuation(w) for w in expanded)
    return [w for w in cleaned if w]


def _best_assignment(smaller: list[str], larger: list[str]) -> float:
    """Highest mean similarity over injective maps of smaller into larger."""
    matrix = [[term_similarity(s, l) for l in larger] for s in smaller]
    best = 0.0
    for chosen in permutations(range(len(larger)), len(smaller)):
        total = sum(matrix[i][j] for i, j in enumerate(chosen))
        if total > best:
            best = total
    return best / len(smaller)


def permutation_score(
    a: IndividualName, b: IndividualName, settings: PermutationSettings | None = None
) -> float:
    """Free-order word matching between two individual names.

    Initials get special handling: when each side has exactly one short
    word they are scored against each other at ``short_word_weight``; a
    short word on only one side is dropped; two or more short words on
    either side disable the special case.

    Returns 0.0 without permuting when either side has more than
    ``max_words`` words.
    """
    settings = settings or PermutationSettings()
    words_a = _field_words(a)
    words_b = _field_words(b)
    limit = settings.short_word_max_length

    short_a = [w for w in words_a if len(w) <= limit]
    short_b = [w for w in words_b if len(w) <= limit]
    short_score: float | None = None
    if len(short_a) < 2 and len(short_b) < 2:
        if len(short_a) == 1 and len(short_b) == 1:
            short_score = term_similarity(
                strip_punctuation(short_a[0]), strip_punctuation(short_b[0])
            )
        words_a = [w for w in words_a if len(w) > limit]
        words_b = [w for w in words_b if len(w) > limit]

    words_a = _expand(words_a)
    words_b = _expand(words_b)
    if len(words_a) > settings.max_words or len(words_b) > settings.max_words:
        return 0.0

    main: float | None
    if not words_a and not words_b:
        main = None
    elif not words_a or not words_b:
        main = 0.0
    else:
        smaller, larger = sorted((words_a, words_b), key=len)
        main = _best_assignment(smaller, larger)
        if len(smaller) != len(larger):
            main *= 1 - (1 - len(smaller) / len(larger)) ** settings.haircut_exponent

    if short_score is None:
        total = main or 0.0
    elif main is None:
        total = short_score
    else:
        w = settings.short_word_weight
        total = w * short_score + (1 - w) * main

    return round_score(max(0.0, total - settings.flat_penalty))


# =============================================================================
# Calculators
# =============================================================================


def _present(value: str) -> bool:
    return bool(value and value.strip())


def _field_similarity(a: str, b: str) -> float | None:
    if not (_present(a) and _present(b)):
        return None
    return term_similarity(normalize_text(a), normalize_text(b))


def compare_individual_names(
    a: IndividualName,
    b: IndividualName,
    context: ComparisonContext,
    *,
    detailed: bool = False,
) -> ScoreOrDetail:
    weights = context.settings.individual_name
    components = [
        WeightedComponent(
            "lastName", weights.last_name,
            _field_similarity(a.last_name, b.last_name), a.last_name, b.last_name,
        ),
        WeightedComponent(
            "firstName", weights.first_name,
            _field_similarity(a.first_name, b.first_name), a.first_name, b.first_name,
        ),
        WeightedComponent(
            "otherNames", weights.other_names,
            _field_similarity(a.other_names, b.other_names), a.other_names, b.other_names,
        ),
    ]
    has_fields = any(c.similarity is not None for c in components)
    weighted = weighted_result(CalculatorKind.INDIVIDUAL_NAME.value, components, detailed=detailed)
    weighted_score = score_of(weighted) if has_fields else None
    perm = permutation_score(a, b, context.settings.permutation)

    if weighted_score is not None and weighted_score >= perm:
        if isinstance(weighted, float):
            return weighted
        weighted.notes.update(
            method="weighted", weighted_score=weighted_score, permutation_score=perm
        )
        return weighted

    return single_component(
        CalculatorKind.INDIVIDUAL_NAME.value,
        "wordPermutation",
        perm,
        detailed=detailed,
        base_value=a.complete_name,
        target_value=b.complete_name,
        notes={
            "method": "permutation",
            "weighted_score": weighted_score,
            "permutation_score": perm,
        },
    )


def compare_household_names(
    a: HouseholdName,
    b: HouseholdName,
    context: ComparisonContext,
    *,
    detailed: bool = False,
) -> ScoreOrDetail:
    return single_component(
        CalculatorKind.HOUSEHOLD_NAME.value,
        "fullName",
        term_similarity(a.display_name, b.display_name),
        detailed=detailed,
        base_value=a.full_name,
        target_value=b.full_name,
    )


def compare_identifier_names(
    a: IdentifierName,
    b: IdentifierName,
    context: ComparisonContext,
    *,
    detailed: bool = False,
) -> ScoreOrDetail:
    return single_component(
        CalculatorKind.IDENTIFIER_NAME.value,
        "term",
        term_similarity(a.display_name, b.display_name),
        detailed=detailed,
        base_value=a.term,
        target_value=b.term,
    )


def compare_names(
    a: AnyName, b: AnyName, context: ComparisonContext, *, detailed: bool = False
) -> ScoreOrDetail:
    """Compare any two names, across variants when needed."""
    if isinstance(a, IndividualName) and isinstance(b, IndividualName):
        return compare_individual_names(a, b, context, detailed=detailed)
    if isinstance(a, HouseholdName) and isinstance(b, HouseholdName):
        return compare_household_names(a, b, context, detailed=detailed)
    if isinstance(a, IdentifierName) and isinstance(b, IdentifierName):
        return compare_identifier_names(a, b, context, detailed=detailed)
    return single_component(
        "crossTypeNameComparison",
        "displayName",
        term_similarity(a.display_name, b.display_name),
        detailed=detailed,
        base_value=a.display_name,
        target_value=b.display_name,
        notes={"base_kind": a.kind, "target_kind": b.kind},
    )


def name_similarity(
    a: AnyName | None, b: AnyName | None, context: ComparisonContext
) -> float | None:
    """Bare name score, or None when either side has no usable name."""
    if a is None or b is None or a.is_empty or b.is_empty:
        return None
    return score_of(compare_names(a, b, context))
