"""Set-based similarity helpers shared by alignment and graph inference."""

from collections.abc import Iterable


def jaccard_similarity(set1: set[str], set2: set[str]) -> float:
    """Compute exact Jaccard similarity between two sets.

    Jaccard = |A ∩ B| / |A ∪ B|

    Args:
        set1: First set of strings.
        set2: Second set of strings.

    Returns:
        Jaccard similarity between 0.0 and 1.0.
    """
    if not set1 and not set2:
        return 1.0
    if not set1 or not set2:
        return 0.0

    intersection = len(set1 & set2)
    union = len(set1 | set2)

    return intersection / union


def name_similarity(name1: str, name2: str) -> float:
    """Jaccard similarity of the case-folded character sets of two names."""
    return jaccard_similarity(set(name1.lower()), set(name2.lower()))


def overlap_similarity(items1: Iterable[str], items2: Iterable[str]) -> float:
    """Jaccard similarity of two collections treated as sets."""
    return jaccard_similarity(set(items1), set(items2))
