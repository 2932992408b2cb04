"""Head/tails breaks classification.

Natural breaks for heavy-tailed score distributions: split at the mean,
keep the head (scores above the mean) and repeat on the head until it stops
shrinking. What remains is the most extreme subset.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable


def head_tails_breaks[T](score: Callable[[T], float], items: Iterable[T]) -> list[T]:
    """Return the recursively refined head of `items`.

    Args:
        score: Scoring function
        items: Collection to classify

    Returns:
        Items of the final head group, in their original order. When all
        scores are equal there is no head and the whole collection is kept.
    """
    current = list(items)
    while len(current) > 1:
        scores = [score(item) for item in current]
        mean = sum(scores) / len(scores)
        head = [item for item, s in zip(current, scores, strict=True) if s > mean]
        if not head or len(head) >= len(current):
            break
        current = head
    return current
