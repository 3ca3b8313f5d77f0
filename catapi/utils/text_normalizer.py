"""Temperament string tokenization.

TheCatAPI reports a breed's temperament as one free-text string such as
``"Active, Energetic, Independent"``.  These helpers turn one or more such
strings into the individual tag names used by the tag resolver.

Tokens are trimmed but otherwise left alone: case is preserved, so
``"Calm"`` and ``"calm"`` are distinct tag names.
"""

from collections.abc import Iterable, Iterator

TEMPERAMENT_SEPARATOR = ","


def iter_temperament_tokens(raw_temperaments: Iterable[str]) -> Iterator[str]:
    """Yield trimmed, non-empty tokens from each raw temperament string in order.

    Example:
        ``["Playful, Friendly", " , Calm ,, "]`` yields
        ``"Playful"``, ``"Friendly"``, ``"Calm"``.
    """
    for raw in raw_temperaments:
        if not raw:
            continue
        for part in raw.split(TEMPERAMENT_SEPARATOR):
            token = part.strip()
            if token:
                yield token
