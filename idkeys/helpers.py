"""Helper functions"""

import re
from collections.abc import Iterable

import Levenshtein

from .constants import HYBRID_SIGN, Rank

_RANKS = {rank.display_name: rank for rank in Rank}


def rank_of_string(s: str) -> Rank:
    try:
        return _RANKS[s]
    except KeyError:
        raise ValueError(f"Unknown rank: {s}") from None


def is_valid_rank(s: object) -> bool:
    return isinstance(s, str) and s in _RANKS


def suggest(word: str, candidates: Iterable[str], max_distance: int = 2) -> str | None:
    """Return the closest candidate to a misspelled word, if any is close enough."""
    best = None
    best_distance = max_distance + 1
    for candidate in candidates:
        distance = Levenshtein.distance(word.lower(), candidate)
        if distance < best_distance:
            best = candidate
            best_distance = distance
    return best


def suggest_rank(word: str) -> str | None:
    return suggest(word, _RANKS)


def capitalize(name: str) -> str:
    return name[:1].upper() + name[1:].lower()


def capitalize_generic_name(name: str) -> str:
    if name.startswith(HYBRID_SIGN):
        return HYBRID_SIGN + capitalize(name[1:])
    return capitalize(name)


def is_upper_case(name: str) -> bool:
    return name == name.upper()


def capitalize_authors(authors: str) -> str:
    """Turn "LINNAEUS, 1758" into "Linnaeus, 1758".

    Only words written entirely in capitals are changed, so "McLachlan" and
    initials stay as they are.

    """
    authors = re.sub(
        r"[^\x00-\x40\x5B-\x60\x7B-\x7F]+",
        lambda m: capitalize(m.group()) if is_upper_case(m.group()) else m.group(),
        authors,
    )
    return authors.replace(" Y ", " y ")


def count_lines(text: str) -> int:
    return text.count("\n")
