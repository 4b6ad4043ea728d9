"""
Match Ranker - Ordered subsequence ("fuzzy") matching of app names.

A query matches a name when every query character appears in the name
in the same order, not necessarily contiguously. Matching is greedy
from the left and case-insensitive. The score is the number of matched
characters, so any match scores len(query); a miss scores 0 with no
partial credit.

Example:
    fuzzy_match_score("fx", "Firefox")  ->  2   (f at 0, x at 6)
    fuzzy_match_score("xf", "Firefox")  ->  0   (no f after the x)
"""

from typing import Sequence

from geekymenu.services.desktop_entry import Entry, sort_entries


def fuzzy_match_score(query: str, target: str) -> int:
    """
    Score a query against one candidate name.

    Args:
        query: Typed text (non-empty for meaningful results)
        target: Candidate name

    Returns:
        Number of matched characters, or 0 if query is not a subsequence
    """
    query = query.casefold()
    target = target.casefold()

    score = 0
    j = 0
    for c in query:
        found = False
        while j < len(target):
            if target[j] == c:
                score += 1
                found = True
                j += 1
                break
            j += 1
        if not found:
            return 0
    return score


def rank(entries: Sequence[Entry], query: str) -> list[Entry]:
    """
    Filter and order entries for a query.

    An empty query skips scoring and returns every entry alphabetically.
    Otherwise entries scoring 0 are dropped and the rest are sorted by
    score, highest first; equal scores keep their input order.
    """
    if query == "":
        return sort_entries(entries)

    scored = [(entry, fuzzy_match_score(query, entry.name)) for entry in entries]
    matched = [(entry, score) for entry, score in scored if score > 0]
    matched.sort(key=lambda pair: pair[1], reverse=True)
    return [entry for entry, _score in matched]
