"""
Search package - Query scoring and ranking.

Scores typed text against application names and orders the entry set
for display.
"""

from .ranker import fuzzy_match_score, rank

__all__ = ["fuzzy_match_score", "rank"]
