"""
Cross-match player ranking.

Folds the per-match kill counts of every match into one list of
PlayerScore entries sorted by total kills.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

from .parser.accumulator import Match

logger = logging.getLogger(__name__)


@dataclass
class PlayerScore:
    """Total net kills of one player across all matches."""
    name: str
    kills: int


def reduce_ranking(matches: Iterable[Match]) -> List[PlayerScore]:
    """
    Build the global player ranking.

    Matches are folded in ascending id order and each match's kills in
    insertion order. A player keeps the position of their first
    appearance until the final stable sort, so ties stay in first-seen
    order.

    Args:
        matches: Parsed matches

    Returns:
        PlayerScore entries sorted by kills, highest first
    """
    ranking: List[PlayerScore] = []
    by_name: Dict[str, PlayerScore] = {}

    for match in sorted(matches, key=lambda m: m.id):
        for player, kills in match.data.kills.items():
            entry = by_name.get(player)
            if entry is None:
                entry = PlayerScore(name=player, kills=kills)
                by_name[player] = entry
                ranking.append(entry)
            else:
                entry.kills += kills

    ranking.sort(key=lambda score: score.kills, reverse=True)
    logger.debug(f"Ranked {len(ranking)} players")
    return ranking
