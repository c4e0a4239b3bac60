"""
Means of death recognised in Quake III kill lines.

The trailing token of every ``Kill:`` line names the cause of death.
Only the tokens of the stock game are accepted; anything else means the
log format drifted and is rejected.
"""

from enum import Enum
from typing import Optional

from ..errors import UnknownMeansOfDeathError


class MeansOfDeath(Enum):
    """Closed set of death-cause tokens written by the game server."""

    MOD_UNKNOWN = "MOD_UNKNOWN"
    MOD_SHOTGUN = "MOD_SHOTGUN"
    MOD_GAUNTLET = "MOD_GAUNTLET"
    MOD_MACHINEGUN = "MOD_MACHINEGUN"
    MOD_GRENADE = "MOD_GRENADE"
    MOD_GRENADE_SPLASH = "MOD_GRENADE_SPLASH"
    MOD_ROCKET = "MOD_ROCKET"
    MOD_ROCKET_SPLASH = "MOD_ROCKET_SPLASH"
    MOD_PLASMA = "MOD_PLASMA"
    MOD_PLASMA_SPLASH = "MOD_PLASMA_SPLASH"
    MOD_RAILGUN = "MOD_RAILGUN"
    MOD_LIGHTNING = "MOD_LIGHTNING"
    MOD_BFG = "MOD_BFG"
    MOD_BFG_SPLASH = "MOD_BFG_SPLASH"
    MOD_WATER = "MOD_WATER"
    MOD_SLIME = "MOD_SLIME"
    MOD_LAVA = "MOD_LAVA"
    MOD_CRUSH = "MOD_CRUSH"
    MOD_TELEFRAG = "MOD_TELEFRAG"
    MOD_FALLING = "MOD_FALLING"
    MOD_SUICIDE = "MOD_SUICIDE"
    MOD_TARGET_LASER = "MOD_TARGET_LASER"
    MOD_TRIGGER_HURT = "MOD_TRIGGER_HURT"
    MOD_NAIL = "MOD_NAIL"
    MOD_CHAINGUN = "MOD_CHAINGUN"
    MOD_PROXIMITY_MINE = "MOD_PROXIMITY_MINE"
    MOD_KAMIKAZE = "MOD_KAMIKAZE"
    MOD_JUICED = "MOD_JUICED"
    MOD_GRAPPLE = "MOD_GRAPPLE"

    @classmethod
    def from_token(cls, token: str) -> Optional["MeansOfDeath"]:
        """Return the matching member, or None for an unrecognised token."""
        try:
            return cls(token)
        except ValueError:
            return None


def is_valid_death_cause(token: str) -> bool:
    return MeansOfDeath.from_token(token) is not None


def validate_death_cause(token: str, line: str = "") -> MeansOfDeath:
    """
    Gate a death-cause token through the enumeration.

    Args:
        token: The trailing token of a kill line
        line: Original line, attached to the error for context

    Returns:
        The matching MeansOfDeath member

    Raises:
        UnknownMeansOfDeathError: If the token is not recognised
    """
    means = MeansOfDeath.from_token(token)
    if means is None:
        raise UnknownMeansOfDeathError(
            f"Mean '{token}' not recognized as a valid means of death", line=line)
    return means
