"""
Line grammar for Quake III game logs.

Pulls player names, killers, victims and death-cause tokens out of raw
log lines. All textual anchors live here as precompiled patterns with
named groups so each one can be tested on its own.

Example lines:
    20:34 ClientUserinfoChanged: 2 n\\Isgalamido\\t\\0\\model\\xian/default
    20:54 Kill: 1022 2 22: <world> killed Isgalamido by MOD_TRIGGER_HURT
    22:06 Kill: 2 3 7: Isgalamido killed Mocinha by MOD_ROCKET_SPLASH

Two strategies are available for kill lines:
- POSITIONAL slices the name out of the line between its anchors.
- KNOWN_PLAYERS looks the name up in the set of players already
  announced by ClientUserinfoChanged lines of the current match.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..errors import EmptyPlayerNameError, MissingAnchorError, UnresolvedPlayerError
from .means_of_death import MeansOfDeath, validate_death_cause

# Literal anchors
PLAYER_NAME_START = "n\\"
PLAYER_NAME_END = "\\t\\"
WORLD_ACTOR = "<world>"
WORLD_KILL_MARKER = f"{WORLD_ACTOR} killed"
KILLED_KEYWORD = " killed"
BY_KEYWORD = " by "

# Precompiled patterns using named capture groups
PLAYER_INFO_PATTERN = re.compile(r'n\\(?P<player_name>.*?)\\t\\')
KILLER_PATTERN = re.compile(r'^(?:[^:]*:){3}(?P<killer>.*?) killed')
WORLD_VICTIM_PATTERN = re.compile(r'<world> killed (?P<victim>.*) by ')


class ExtractionStrategy(Enum):
    """How killer and victim names are pulled out of kill lines."""

    POSITIONAL = "positional"
    KNOWN_PLAYERS = "known_players"

    @classmethod
    def from_name(cls, name: str) -> "ExtractionStrategy":
        """
        Look up a strategy by its configuration name.

        Raises:
            ValueError: If the name is not a known strategy
        """
        try:
            return cls(name.strip().lower())
        except ValueError:
            valid = ", ".join(s.value for s in cls)
            raise ValueError(f"Unknown extraction strategy '{name}'. Valid strategies: {valid}")


@dataclass(frozen=True)
class KillRecord:
    """A fully parsed kill line, ready to be applied to a match."""
    actor: str
    delta: int
    means: MeansOfDeath
    world: bool = False


def extract_player_name(line: str) -> str:
    """
    Extract the player name from a ClientUserinfoChanged line.

    The name sits between the first ``n\\`` and the following ``\\t\\``.

    Raises:
        MissingAnchorError: If either anchor is missing
        EmptyPlayerNameError: If the name between the anchors is empty
    """
    match = PLAYER_INFO_PATTERN.search(line)
    if not match:
        if PLAYER_NAME_START not in line:
            raise MissingAnchorError("Player info line has no 'n\\' name anchor", line=line)
        raise MissingAnchorError("Player info line has no '\\t\\' anchor after the name", line=line)

    player_name = match.group('player_name')
    if not player_name:
        raise EmptyPlayerNameError("Player info line has an empty player name", line=line)
    return player_name


def is_world_kill(line: str) -> bool:
    """True when the kill was caused by the world rather than a player."""
    return WORLD_KILL_MARKER in line


def extract_world_victim(line: str) -> str:
    """
    Extract the victim of a world kill by position.

    The victim is the text between ``<world> killed `` and the last
    `` by `` of the line, so names containing "by" survive.

    Raises:
        MissingAnchorError: If the world marker or "by" is missing
        EmptyPlayerNameError: If the victim name is empty
    """
    if WORLD_KILL_MARKER not in line:
        raise MissingAnchorError(f"Kill line has no '{WORLD_KILL_MARKER}' marker", line=line)

    match = WORLD_VICTIM_PATTERN.search(line)
    if not match:
        raise MissingAnchorError("Kill line has no 'by' keyword after the victim", line=line)

    victim = match.group('victim')
    if not victim:
        raise EmptyPlayerNameError("World kill line has an empty victim name", line=line)
    return victim


def extract_killer(line: str) -> str:
    """
    Extract the killer of a player kill by position.

    The killer is the text between the third colon of the line and the
    first " killed", trimmed.

    Raises:
        MissingAnchorError: If "killed" or the third colon is missing
        EmptyPlayerNameError: If the killer name is empty
    """
    match = KILLER_PATTERN.search(line)
    if not match:
        if KILLED_KEYWORD not in line:
            raise MissingAnchorError("Kill line has no 'killed' keyword", line=line)
        raise MissingAnchorError("Kill line has no third colon before 'killed'", line=line)

    killer = match.group('killer').strip()
    if not killer:
        raise EmptyPlayerNameError("Kill line has an empty killer name", line=line)
    return killer


def _resolve_known_player(line: str, players: Iterable[str], template: str, role: str) -> str:
    # Longest name first: a shorter candidate can only match inside a longer one
    candidates = sorted((name for name in players if name and template.format(name=name) in line),
                        key=lambda name: (-len(name), name))
    if not candidates:
        raise UnresolvedPlayerError(f"No known player matches the {role} of the kill line", line=line)
    return candidates[0]


def resolve_world_victim(line: str, players: Iterable[str]) -> str:
    """
    Find the known player the world killed.

    Raises:
        UnresolvedPlayerError: If no known player matches
    """
    return _resolve_known_player(line, players, WORLD_KILL_MARKER + " {name} by", "victim")


def resolve_killer(line: str, players: Iterable[str]) -> str:
    """
    Find the known player who made a kill.

    Raises:
        UnresolvedPlayerError: If no known player matches
    """
    return _resolve_known_player(line, players, ": {name} killed ", "killer")


def extract_means_token(line: str) -> str:
    """Return the last whitespace-delimited token of a line (empty string if none)."""
    tokens = line.split()
    return tokens[-1] if tokens else ""


def parse_kill_line(line: str,
                    strategy: ExtractionStrategy = ExtractionStrategy.POSITIONAL,
                    players: Optional[Iterable[str]] = None) -> KillRecord:
    """
    Parse a kill line into a KillRecord without touching any match state.

    A world kill penalises the victim by one; a player kill credits the
    killer with one, self-kills included.

    Args:
        line: The raw kill line
        strategy: Name extraction strategy
        players: Players known in the current match (KNOWN_PLAYERS only)

    Returns:
        The parsed KillRecord

    Raises:
        LogParseError: If any extraction or validation stage fails
    """
    known = players if players is not None else ()
    world = is_world_kill(line)

    if world:
        if strategy is ExtractionStrategy.KNOWN_PLAYERS:
            actor = resolve_world_victim(line, known)
        else:
            actor = extract_world_victim(line)
        delta = -1
    else:
        if strategy is ExtractionStrategy.KNOWN_PLAYERS:
            actor = resolve_killer(line, known)
        else:
            actor = extract_killer(line)
        delta = 1

    means = validate_death_cause(extract_means_token(line), line=line)
    return KillRecord(actor=actor, delta=delta, means=means, world=world)
