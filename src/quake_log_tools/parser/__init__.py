"""
Quake III Log Parser

This package turns raw game log lines into structured match records:
line classification, field extraction, means-of-death validation and
the match accumulator state machine.
"""

from .accumulator import Match, MatchAccumulator, MatchData, ParseSummary, parse_log, parse_matches
from .classifier import LineKind, classify_line
from .grammar import ExtractionStrategy, KillRecord, parse_kill_line
from .means_of_death import MeansOfDeath, is_valid_death_cause, validate_death_cause

__all__ = [
    'ExtractionStrategy',
    'KillRecord',
    'LineKind',
    'Match',
    'MatchAccumulator',
    'MatchData',
    'MeansOfDeath',
    'ParseSummary',
    'classify_line',
    'is_valid_death_cause',
    'parse_kill_line',
    'parse_log',
    'parse_matches',
    'validate_death_cause',
]
