"""
Match accumulator for Quake III game logs.

Streams log lines once, in order, and folds them into a list of Match
records. The accumulator is either waiting for the first match
(``current is None``) or filling the most recently started match.

Kill and player-info lines that arrive before any InitGame line have no
match to attach to and are ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from ..errors import LogParseError, MatchLimitError
from .classifier import LineKind, classify_line
from .grammar import ExtractionStrategy, KillRecord, extract_player_name, parse_kill_line

logger = logging.getLogger(__name__)

# Largest match id a 32-bit signed counter can hold
MAX_MATCHES = 2 ** 31 - 1
LINE_SAMPLE_MAX_LENGTH = 200


@dataclass
class MatchData:
    """Running counters of a single match."""
    total_kills: int = 0
    players: Set[str] = field(default_factory=set)
    kills: Dict[str, int] = field(default_factory=dict)
    kills_by_means: Dict[str, int] = field(default_factory=dict)

    def apply_kill(self, record: KillRecord):
        """Apply a parsed kill line to the counters."""
        self.kills[record.actor] = self.kills.get(record.actor, 0) + record.delta
        token = record.means.value
        self.kills_by_means[token] = self.kills_by_means.get(token, 0) + 1
        self.total_kills += 1


@dataclass
class Match:
    """One game session, from its InitGame line to the next one."""
    id: int
    data: MatchData = field(default_factory=MatchData)

    @property
    def name(self) -> str:
        return f"game_{self.id}"


@dataclass
class ParseSummary:
    """Summary of a parse run including error reporting."""
    total_lines: int = 0
    matches: int = 0
    kill_lines: int = 0
    player_info_lines: int = 0
    ignored_lines: int = 0
    malformed_lines: int = 0
    malformed_samples: List[str] = field(default_factory=list)


class MatchAccumulator:
    """
    State machine that turns classified log lines into matches.

    In strict mode any malformed line raises and halts the run. In
    lenient mode the line is logged, counted in the summary and skipped
    without changing any counter.
    """

    def __init__(self, strict: bool = True,
                 strategy: ExtractionStrategy = ExtractionStrategy.POSITIONAL,
                 max_matches: int = MAX_MATCHES,
                 max_malformed_samples: int = 10):
        self.strict = strict
        self.strategy = strategy
        self.max_matches = max_matches
        self.max_malformed_samples = max_malformed_samples
        self.matches: List[Match] = []
        self.current: Optional[Match] = None
        self.summary = ParseSummary()

    def feed(self, line: str, line_number: int = 0):
        """
        Process one log line.

        Args:
            line: The raw line
            line_number: 1-based position in the log, used in error messages

        Raises:
            LogParseError: In strict mode, if the line is malformed
        """
        self.summary.total_lines += 1
        kind = classify_line(line)

        if kind is LineKind.OTHER:
            return

        try:
            if kind is LineKind.MATCH_START:
                self._start_match(line)
            elif self.current is None:
                self.summary.ignored_lines += 1
                logger.debug(f"Ignoring {kind.value} line {line_number} outside of a match")
            elif kind is LineKind.KILL:
                self._process_kill(line)
            elif kind is LineKind.PLAYER_INFO:
                self._process_player_info(line)
        except LogParseError as e:
            e.line_number = e.line_number or line_number
            # An overflow ends the run even in lenient mode
            if self.strict or isinstance(e, MatchLimitError):
                raise
            self._record_malformed(e, line, line_number)

    def feed_lines(self, content: str):
        """
        Process every line of an already-read log.

        Lines end at a newline only and a trailing carriage return is
        dropped. Other Unicode line breaks stay inside the line.
        """
        lines = content.split("\n")
        if lines[-1] == "":
            lines.pop()

        for line_number, line in enumerate(lines, 1):
            if line.endswith("\r"):
                line = line[:-1]
            self.feed(line, line_number)

    def _start_match(self, line: str):
        next_id = len(self.matches) + 1
        if next_id > self.max_matches:
            raise MatchLimitError(f"Match count exceeds the maximum of {self.max_matches}", line=line)

        self.current = Match(id=next_id)
        self.matches.append(self.current)
        self.summary.matches += 1
        logger.debug(f"Started {self.current.name}")

    def _process_player_info(self, line: str):
        player_name = extract_player_name(line)
        self.current.data.players.add(player_name)
        self.summary.player_info_lines += 1

    def _process_kill(self, line: str):
        record = parse_kill_line(line, self.strategy, self.current.data.players)
        self.current.data.apply_kill(record)
        self.summary.kill_lines += 1

    def _record_malformed(self, error: LogParseError, line: str, line_number: int):
        self.summary.malformed_lines += 1
        logger.warning(f"Skipping malformed line: {error}")

        if len(self.summary.malformed_samples) < self.max_malformed_samples:
            sample = line[:LINE_SAMPLE_MAX_LENGTH] + ('...' if len(line) > LINE_SAMPLE_MAX_LENGTH else '')
            self.summary.malformed_samples.append(f"Line {line_number} [{error.stage}]: {sample}")


def parse_log(content: str, strict: bool = True,
              strategy: ExtractionStrategy = ExtractionStrategy.POSITIONAL,
              max_malformed_samples: int = 10) -> Tuple[List[Match], ParseSummary]:
    """
    Parse a whole log into matches.

    Args:
        content: Full text of the log
        strict: Raise on the first malformed line instead of skipping it
        strategy: Name extraction strategy for kill lines
        max_malformed_samples: Number of malformed lines kept in the summary

    Returns:
        Tuple of (matches ordered by id, parse_summary)
    """
    accumulator = MatchAccumulator(strict=strict, strategy=strategy,
                                   max_malformed_samples=max_malformed_samples)
    accumulator.feed_lines(content)

    summary = accumulator.summary
    logger.info(f"Parsed {summary.matches} matches and {summary.kill_lines} kills "
                f"from {summary.total_lines} lines")
    if summary.malformed_lines:
        logger.warning(f"Skipped {summary.malformed_lines} malformed lines")

    return accumulator.matches, summary


def parse_matches(content: str, strict: bool = True,
                  strategy: ExtractionStrategy = ExtractionStrategy.POSITIONAL) -> List[Match]:
    """Parse a whole log and return only the matches."""
    matches, _ = parse_log(content, strict=strict, strategy=strategy)
    return matches
