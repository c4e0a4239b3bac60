"""
Exceptions raised while interpreting Quake III game logs.

Every parse failure carries the offending line and the stage that
rejected it so the caller can report it verbatim.
"""

from typing import Optional


class QuakeLogError(Exception):
    """Base class for all errors raised by Quake Log Tools."""


class LogParseError(QuakeLogError, ValueError):
    """
    A log line could not be interpreted.

    Attributes:
        line: The original line text
        stage: Name of the extraction stage that failed
        line_number: 1-based line number, or 0 when unknown
    """

    stage = "parse"

    def __init__(self, message: str, line: str = "", line_number: int = 0,
                 stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.line_number = line_number
        if stage is not None:
            self.stage = stage

    def __str__(self) -> str:
        location = f" at line {self.line_number}" if self.line_number else ""
        if self.line:
            return f"[{self.stage}] {self.message}{location}: {self.line}"
        return f"[{self.stage}] {self.message}{location}"


class MissingAnchorError(LogParseError):
    """A required literal anchor ("killed", "by", a colon, n\\ ...) is absent."""

    stage = "anchor"


class EmptyPlayerNameError(LogParseError):
    """The text between two anchors was empty."""

    stage = "player_name"


class UnresolvedPlayerError(LogParseError):
    """No known player name matched the kill line."""

    stage = "player_lookup"


class UnknownMeansOfDeathError(LogParseError):
    """The trailing death-cause token is not a recognised means of death."""

    stage = "means_of_death"


class MatchLimitError(LogParseError):
    """The log started more matches than a match id can represent."""

    stage = "match_start"


class ReportError(QuakeLogError):
    """A computed report could not be serialised or exported."""
