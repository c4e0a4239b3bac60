"""
Line classifier for Quake III game logs.

Tags each raw line by substring containment. The markers are checked in
a fixed priority order, so a line carrying several markers always gets
the same tag.
"""

from enum import Enum


class LineKind(Enum):
    """Kinds of log lines the match accumulator reacts to."""

    MATCH_START = "InitGame"
    KILL = "Kill"
    PLAYER_INFO = "ClientUserinfoChanged"
    OTHER = "Other"


# Checked in order; the first marker found decides the tag
LINE_MARKERS = (
    ("InitGame:", LineKind.MATCH_START),
    ("Kill:", LineKind.KILL),
    ("ClientUserinfoChanged", LineKind.PLAYER_INFO),
)


def classify_line(line: str) -> LineKind:
    """
    Classify a raw log line.

    Args:
        line: One line of the log, with or without its newline

    Returns:
        The LineKind of the line; LineKind.OTHER when no marker is present
    """
    for marker, kind in LINE_MARKERS:
        if marker in line:
            return kind
    return LineKind.OTHER
