"""
Quake Log Tools - Command Line Tools

This package provides the command line tools built on the log parser.
"""

from .match_report import MatchReportTool

__all__ = [
    'MatchReportTool',
]
