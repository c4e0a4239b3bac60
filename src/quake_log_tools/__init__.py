"""
Quake Log Tools - Python package for Quake III Arena server logs

This package parses Quake III Arena game logs into per-match statistics
(total kills, players, kills per player, kills by means of death) and
ranks players across all matches.
"""

__version__ = '1.0.0'
