# Configuration package initialization
"""
Quake Log Tools - Configuration System

This package provides a lightweight configuration system for Quake Log Tools.

Quick Usage:
    from config import Config
    config = Config(profile='my_server')
    strict = config.get('parser.strict', True)
"""

from config.config import Config, DEFAULT_CONFIG

__all__ = ['Config', 'DEFAULT_CONFIG']
