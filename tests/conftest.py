"""Shared fixtures for the Quake Log Tools test suite."""

from pathlib import Path

import pytest

from quake_log_tools.parser.accumulator import MatchData

DATA_DIR = Path(__file__).parent / "data"
SAMPLE_LOG = DATA_DIR / "qgames_sample.log"

INIT_GAME = r"  0:00 InitGame: \sv_floodProtect\1\sv_maxPing\0\sv_minPing\0\sv_maxRate\10000\sv_minRate\0\sv_hostname\Code Miner Server\g_gametype\0\mapname\q3dm17"
SHUTDOWN = "  1:47 ShutdownGame:"


def player_info(slot: int, name: str) -> str:
    """Build a ClientUserinfoChanged line for a player."""
    return rf"  0:01 ClientUserinfoChanged: {slot} n\{name}\t\0\model\sarge\hmodel\sarge\c1\4\c2\5\hc\100"


def kill(killer: str, victim: str, means: str = "MOD_ROCKET") -> str:
    """Build a Kill line; killer '<world>' makes a world kill."""
    killer_id = 1022 if killer == "<world>" else 2
    return f"  0:02 Kill: {killer_id} 3 7: {killer} killed {victim} by {means}"


@pytest.fixture
def sample_log_path() -> Path:
    return SAMPLE_LOG


@pytest.fixture
def sample_log() -> str:
    return SAMPLE_LOG.read_text(encoding="utf-8")


@pytest.fixture
def match_data() -> MatchData:
    return MatchData()
