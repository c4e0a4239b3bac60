"""Tests for the line classifier."""

import pytest

from quake_log_tools.parser.classifier import LineKind, classify_line

from conftest import INIT_GAME, kill, player_info


class TestClassifyLine:
    """Tests for classify_line."""

    @pytest.mark.parametrize("line,expected", [
        (INIT_GAME, LineKind.MATCH_START),
        (kill("Zeh", "Mal"), LineKind.KILL),
        (kill("<world>", "Mal", "MOD_FALLING"), LineKind.KILL),
        (player_info(2, "Isgalamido"), LineKind.PLAYER_INFO),
        ("  0:01 ClientConnect: 2", LineKind.OTHER),
        ("  1:47 ShutdownGame:", LineKind.OTHER),
        ("------------------------------------------------------------", LineKind.OTHER),
        ("", LineKind.OTHER),
    ])
    def test_tags(self, line, expected):
        assert classify_line(line) is expected

    def test_init_game_takes_precedence(self):
        """InitGame wins over every other marker on the same line."""
        line = r"  0:00 InitGame: \sv_hostname\Kill: ClientUserinfoChanged"
        assert classify_line(line) is LineKind.MATCH_START

    def test_kill_takes_precedence_over_player_info(self):
        line = "  0:02 Kill: 2 3 7: ClientUserinfoChanged killed Mal by MOD_ROCKET"
        assert classify_line(line) is LineKind.KILL

    def test_marker_needs_colon(self):
        assert classify_line("  0:00 InitGame") is LineKind.OTHER
        assert classify_line("  0:00 Kill 2 3 7") is LineKind.OTHER

    def test_idempotent(self, sample_log):
        """Reclassifying a line always gives the same tag."""
        for line in sample_log.splitlines():
            assert classify_line(line) is classify_line(line)
