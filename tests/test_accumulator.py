"""Tests for the match accumulator state machine."""

import logging

import pytest

from quake_log_tools.errors import (
    EmptyPlayerNameError,
    LogParseError,
    MatchLimitError,
    UnknownMeansOfDeathError,
    UnresolvedPlayerError,
)
from quake_log_tools.parser.accumulator import Match, MatchAccumulator, parse_log, parse_matches
from quake_log_tools.parser.grammar import ExtractionStrategy, KillRecord
from quake_log_tools.parser.means_of_death import MeansOfDeath

from conftest import INIT_GAME, SHUTDOWN, kill, player_info


def build_log(*lines):
    return "\n".join(lines) + "\n"


class TestMatchData:
    """Tests for MatchData.apply_kill."""

    def test_apply_player_kill(self, match_data):
        match_data.apply_kill(KillRecord("Zeh", 1, MeansOfDeath.MOD_ROCKET))
        assert match_data.kills == {"Zeh": 1}
        assert match_data.kills_by_means == {"MOD_ROCKET": 1}
        assert match_data.total_kills == 1

    def test_apply_world_kill_goes_negative(self, match_data):
        match_data.apply_kill(KillRecord("Mal", -1, MeansOfDeath.MOD_FALLING, world=True))
        match_data.apply_kill(KillRecord("Mal", -1, MeansOfDeath.MOD_FALLING, world=True))
        assert match_data.kills == {"Mal": -2}
        assert match_data.kills_by_means == {"MOD_FALLING": 2}
        assert match_data.total_kills == 2

    def test_match_name(self):
        assert Match(id=3).name == "game_3"


class TestSampleLog:
    """End-to-end checks against the sample log."""

    def test_single_match(self, sample_log):
        matches = parse_matches(sample_log)
        assert len(matches) == 1
        assert matches[0].id == 1

    def test_kill_counts(self, sample_log):
        data = parse_matches(sample_log)[0].data
        assert data.total_kills == 21
        assert data.kills["Dono da Bola"] == 2
        assert data.kills["Oootsimo"] == 3
        assert data.kills["Zeh"] == 2
        assert data.kills["Mal"] == 0
        assert data.kills["Assasinu Credi"] == 1
        assert data.kills["Isgalamido"] == -1
        assert "<world>" not in data.kills

    def test_players(self, sample_log):
        data = parse_matches(sample_log)[0].data
        assert len(data.players) == 6
        assert data.players == {"Isgalamido", "Oootsimo", "Dono da Bola", "Assasinu Credi", "Zeh", "Mal"}

    def test_kills_by_means(self, sample_log):
        data = parse_matches(sample_log)[0].data
        assert data.kills_by_means == {"MOD_ROCKET": 5, "MOD_TRIGGER_HURT": 7, "MOD_ROCKET_SPLASH": 9}
        assert sum(data.kills_by_means.values()) == data.total_kills

    def test_world_kill_sign_rule(self, sample_log):
        """Each world kill takes one from the victim but still counts once in total_kills."""
        data = parse_matches(sample_log)[0].data
        world_kills = data.kills_by_means["MOD_TRIGGER_HURT"]
        assert sum(data.kills.values()) == data.total_kills - 2 * world_kills

    def test_strategies_agree(self, sample_log):
        positional = parse_matches(sample_log, strategy=ExtractionStrategy.POSITIONAL)
        known = parse_matches(sample_log, strategy=ExtractionStrategy.KNOWN_PLAYERS)
        assert positional[0].data == known[0].data

    def test_summary(self, sample_log):
        _, summary = parse_log(sample_log)
        assert summary.total_lines == 31
        assert summary.matches == 1
        assert summary.kill_lines == 21
        assert summary.player_info_lines == 6
        assert summary.ignored_lines == 0
        assert summary.malformed_lines == 0


class TestMatchBoundaries:
    """Tests for match start handling."""

    def test_sequential_ids(self):
        log = build_log(INIT_GAME, kill("Zeh", "Mal"), SHUTDOWN,
                        INIT_GAME, SHUTDOWN,
                        INIT_GAME, kill("<world>", "Zeh", "MOD_FALLING"))
        matches = parse_matches(log)
        assert [m.id for m in matches] == [1, 2, 3]
        assert [m.data.total_kills for m in matches] == [1, 0, 1]

    def test_kills_attach_to_latest_match(self):
        log = build_log(INIT_GAME, kill("Zeh", "Mal"), INIT_GAME, kill("Mal", "Zeh"), kill("Mal", "Zeh"))
        first, second = parse_matches(log)
        assert first.data.kills == {"Zeh": 1}
        assert second.data.kills == {"Mal": 2}

    def test_last_match_without_shutdown_is_kept(self):
        log = build_log(INIT_GAME, player_info(2, "Zeh"), kill("Zeh", "Mal"))
        matches = parse_matches(log)
        assert len(matches) == 1
        assert matches[0].data.players == {"Zeh"}

    def test_empty_log(self):
        assert parse_matches("") == []

    def test_match_limit(self):
        accumulator = MatchAccumulator(max_matches=2)
        accumulator.feed(INIT_GAME, 1)
        accumulator.feed(INIT_GAME, 2)
        with pytest.raises(MatchLimitError) as exc_info:
            accumulator.feed(INIT_GAME, 3)
        assert exc_info.value.line_number == 3
        assert len(accumulator.matches) == 2

    def test_match_limit_ends_lenient_run(self):
        accumulator = MatchAccumulator(strict=False, max_matches=1)
        accumulator.feed(INIT_GAME, 1)
        with pytest.raises(MatchLimitError):
            accumulator.feed(INIT_GAME, 2)
        assert accumulator.summary.malformed_lines == 0
        assert accumulator.matches[0].data.kills == {}


class TestLineSplitting:
    """Lines are delimited by newlines only."""

    def test_form_feed_in_player_name(self):
        matches = parse_matches(build_log(INIT_GAME, player_info(2, "A\x0cB")))
        assert matches[0].data.players == {"A\x0cB"}

    def test_unicode_line_separator_in_killer(self):
        matches = parse_matches(build_log(INIT_GAME, kill("Ze\u2028h", "Mal")))
        assert matches[0].data.kills == {"Ze\u2028h": 1}

    def test_crlf_line_endings(self):
        log = "\r\n".join([INIT_GAME, player_info(2, "Zeh"), kill("Zeh", "Mal", "MOD_LAVA")]) + "\r\n"
        match = parse_matches(log)[0]
        assert match.data.players == {"Zeh"}
        assert match.data.kills_by_means == {"MOD_LAVA": 1}

    def test_line_numbers_without_trailing_newline(self):
        log = "\n".join([INIT_GAME, kill("Zeh", "Mal", "MOD_BANANA")])
        with pytest.raises(UnknownMeansOfDeathError) as exc_info:
            parse_matches(log)
        assert exc_info.value.line_number == 2


class TestNoActiveMatch:
    """Event lines before the first InitGame are ignored."""

    def test_kill_before_first_match(self):
        log = build_log(kill("Zeh", "Mal"), player_info(2, "Zeh"), INIT_GAME, kill("Mal", "Zeh"))
        matches, summary = parse_log(log)
        assert len(matches) == 1
        assert matches[0].data.kills == {"Mal": 1}
        assert matches[0].data.players == set()
        assert summary.ignored_lines == 2

    def test_no_match_at_all(self):
        accumulator = MatchAccumulator()
        accumulator.feed(kill("<world>", "Zeh", "MOD_FALLING"), 1)
        accumulator.feed(player_info(2, "Zeh"), 2)
        assert accumulator.current is None
        assert accumulator.matches == []

    def test_malformed_line_before_first_match_is_ignored(self):
        """Lines outside a match are dropped before any extraction."""
        matches = parse_matches(build_log(kill("Zeh", "Mal", "MOD_BANANA"), INIT_GAME))
        assert matches[0].data.total_kills == 0


class TestStrictMode:
    """Malformed lines stop the run by default."""

    def test_unknown_means_of_death_propagates(self):
        log = build_log(INIT_GAME, kill("Zeh", "Mal"), kill("Zeh", "Mal", "MOD_BANANA"))
        with pytest.raises(UnknownMeansOfDeathError) as exc_info:
            parse_matches(log)

        error = exc_info.value
        assert error.line_number == 3
        assert "MOD_BANANA" in error.line
        assert "line 3" in str(error)

    def test_empty_player_name(self):
        log = build_log(INIT_GAME, r"  0:01 ClientUserinfoChanged: 2 n\\t\0")
        with pytest.raises(EmptyPlayerNameError):
            parse_matches(log)

    def test_known_players_unresolved(self):
        log = build_log(INIT_GAME, player_info(2, "Isgalamido"),
                        "21:42 Kill: 1022 2 22: <world> killed NonExistentPlayer by MOD_TRIGGER_HURT")
        with pytest.raises(UnresolvedPlayerError):
            parse_matches(log, strategy=ExtractionStrategy.KNOWN_PLAYERS)

    def test_failed_line_leaves_counters_untouched(self):
        accumulator = MatchAccumulator()
        accumulator.feed(INIT_GAME, 1)
        with pytest.raises(LogParseError):
            accumulator.feed(kill("Zeh", "Mal", "MOD_BANANA"), 2)

        data = accumulator.current.data
        assert data.kills == {}
        assert data.kills_by_means == {}
        assert data.total_kills == 0


class TestLenientMode:
    """Lenient mode skips and records malformed lines."""

    def test_skips_malformed_lines(self, caplog):
        log = build_log(INIT_GAME,
                        kill("Zeh", "Mal"),
                        kill("Zeh", "Mal", "MOD_BANANA"),
                        r"  0:01 ClientUserinfoChanged: 2 n\\t\0",
                        kill("<world>", "Mal", "MOD_LAVA"))

        with caplog.at_level(logging.WARNING):
            matches, summary = parse_log(log, strict=False)

        data = matches[0].data
        assert data.total_kills == 2
        assert data.kills == {"Zeh": 1, "Mal": -1}
        assert summary.malformed_lines == 2
        assert summary.malformed_samples[0].startswith("Line 3 [means_of_death]")
        assert summary.malformed_samples[1].startswith("Line 4 [player_name]")
        assert "Skipping malformed line" in caplog.text

    def test_sample_cap(self):
        bad_lines = [kill("Zeh", "Mal", "MOD_BANANA")] * 5
        _, summary = parse_log(build_log(INIT_GAME, *bad_lines), strict=False, max_malformed_samples=2)
        assert summary.malformed_lines == 5
        assert len(summary.malformed_samples) == 2
