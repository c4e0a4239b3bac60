"""Tests for the cross-match ranking reducer."""

from quake_log_tools.parser.accumulator import Match, MatchData, parse_matches
from quake_log_tools.ranking import PlayerScore, reduce_ranking


def make_match(match_id, kills):
    return Match(id=match_id, data=MatchData(players=set(kills), kills=dict(kills)))


class TestReduceRanking:
    """Tests for reduce_ranking."""

    def test_sums_across_matches(self):
        matches = [
            make_match(1, {"Player1": 5}),
            make_match(2, {"Player2": -3}),
            make_match(3, {"Player1": 2, "Player2": -1, "Player3": 9}),
        ]
        ranking = reduce_ranking(matches)

        assert ranking == [
            PlayerScore("Player3", 9),
            PlayerScore("Player1", 7),
            PlayerScore("Player2", -4),
        ]

    def test_ties_keep_first_seen_order(self):
        matches = [
            make_match(1, {"Bravo": 2, "Alpha": 1}),
            make_match(2, {"Charlie": 3, "Alpha": 1}),
        ]
        ranking = reduce_ranking(matches)
        assert [score.name for score in ranking] == ["Charlie", "Bravo", "Alpha"]

    def test_folds_in_match_id_order(self):
        """First sight is decided by match id, not list position."""
        matches = [make_match(2, {"Late": 1}), make_match(1, {"Early": 1})]
        assert [score.name for score in reduce_ranking(matches)] == ["Early", "Late"]

    def test_deterministic(self):
        matches = [make_match(1, {"A": 1, "B": 1}), make_match(2, {"C": 1, "A": 0})]
        assert reduce_ranking(matches) == reduce_ranking(matches)

    def test_reordering_does_not_change_totals(self):
        matches = [make_match(1, {"A": 3, "B": -1}), make_match(2, {"B": 5, "C": 2})]
        forward = {s.name: s.kills for s in reduce_ranking(matches)}
        backward = {s.name: s.kills for s in reduce_ranking(list(reversed(matches)))}
        assert forward == backward == {"A": 3, "B": 4, "C": 2}

    def test_zero_and_negative_players_are_ranked(self):
        ranking = reduce_ranking([make_match(1, {"Mal": 0, "Isgalamido": -1})])
        assert ranking == [PlayerScore("Mal", 0), PlayerScore("Isgalamido", -1)]

    def test_no_matches(self):
        assert reduce_ranking([]) == []

    def test_does_not_mutate_matches(self):
        match = make_match(1, {"A": 1})
        reduce_ranking([match, make_match(2, {"A": 4})])
        assert match.data.kills == {"A": 1}

    def test_sample_log(self, sample_log):
        ranking = reduce_ranking(parse_matches(sample_log))

        assert ranking[0] == PlayerScore("Oootsimo", 3)
        assert [(s.name, s.kills) for s in ranking] == [
            ("Oootsimo", 3),
            ("Dono da Bola", 2),
            ("Zeh", 2),
            ("Assasinu Credi", 1),
            ("Mal", 0),
            ("Isgalamido", -1),
        ]
