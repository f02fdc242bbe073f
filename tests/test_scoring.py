import pytest

from tournament.errors import ScoreRangeError, TournamentEndedError, ValidationError
from tournament.models import max_score
from tournament.scoring import is_round_complete, reset_all, reset_score, set_score


def first_match(t):
    return t.rounds[0].matches[0]


class TestSetScore:
    def test_other_side_gets_the_rest(self, four_player):
        match = set_score(four_player, 1, first_match(four_player).id, "A", 15)
        assert (match.score_a, match.score_b) == (15, 6)
        assert match.is_completed

    def test_scoring_team_b(self, four_player):
        match = set_score(four_player, 1, first_match(four_player).id, "B", 21)
        assert (match.score_a, match.score_b) == (0, 21)

    @pytest.mark.parametrize("point_type", ["21", "16", "best4", "best5"])
    def test_zero_sum_for_every_point_type(self, four_player, point_type):
        four_player.point_type = point_type
        pool = max_score(point_type)
        for value in range(pool + 1):
            match = set_score(four_player, 1, first_match(four_player).id, "A", value)
            assert match.score_a + match.score_b == pool

    @pytest.mark.parametrize("value", [-1, 22, 2.5, "10", True])
    def test_out_of_range(self, four_player, value):
        with pytest.raises(ScoreRangeError, match="between 0 and 21"):
            set_score(four_player, 1, first_match(four_player).id, "A", value)
        assert not first_match(four_player).is_completed

    def test_unknown_match(self, four_player):
        with pytest.raises(ValidationError, match="not found"):
            set_score(four_player, 1, "nope", "A", 3)

    def test_match_must_be_in_given_round(self, four_player):
        with pytest.raises(ValidationError):
            set_score(four_player, 2, first_match(four_player).id, "A", 3)

    def test_unknown_team(self, four_player):
        with pytest.raises(ValidationError, match="Team"):
            set_score(four_player, 1, first_match(four_player).id, "C", 3)

    def test_rescoring_overwrites(self, four_player):
        mid = first_match(four_player).id
        set_score(four_player, 1, mid, "A", 15)
        match = set_score(four_player, 1, mid, "A", 10)
        assert (match.score_a, match.score_b) == (10, 11)

    def test_ended_tournament(self, four_player):
        four_player.is_ended = True
        with pytest.raises(TournamentEndedError):
            set_score(four_player, 1, first_match(four_player).id, "A", 3)


class TestReset:
    def test_reset_score(self, four_player):
        mid = first_match(four_player).id
        set_score(four_player, 1, mid, "A", 15)
        match = reset_score(four_player, 1, mid)
        assert match.score_a is None and match.score_b is None
        assert not match.is_completed

    def test_reset_all(self, four_player):
        for rnd in four_player.rounds:
            set_score(four_player, rnd.round_number, rnd.matches[0].id, "A", 11)
        reset_all(four_player)
        assert not four_player.has_any_scored_round()

    def test_round_complete(self, four_player):
        rnd = four_player.rounds[0]
        assert not is_round_complete(rnd)
        set_score(four_player, 1, rnd.matches[0].id, "B", 4)
        assert is_round_complete(rnd)
