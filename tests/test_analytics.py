import copy

from tournament.analytics import (
    SORT_BY_WINS,
    calculate_player_stats,
    compute_leaderboard,
    compute_pairing_stats,
    rounds_between,
    rounds_involving,
)
from tournament.models import Match, Round, Tournament, compensation_multiplier

from conftest import score_all


def fixed_tournament(matches, players=("A", "B", "C", "D"), point_type="21"):
    """One round per (team_a, team_b, score_a) entry; score_a None leaves it pending."""
    rounds = []
    for i, (team_a, team_b, score_a) in enumerate(matches, start=1):
        match = Match(id=f"m{i}", team_a=list(team_a), team_b=list(team_b))
        if score_a is not None:
            pool = 21 if point_type == "21" else 16
            match.score_a, match.score_b, match.is_completed = score_a, pool - score_a, True
        resting = [p for p in players if p not in match.players]
        rounds.append(Round(round_number=i, matches=[match], resting_players=resting))
    return Tournament(id="t1", name="Test", team_type="standard", point_type=point_type,
                      players=list(players), rounds=rounds)


class TestLeaderboard:
    def test_four_player_scenario(self):
        t = fixed_tournament([(("A", "B"), ("C", "D"), 15)])
        stats = calculate_player_stats(t)
        for p in ("A", "B"):
            assert stats[p].total_points == 15
            assert stats[p].wins == 1
        for p in ("C", "D"):
            assert stats[p].total_points == 6
            assert stats[p].losses == 1
        assert [s.name for s in compute_leaderboard(t)][:2] == ["A", "B"]

    def test_five_player_compensation(self, five_player):
        t = score_all(five_player, 12)
        board = compute_leaderboard(t)
        max_played = max(s.matches_played for s in board)
        multiplier = compensation_multiplier(t.point_type)
        for s in board:
            assert s.compensation_points == (max_played - s.matches_played) * multiplier
            assert s.final_score == s.total_points + s.compensation_points
            if s.matches_played == max_played:
                assert s.compensation_points == 0

    def test_five_player_resting_player_after_first_round(self, five_player):
        match = five_player.rounds[0].matches[0]
        match.score_a, match.score_b, match.is_completed = 12, 9, True
        resting = five_player.rounds[0].resting_players[0]
        stats = calculate_player_stats(five_player)
        assert stats[resting].compensation_points == 10
        assert stats[resting].final_score == 10
        assert stats[match.team_a[0]].final_score == 12

    def test_resting_player_gets_compensated(self):
        players = ("A", "B", "C", "D", "E")
        t = fixed_tournament([(("A", "B"), ("C", "D"), 11)], players=players)
        stats = calculate_player_stats(t)
        assert stats["E"].matches_played == 0
        assert stats["E"].compensation_points == 10
        assert stats["A"].compensation_points == 0

    def test_ties(self):
        t = fixed_tournament([(("A", "B"), ("C", "D"), 8)], point_type="16")
        stats = calculate_player_stats(t)
        assert all(stats[p].ties == 1 for p in "ABCD")
        assert all(stats[p].wins == 0 and stats[p].losses == 0 for p in "ABCD")

    def test_pending_matches_are_ignored(self):
        t = fixed_tournament([(("A", "B"), ("C", "D"), None)])
        assert all(s.matches_played == 0 for s in compute_leaderboard(t))

    def test_points_ordering(self):
        t = fixed_tournament([
            (("A", "B"), ("C", "D"), 15),
            (("A", "C"), ("B", "D"), 20),
        ])
        board = compute_leaderboard(t)
        assert [s.name for s in board] == ["A", "C", "B", "D"]
        assert board[0].final_score == 35

    def test_wins_ordering_keeps_roster_order_on_ties(self):
        t = fixed_tournament([
            (("A", "D"), ("B", "C"), 11),
            (("B", "C"), ("A", "D"), 11),
        ])
        # every player has one win and 21 points
        assert [s.name for s in compute_leaderboard(t, SORT_BY_WINS)] == ["A", "B", "C", "D"]

    def test_wins_before_points(self):
        t = fixed_tournament([
            (("A", "B"), ("C", "D"), 11),
            (("A", "C"), ("B", "D"), 11),
            (("C", "D"), ("A", "B"), 21),
        ])
        assert [s.name for s in compute_leaderboard(t)] == ["C", "D", "A", "B"]
        assert [s.name for s in compute_leaderboard(t, SORT_BY_WINS)] == ["C", "A", "D", "B"]

    def test_pure_and_deterministic(self, five_player):
        t = score_all(five_player, 9)
        before = copy.deepcopy(t)
        first = [s.to_dict() for s in compute_leaderboard(t)]
        second = [s.to_dict() for s in compute_leaderboard(t)]
        assert first == second
        assert t == before


class TestPairingStats:
    def test_partner_and_versus_results(self):
        t = fixed_tournament([
            (("A", "B"), ("C", "D"), 15),
            (("A", "C"), ("B", "D"), 5),
            (("A", "D"), ("B", "C"), None),
        ])
        stats = {s.name: s for s in compute_pairing_stats(t, "A")}
        assert set(stats) == {"B", "C", "D"}
        assert stats["B"].partner_count == 1
        assert stats["B"].partner_results == ["win"]
        assert stats["B"].versus_results == ["loss", "pending"]
        assert stats["C"].partner_results == ["loss"]
        assert stats["D"].partner_results == ["pending"]
        assert stats["D"].versus_count == 2

    def test_tie_counts_as_loss(self):
        t = fixed_tournament([(("A", "B"), ("C", "D"), 8)], point_type="16")
        stats = {s.name: s for s in compute_pairing_stats(t, "C")}
        assert stats["D"].partner_results == ["loss"]
        assert stats["A"].versus_results == ["loss"]

    def test_ordered_by_name(self):
        players = ("charlie", "Bravo", "alpha", "Delta")
        t = fixed_tournament([], players=players)
        assert [s.name for s in compute_pairing_stats(t, "Delta")] == ["alpha", "Bravo", "charlie"]

    def test_accented_names_sort_by_base_letter(self):
        t = fixed_tournament([], players=("Zoe", "Émile", "Adam", "Me"))
        assert [s.name for s in compute_pairing_stats(t, "Me")] == ["Adam", "Émile", "Zoe"]

    def test_player_never_met(self):
        players = ("A", "B", "C", "D", "E")
        t = fixed_tournament([(("A", "B"), ("C", "D"), 15)], players=players)
        stats = {s.name: s for s in compute_pairing_stats(t, "E")}
        assert all(s.partner_count == 0 and s.versus_count == 0 for s in stats.values())


class TestRounds:
    def test_rounds_involving(self):
        players = ("A", "B", "C", "D", "E")
        t = fixed_tournament([
            (("A", "B"), ("C", "D"), 15),
            (("E", "B"), ("C", "D"), 15),
            (("A", "E"), ("C", "B"), 15),
        ], players=players)
        assert [r.round_number for r in rounds_involving(t, "A")] == [1, 3]
        assert rounds_involving(t, "E")[0].to_dict()["match"]["id"] == "m2"

    def test_rounds_between(self):
        t = fixed_tournament([
            (("A", "B"), ("C", "D"), 15),
            (("A", "C"), ("B", "D"), 15),
            (("A", "D"), ("B", "C"), 15),
        ])
        between = rounds_between(t, "A", "B")
        assert [r.round_number for r in between["partnerRounds"]] == [1]
        assert [r.round_number for r in between["versusRounds"]] == [2, 3]

    def test_unknown_player_has_no_rounds(self, four_player):
        assert rounds_involving(four_player, "Nobody") == []
