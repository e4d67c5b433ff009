"""
tests/test_standings.py
Ranking aggregation over finished matches.
"""

from schoolsports_backend.models.match_model import Match, MatchTeam, MatchStatus
from schoolsports_backend.services.standings import (
    FinishedMatch, Participation, classify_outcome, compute_standings, format_win_rate,
    get_championship_standings,
)


def football_match(match_id, home, away, home_goals, away_goals):
    """Finished match without stored outcomes; points follow the 3/1/0 convention."""
    if home_goals > away_goals:
        points = (3, 0)
    elif away_goals > home_goals:
        points = (0, 3)
    else:
        points = (1, 1)
    return FinishedMatch(
        match_id=match_id,
        participations=[
            Participation(team_id=home, team_name=f"Team {home}", goals=home_goals, points=points[0]),
            Participation(team_id=away, team_name=f"Team {away}", goals=away_goals, points=points[1]),
        ],
    )


def team_order(ranking):
    return [entry["team_id"] for entry in ranking]


class TestComputeStandings:

    def test_empty_input_gives_empty_ranking(self):
        assert compute_standings([]) == []

    def test_three_team_table(self):
        matches = [
            football_match(1, 1, 2, 2, 0),
            football_match(2, 2, 3, 1, 1),
            football_match(3, 3, 1, 0, 1),
        ]
        ranking = compute_standings(matches)

        # Teams 2 and 3 both have 1 point; 3 has the better goal difference
        assert team_order(ranking) == [1, 3, 2]
        assert [entry["position"] for entry in ranking] == [1, 2, 3]

        leader = ranking[0]
        assert leader["points"] == 6
        assert leader["wins"] == 2
        assert leader["goals_for"] == 3
        assert leader["goals_against"] == 0
        assert leader["goal_difference"] == 3
        assert leader["matches_played"] == 2

        last = ranking[2]
        assert (last["wins"], last["draws"], last["losses"]) == (0, 1, 1)
        assert last["goal_difference"] == -2

    def test_goals_for_breaks_equal_goal_difference(self):
        matches = [
            football_match(1, 1, 3, 3, 2),
            football_match(2, 2, 4, 1, 0),
        ]
        ranking = compute_standings(matches)
        assert team_order(ranking)[:2] == [1, 2]

    def test_full_tie_is_broken_by_team_id(self):
        matches = [football_match(1, 7, 4, 1, 1)]
        assert team_order(compute_standings(matches)) == [4, 7]

    def test_result_does_not_depend_on_match_order(self):
        matches = [
            football_match(1, 1, 2, 0, 0),
            football_match(2, 3, 4, 2, 2),
            football_match(3, 1, 3, 1, 0),
            football_match(4, 2, 4, 0, 1),
        ]
        assert compute_standings(matches) == compute_standings(list(reversed(matches)))

    def test_points_total_is_sum_of_awarded_points(self):
        matches = [
            football_match(1, 1, 2, 3, 0),
            football_match(2, 1, 3, 1, 1),
            football_match(3, 1, 4, 0, 3),
        ]
        team_one = next(e for e in compute_standings(matches) if e["team_id"] == 1)
        assert team_one["points"] == 4
        assert (team_one["wins"], team_one["draws"], team_one["losses"]) == (1, 1, 1)

    def test_extended_ranking_uses_wins_and_win_rate(self):
        matches = [
            # Team 5: one win, one loss -> 3 pts, GF 1, GA 1
            football_match(1, 5, 10, 1, 0),
            football_match(2, 5, 11, 0, 1),
            # Team 2: three draws -> 3 pts, GF 1, GA 1
            football_match(3, 2, 12, 0, 0),
            football_match(4, 2, 13, 1, 1),
            football_match(5, 2, 14, 0, 0),
        ]

        plain = team_order(compute_standings(matches))
        assert plain.index(2) < plain.index(5)

        extended = compute_standings(matches, extended=True)
        order = team_order(extended)
        assert order.index(5) < order.index(2)

        by_team = {entry["team_id"]: entry for entry in extended}
        assert by_team[5]["win_rate"] == "50.00"
        assert by_team[2]["win_rate"] == "0.00"
        assert by_team[11]["win_rate"] == "100.00"

    def test_win_rate_only_in_extended_variant(self):
        ranking = compute_standings([football_match(1, 1, 2, 1, 0)])
        assert "win_rate" not in ranking[0]


class TestOutcomeClassification:

    def test_stored_outcome_takes_precedence_over_points(self):
        participation = Participation(team_id=1, team_name="A", goals=3, points=2, outcome="win")
        assert classify_outcome(participation) == "win"

    def test_points_fallback(self):
        assert classify_outcome(Participation(team_id=1, team_name="A", points=3)) == "win"
        assert classify_outcome(Participation(team_id=1, team_name="A", points=1)) == "draw"
        assert classify_outcome(Participation(team_id=1, team_name="A", points=0)) == "loss"

    def test_format_win_rate(self):
        assert format_win_rate(0, 0) == "0.00"
        assert format_win_rate(1, 3) == "33.33"
        assert format_win_rate(2, 2) == "100.00"


class TestChampionshipStandings:

    def test_only_finished_matches_count(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        wolves, lions, owls = make_teams("Blue Wolves", "Black Lions", "White Owls")

        played = Match(championship_id=championship.id)
        pending = Match(championship_id=championship.id, status=MatchStatus.SCHEDULED)
        session.add_all([played, pending])
        session.flush()
        session.add_all([
            MatchTeam(match_id=played.id, team_id=wolves.id),
            MatchTeam(match_id=played.id, team_id=lions.id),
            MatchTeam(match_id=pending.id, team_id=wolves.id),
            MatchTeam(match_id=pending.id, team_id=owls.id),
        ])
        session.commit()

        score_match(played.id, {wolves.id: 2, lions.id: 1})

        ranking = get_championship_standings(session, championship.id)
        assert team_order(ranking) == [wolves.id, lions.id]
        assert ranking[0]["team_name"] == "Blue Wolves"
        assert ranking[0]["points"] == 3
        assert ranking[1]["losses"] == 1

    def test_other_championships_are_ignored(self, session, make_championship, make_teams, score_match):
        cup = make_championship(name="School Cup")
        league = make_championship(name="University League", year=2026)
        wolves, lions = make_teams("Blue Wolves", "Black Lions")

        match = Match(championship_id=league.id)
        session.add(match)
        session.flush()
        session.add_all([MatchTeam(match_id=match.id, team_id=wolves.id), MatchTeam(match_id=match.id, team_id=lions.id)])
        session.commit()
        score_match(match.id, {wolves.id: 0, lions.id: 0})

        assert get_championship_standings(session, cup.id) == []
        assert len(get_championship_standings(session, league.id)) == 2
