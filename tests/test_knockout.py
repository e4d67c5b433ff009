"""
tests/test_knockout.py
Knockout rounds: creation from explicit pairs, advancing winners and the cached bracket state.
"""

from datetime import datetime

from sqlmodel import select

from schoolsports_backend.core.errors import ErrorKind
from schoolsports_backend.core.locks import championship_lock
from schoolsports_backend.models.championship_model import ChampionshipFormat
from schoolsports_backend.models.knockout_model import KnockoutState, KnockoutStatus
from schoolsports_backend.models.match_model import Match, MatchStatus, MatchTeam
from schoolsports_backend.services.enrollment import enrolled_team_ids
from schoolsports_backend.services.knockout import (
    advance_knockout_round, create_knockout_round, validate_pairs,
)
from schoolsports_backend.services.knockout_state import get_knockout_state
from schoolsports_backend.services.scoring import update_match_details


def round_matches(session, championship_id, round_number):
    return session.exec(
        select(Match)
        .where(Match.championship_id == championship_id, Match.round_number == round_number)
        .order_by(Match.bracket_order)
    ).all()


def match_team_ids(match):
    return [p.team_id for p in match.participations]


class TestValidatePairs:

    def test_normalizes_ids(self):
        pairs, failure = validate_pairs([["1", 2], (3.0, 4)])
        assert failure is None
        assert pairs == [(1, 2), (3, 4)]

    def test_rejects_empty(self):
        _, failure = validate_pairs([])
        assert failure.error == ErrorKind.INVALID_INPUT

    def test_rejects_malformed_pair(self):
        _, failure = validate_pairs([[1, 2], [3]])
        assert failure.details == {"pair_position": 2}

    def test_rejects_self_match(self):
        _, failure = validate_pairs([[5, 5]])
        assert failure.details == {"pair_position": 1, "team_id": 5}

    def test_rejects_team_in_two_pairs(self):
        _, failure = validate_pairs([[1, 2], [3, 1]])
        assert failure.error == ErrorKind.INVALID_INPUT
        assert failure.details == {"pair_position": 2, "team_id": 1}

    def test_rejects_non_positive_ids(self):
        _, failure = validate_pairs([[0, 2]])
        assert failure.error == ErrorKind.INVALID_INPUT


class TestCreateKnockoutRound:

    def test_creates_matches_in_bracket_order(self, session, make_championship, make_teams):
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")

        result = create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])

        assert result.success
        assert result.status_code == 201
        assert result.data["round"] == 1
        assert result.data["matches_created"] == 2

        matches = round_matches(session, championship.id, 1)
        assert [m.bracket_order for m in matches] == [1, 2]
        assert [match_team_ids(m) for m in matches] == [[a.id, b.id], [c.id, d.id]]
        assert all(m.is_knockout and m.status == MatchStatus.SCHEDULED for m in matches)

        session.refresh(championship)
        assert championship.format == ChampionshipFormat.KNOCKOUT
        assert enrolled_team_ids(session, championship.id) == sorted([a.id, b.id, c.id, d.id])

        state = get_knockout_state(session, championship.id)
        assert state["status"] == KnockoutStatus.ROUND_IN_PROGRESS.value
        assert state["current_round"] == 1

    def test_invalid_round(self, session, make_championship, make_teams):
        championship = make_championship()
        a, b = make_teams("Blue Wolves", "Golden Phoenix")
        assert create_knockout_round(session, championship, 0, [[a.id, b.id]]).error == ErrorKind.INVALID_INPUT

    def test_missing_team(self, session, make_championship, make_teams):
        championship = make_championship()
        a, b = make_teams("Blue Wolves", "Golden Phoenix")

        result = create_knockout_round(session, championship, 1, [[a.id, b.id], [404, a.id + 1000]])
        assert result.error == ErrorKind.NOT_FOUND
        assert result.details == {"missing_team_ids": [404, a.id + 1000]}
        assert session.exec(select(Match)).all() == []


class TestAdvanceKnockoutRound:

    def test_winners_are_paired_in_bracket_order(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d, e, f, g, h = make_teams(
            "Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions",
            "White Owls", "Red Panthers", "Striped Jaguars", "Swift Foxes",
        )
        pairs = [[a.id, b.id], [c.id, d.id], [e.id, f.id], [g.id, h.id]]
        assert create_knockout_round(session, championship, 1, pairs).success

        quarter_finals = round_matches(session, championship.id, 1)
        score_match(quarter_finals[0].id, {a.id: 2, b.id: 0})
        score_match(quarter_finals[1].id, {c.id: 0, d.id: 1})
        score_match(quarter_finals[2].id, {e.id: 3, f.id: 2})
        score_match(quarter_finals[3].id, {g.id: 1, h.id: 4})

        assert get_knockout_state(session, championship.id)["status"] == KnockoutStatus.ROUND_COMPLETE.value

        result = advance_knockout_round(session, championship, 1)
        assert result.success
        assert result.data["round"] == 2
        assert result.data["matches_created"] == 2

        semi_finals = round_matches(session, championship.id, 2)
        assert [match_team_ids(m) for m in semi_finals] == [[a.id, d.id], [e.id, h.id]]

        state = get_knockout_state(session, championship.id)
        assert state["status"] == KnockoutStatus.ROUND_IN_PROGRESS.value
        assert state["current_round"] == 2

    def test_full_bracket_to_champion(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])

        semis = round_matches(session, championship.id, 1)
        score_match(semis[0].id, {a.id: 1, b.id: 0})
        score_match(semis[1].id, {c.id: 2, d.id: 0})
        assert advance_knockout_round(session, championship, 1).success

        (final,) = round_matches(session, championship.id, 2)
        assert match_team_ids(final) == [a.id, c.id]
        score_match(final.id, {a.id: 0, c.id: 3})

        state = get_knockout_state(session, championship.id)
        assert state["status"] == KnockoutStatus.FINISHED.value
        assert state["champion_team_id"] == c.id

        result = advance_knockout_round(session, championship, 2)
        assert result.error == ErrorKind.INVALID_INPUT
        assert result.details == {"champion_team_id": c.id}

    def test_unfinished_round(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])
        first, second = round_matches(session, championship.id, 1)
        score_match(first.id, {a.id: 1, b.id: 0})

        result = advance_knockout_round(session, championship, 1)
        assert result.error == ErrorKind.INVALID_INPUT
        assert result.details == {"pending_match_ids": [second.id]}
        assert round_matches(session, championship.id, 2) == []

    def test_round_without_matches(self, session, make_championship):
        championship = make_championship()
        result = advance_knockout_round(session, championship, 3)
        assert result.error == ErrorKind.INVALID_INPUT
        assert result.details == {"round": 3}

    def test_next_round_already_exists(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])
        for match, scores in zip(round_matches(session, championship.id, 1), [{a.id: 1, b.id: 0}, {c.id: 1, d.id: 0}]):
            score_match(match.id, scores)

        assert advance_knockout_round(session, championship, 1).success
        result = advance_knockout_round(session, championship, 1)
        assert result.error == ErrorKind.CONFLICT
        assert result.details == {"round": 2}
        assert len(round_matches(session, championship.id, 2)) == 1

    def test_odd_number_of_winners(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d, e, f = make_teams(
            "Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions", "White Owls", "Red Panthers",
        )
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id], [e.id, f.id]])
        for match in round_matches(session, championship.id, 1):
            home, away = match_team_ids(match)
            score_match(match.id, {home: 2, away: 1})

        result = advance_knockout_round(session, championship, 1)
        assert result.error == ErrorKind.INVALID_INPUT
        assert result.details == {"winners": [a.id, c.id, e.id]}

    def test_drawn_match_blocks_advance(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])
        first, second = round_matches(session, championship.id, 1)
        score_match(first.id, {a.id: 1, b.id: 0})

        # A level score written outside result registration
        second.status = MatchStatus.FINISHED
        for participation in second.participations:
            participation.goals = 2
            session.add(participation)
        session.add(second)
        session.commit()

        result = advance_knockout_round(session, championship, 1)
        assert result.error == ErrorKind.CONFLICT
        assert result.details == {"match_id": second.id}

    def test_failed_write_keeps_the_bracket_unchanged(
        self, session, make_championship, make_teams, score_match, fail_second_match_flush,
    ):
        championship = make_championship()
        a, b, c, d, e, f, g, h = make_teams(
            "Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions",
            "White Owls", "Red Panthers", "Striped Jaguars", "Swift Foxes",
        )
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id], [e.id, f.id], [g.id, h.id]])
        for match in round_matches(session, championship.id, 1):
            home, away = match_team_ids(match)
            score_match(match.id, {home: 1, away: 0})

        flushes = fail_second_match_flush()
        result = advance_knockout_round(session, championship, 1)

        assert flushes["match_flushes"] == 2
        assert result.error == ErrorKind.INTERNAL
        assert round_matches(session, championship.id, 2) == []
        assert len(session.exec(select(MatchTeam)).all()) == 8

        state = get_knockout_state(session, championship.id)
        assert state["status"] == KnockoutStatus.ROUND_COMPLETE.value
        assert state["current_round"] == 1

    def test_busy_championship_is_a_conflict(self, monkeypatch, session, make_championship, make_teams, score_match):
        monkeypatch.setattr("schoolsports_backend.core.locks.LOCK_TIMEOUT_SECONDS", 0.05)
        championship = make_championship()
        a, b, c, d = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])
        for match in round_matches(session, championship.id, 1):
            home, away = match_team_ids(match)
            score_match(match.id, {home: 1, away: 0})

        with championship_lock(championship.id):
            result = advance_knockout_round(session, championship, 1)

        assert result.error == ErrorKind.CONFLICT
        assert round_matches(session, championship.id, 2) == []


class TestKnockoutMatchUpdates:

    def play_bracket(self, session, championship, teams, score_match):
        a, b, c, d = teams
        create_knockout_round(session, championship, 1, [[a.id, b.id], [c.id, d.id]])
        semis = round_matches(session, championship.id, 1)
        score_match(semis[0].id, {a.id: 2, b.id: 0})
        score_match(semis[1].id, {c.id: 1, d.id: 0})
        advance_knockout_round(session, championship, 1)
        (final,) = round_matches(session, championship.id, 2)
        return semis, final

    def test_superseded_match_cannot_change(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        teams = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        semis, _ = self.play_bracket(session, championship, teams, score_match)

        result = update_match_details(session, semis[0], {"play_day": datetime(2025, 6, 1, 10, 0)})

        assert result.error == ErrorKind.CONFLICT
        assert result.details == {"match_id": semis[0].id}
        session.refresh(semis[0])
        assert semis[0].play_day != datetime(2025, 6, 1, 10, 0)

    def test_finished_final_cannot_be_reopened(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        a, b, c, d = teams = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        _, final = self.play_bracket(session, championship, teams, score_match)
        score_match(final.id, {a.id: 0, c.id: 2})

        result = update_match_details(session, final, {"status": MatchStatus.SCHEDULED})

        assert result.error == ErrorKind.CONFLICT
        session.refresh(final)
        assert final.status == MatchStatus.FINISHED
        state = get_knockout_state(session, championship.id)
        assert state["status"] == KnockoutStatus.FINISHED.value
        assert state["champion_team_id"] == c.id

    def test_update_refreshes_cached_state(self, session, make_championship, make_teams, score_match):
        championship = make_championship()
        teams = make_teams("Blue Wolves", "Golden Phoenix", "Green Tigers", "Black Lions")
        _, final = self.play_bracket(session, championship, teams, score_match)

        # Drop the cached row so the update has to rebuild it
        session.delete(session.exec(select(KnockoutState)).one())
        session.commit()

        result = update_match_details(session, final, {"status": MatchStatus.IN_PROGRESS})

        assert result.success
        cached = session.exec(select(KnockoutState).where(KnockoutState.championship_id == championship.id)).one()
        assert cached.status == KnockoutStatus.ROUND_IN_PROGRESS
        assert cached.current_round == 2
