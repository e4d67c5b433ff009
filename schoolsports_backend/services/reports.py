# reports.py
# Admin reports: match results, champions, players by modality and top teams.

from typing import Optional

from sqlmodel import Session, select

from schoolsports_backend.core.config import TOP_TEAMS_DEFAULT_LIMIT
from schoolsports_backend.models.championship_model import Championship
from schoolsports_backend.models.match_model import Match, MatchStatus, STATUS_LABELS
from schoolsports_backend.models.player_model import Player
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.services.standings import load_finished_matches, compute_standings


def status_label(status: int) -> str:
    try:
        return STATUS_LABELS[MatchStatus(status)]
    except ValueError:
        return "Unknown"


def describe_side(participation) -> dict:
    if participation is None:
        return {"team_id": None, "name": "N/A", "goals": 0, "points": 0}
    return {
        "team_id": participation.team_id,
        "name": participation.team.name if participation.team else "N/A",
        "goals": participation.goals or 0,
        "points": participation.points or 0,
    }


def result_text(team_a: dict, team_b: dict) -> str:
    if team_a["team_id"] is None or team_b["team_id"] is None:
        return "Not available"
    if team_a["goals"] > team_b["goals"]:
        return f"{team_a['name']} won"
    if team_b["goals"] > team_a["goals"]:
        return f"{team_b['name']} won"
    return "Draw"


def championship_summary(championship: Championship) -> dict:
    return {
        "id": championship.id,
        "name": championship.name,
        "year": championship.year,
        "modality": championship.modality,
        "format": championship.format,
    }


def match_results_report(session: Session, championship: Championship) -> list:
    """Every match of the championship as "team A x team B", most recent first."""
    matches = session.exec(
        select(Match)
        .where(Match.championship_id == championship.id)
        .order_by(Match.play_day.desc(), Match.created_at.desc(), Match.id.desc())
    ).all()

    results = []
    for match in matches:
        sides = list(match.participations) + [None, None]
        team_a = describe_side(sides[0])
        team_b = describe_side(sides[1])
        results.append({
            "match_id": match.id,
            "date": match.play_day.date().isoformat() if match.play_day else "Not scheduled",
            "status": status_label(match.status),
            "round": match.round_number,
            "team_a": team_a,
            "team_b": team_b,
            "result": result_text(team_a, team_b),
        })
    return results


def champions_report(session: Session, championship: Championship) -> dict:
    """First, second and third place of the ranking."""
    matches = load_finished_matches(session, championship.id)
    ranking = compute_standings(matches)

    summary = championship_summary(championship)
    summary["is_finished"] = len(matches) > 0 and len(ranking) >= 3

    return {
        "championship": summary,
        "champion": ranking[0] if len(ranking) > 0 else None,
        "runner_up": ranking[1] if len(ranking) > 1 else None,
        "third_place": ranking[2] if len(ranking) > 2 else None,
        "total_teams": len(ranking),
        "total_matches": len(matches),
    }


def top_teams_report(session: Session, championship: Championship, limit: Optional[int] = None) -> dict:
    """Extended ranking (wins and losses as extra tie-breaks, win rate) cut to the top `limit` teams."""
    limit = TOP_TEAMS_DEFAULT_LIMIT if limit is None else limit
    matches = load_finished_matches(session, championship.id)
    ranking = compute_standings(matches, extended=True)
    return {
        "championship": championship_summary(championship),
        "ranking": ranking[:limit],
        "total_teams": len(ranking),
        "total_matches": len(matches),
    }


def players_by_modality_report(session: Session) -> dict:
    """Player counts per team modality and per team. Players without a team are skipped."""
    rows = session.exec(
        select(Player.id, Team.id, Team.name, Team.modality).join(Team, Team.id == Player.team_id)
    ).all()

    by_modality = {}
    by_team = {}
    for _player_id, team_id, team_name, modality in rows:
        if not modality:
            continue

        stats = by_modality.setdefault(modality, {"modality": modality, "total_players": 0, "teams": set()})
        stats["total_players"] += 1
        stats["teams"].add(team_id)

        team_stats = by_team.setdefault(team_id, {
            "team_id": team_id,
            "team_name": team_name,
            "modality": modality,
            "player_count": 0,
        })
        team_stats["player_count"] += 1

    modality_rows = [
        {"modality": s["modality"], "total_players": s["total_players"], "total_teams": len(s["teams"])}
        for s in sorted(by_modality.values(), key=lambda s: s["modality"])
    ]
    team_rows = sorted(by_team.values(), key=lambda t: (t["modality"], -t["player_count"], t["team_id"]))

    return {"by_modality": modality_rows, "by_team": team_rows}
