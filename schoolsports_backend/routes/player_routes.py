# schoolsports_backend/routes/player_routes.py

from fastapi import APIRouter, Depends
from sqlmodel import Session, select

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.models.player_model import Player, PlayerCreate, PlayerUpdate
from schoolsports_backend.models.school_class_model import SchoolClass
from schoolsports_backend.models.team_model import Team
from schoolsports_backend.routes.helpers import get_or_404

router = APIRouter()


def serialize_player(player: Player) -> dict:
    """Player with a short summary of its team and class."""
    team = player.team
    school_class = player.school_class
    return {
        "id": player.id,
        "name": player.name,
        "age": player.age,
        "class_id": player.class_id,
        "team_id": player.team_id,
        "team": {"id": team.id, "name": team.name, "modality": team.modality} if team else None,
        "class": {
            "id": school_class.id,
            "name": school_class.name,
            "course": school_class.course,
            "year": school_class.year,
            "semester": school_class.semester,
        } if school_class else None,
    }


@router.get("/")
def list_players(session: Session = Depends(get_session)):
    players = session.exec(select(Player).order_by(Player.name)).all()
    return [serialize_player(p) for p in players]


@router.post("/", status_code=201)
def create_player(data: PlayerCreate, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    get_or_404(session, SchoolClass, data.class_id, "Class")
    if data.team_id is not None:
        get_or_404(session, Team, data.team_id, "Team")

    player = Player(**data.model_dump())
    session.add(player)
    session.commit()
    session.refresh(player)
    return serialize_player(player)


@router.get("/team/{team_id}")
def list_players_by_team(team_id: int, session: Session = Depends(get_session)):
    get_or_404(session, Team, team_id, "Team")
    players = session.exec(select(Player).where(Player.team_id == team_id).order_by(Player.name)).all()
    return [serialize_player(p) for p in players]


@router.get("/class/{class_id}")
def list_players_by_class(class_id: int, session: Session = Depends(get_session)):
    get_or_404(session, SchoolClass, class_id, "Class")
    players = session.exec(select(Player).where(Player.class_id == class_id).order_by(Player.name)).all()
    return [serialize_player(p) for p in players]


@router.get("/{player_id}")
def get_player(player_id: int, session: Session = Depends(get_session)):
    return serialize_player(get_or_404(session, Player, player_id, "Player"))


@router.put("/{player_id}")
@router.patch("/{player_id}")
def update_player(
    player_id: int,
    data: PlayerUpdate,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    player = get_or_404(session, Player, player_id, "Player")
    changes = data.model_dump(exclude_unset=True)

    if changes.get("class_id") is not None:
        get_or_404(session, SchoolClass, changes["class_id"], "Class")
    elif "class_id" in changes:
        changes.pop("class_id")  # a player always belongs to a class
    if changes.get("team_id") is not None:
        get_or_404(session, Team, changes["team_id"], "Team")

    for key, value in changes.items():
        if value is None and key != "team_id":
            continue
        setattr(player, key, value)
    session.add(player)
    session.commit()
    session.refresh(player)
    return serialize_player(player)


@router.delete("/{player_id}")
def delete_player(player_id: int, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    player = get_or_404(session, Player, player_id, "Player")
    session.delete(player)
    session.commit()
    return {"message": "Player deleted successfully."}
