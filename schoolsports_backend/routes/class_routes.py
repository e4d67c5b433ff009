# schoolsports_backend/routes/class_routes.py

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session, select
from sqlalchemy.exc import IntegrityError

from schoolsports_backend.core.auth import require_admin
from schoolsports_backend.core.database import get_session
from schoolsports_backend.models.player_model import Player
from schoolsports_backend.models.school_class_model import SchoolClass, SchoolClassCreate, SchoolClassUpdate
from schoolsports_backend.routes.helpers import get_or_404

router = APIRouter()

ORDERING = (SchoolClass.year.desc(), SchoolClass.semester.desc(), SchoolClass.name)


@router.get("/")
def list_classes(session: Session = Depends(get_session)):
    return session.exec(select(SchoolClass).order_by(*ORDERING)).all()


@router.post("/", status_code=201)
def create_class(data: SchoolClassCreate, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    school_class = SchoolClass(**data.model_dump())
    session.add(school_class)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A class with this name already exists.")
    session.refresh(school_class)
    return school_class


@router.get("/year/{year}")
def list_classes_by_year(year: int, session: Session = Depends(get_session)):
    return session.exec(select(SchoolClass).where(SchoolClass.year == year).order_by(*ORDERING)).all()


@router.get("/course/{course}")
def list_classes_by_course(course: str, session: Session = Depends(get_session)):
    return session.exec(select(SchoolClass).where(SchoolClass.course == course).order_by(*ORDERING)).all()


@router.get("/{class_id}")
def get_class(class_id: int, session: Session = Depends(get_session)):
    return get_or_404(session, SchoolClass, class_id, "Class")


@router.put("/{class_id}")
@router.patch("/{class_id}")
def update_class(
    class_id: int,
    data: SchoolClassUpdate,
    session: Session = Depends(get_session),
    _admin: str = Depends(require_admin),
):
    school_class = get_or_404(session, SchoolClass, class_id, "Class")
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(school_class, key, value)
    session.add(school_class)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        raise HTTPException(status_code=409, detail="A class with this name already exists.")
    session.refresh(school_class)
    return school_class


@router.delete("/{class_id}")
def delete_class(class_id: int, session: Session = Depends(get_session), _admin: str = Depends(require_admin)):
    school_class = get_or_404(session, SchoolClass, class_id, "Class")

    has_players = session.exec(select(Player.id).where(Player.class_id == class_id)).first()
    if has_players is not None:
        raise HTTPException(status_code=409, detail="Class still has players and cannot be deleted.")

    session.delete(school_class)
    session.commit()
    return {"message": "Class deleted successfully."}
