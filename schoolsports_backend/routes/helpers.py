# helpers.py
# Small lookups shared by the routers.

from fastapi import HTTPException
from sqlmodel import Session


def get_or_404(session: Session, model, object_id: int, label: str):
    """Fetch a row by primary key or answer 404 "<label> <id> not found."."""
    instance = session.get(model, object_id)
    if not instance:
        raise HTTPException(status_code=404, detail=f"{label} {object_id} not found.")
    return instance
