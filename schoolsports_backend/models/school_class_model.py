# school_class_model.py
# Defines SchoolClass (a class of students, e.g. "Computing A") and its request schemas.

from enum import Enum
from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from schoolsports_backend.core.timeutils import utc_now


class Semester(str, Enum):
    FIRST = "1"
    SECOND = "2"


class SchoolClass(SQLModel, table=True):
    __tablename__ = "school_class"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    description: Optional[str] = None
    year: int = Field(index=True)
    semester: Semester
    course: str = Field(index=True)
    max_students: int = Field(default=30)
    created_at: datetime = Field(default_factory=utc_now)


class SchoolClassCreate(SQLModel):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    year: int = Field(ge=2020, le=2030)
    semester: Semester
    course: str = Field(min_length=2, max_length=100)
    max_students: int = Field(default=30, ge=1, le=100)


class SchoolClassUpdate(SQLModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    year: Optional[int] = Field(default=None, ge=2020, le=2030)
    semester: Optional[Semester] = None
    course: Optional[str] = Field(default=None, min_length=2, max_length=100)
    max_students: Optional[int] = Field(default=None, ge=1, le=100)
