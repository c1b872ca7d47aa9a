from __future__ import annotations

from dataclasses import dataclass, field

from .errors import StructuralMismatch

TERMS = ("Spring", "Summer", "Fall")

POSSIBLE_GRADES = frozenset(
    {
        # Standard passing grades
        "A+", "A", "A-",
        "B+", "B", "B-",
        "C+", "C", "C-",
        "D",
        "P",
        # Temporary grades
        "DE", "GN", "IP",
        # Forms of failing
        "F", "FD", "N",
        # Notations
        "AE", "AU", "CC", "CF", "CN", "CR", "FX", "NC", "WD", "WE", "TR",
    }
)  # fmt: skip

# WQB designations add optional columns to a row.
QUALIFIERS = frozenset({"W", "Q", "Online"})
BREADTH_TAGS = ("B-Sci", "B-Hum", "B-Soc")
PERM_DATE_LABEL = "Perm.Dt:"


@dataclass(frozen=True)
class Plan:
    name: str


@dataclass(frozen=True)
class Course:
    subject: str
    id: str
    grade: str


@dataclass(frozen=True)
class Transfer:
    course: Course
    school: str | None = None


@dataclass(frozen=True)
class Semester:
    year: str
    term: str
    is_good_standing: bool = True
    courses: list[Course] = field(default_factory=list)


@dataclass(frozen=True)
class StudentInfo:
    id: str
    plan: Plan
    transfers: list[Transfer] = field(default_factory=list)
    semesters: list[Semester] = field(default_factory=list)


def is_qualifier(s: str) -> bool:
    return s in QUALIFIERS


def matches_breadth(s: str) -> bool:
    return any(tag in s for tag in BREADTH_TAGS)


def is_perm_dt(s: str) -> bool:
    return s == PERM_DATE_LABEL or len(s.split("-")) == 3


def check_grade(grade: str, row: list[str]) -> str:
    """Return ``grade`` if it is in the grade vocabulary, otherwise fail on ``row``."""
    if grade not in POSSIBLE_GRADES:
        raise StructuralMismatch(f"Unexpected grade {grade!r} in row {row!r}")
    return grade
