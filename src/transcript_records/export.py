from __future__ import annotations

import csv
from typing import Any

from .records import StudentInfo

MISSING = "None"


def long_rows(student: StudentInfo, new_id: int) -> list[list[str]]:
    """Flatten a student into one row per transfer and one per completed course."""
    rows: list[list[str]] = []
    for t in student.transfers:
        rows.append(
            [
                str(new_id),
                student.plan.name,
                MISSING,
                MISSING,
                t.course.subject,
                t.course.id,
                t.course.grade,
                t.school if t.school is not None else MISSING,
            ]
        )
    for semester in student.semesters:
        for c in semester.courses:
            rows.append(
                [
                    str(new_id),
                    student.plan.name,
                    semester.year,
                    semester.term,
                    c.subject,
                    c.id,
                    c.grade,
                    "",
                ]
            )
    return rows


def write_long_csv(writer: Any, student: StudentInfo, new_id: int) -> None:
    """Write ``student`` through a ``csv.writer``-like object."""
    writer.writerows(long_rows(student, new_id))


def open_writer(stream: Any) -> Any:
    return csv.writer(stream, lineterminator="\n")
