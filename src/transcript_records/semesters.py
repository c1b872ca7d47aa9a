from __future__ import annotations

import logging
from collections.abc import Sequence

from .chunks import Chunk, as_leaf_text, is_group, row_texts
from .records import (
    TERMS,
    Course,
    Semester,
    check_grade,
    is_perm_dt,
    is_qualifier,
    matches_breadth,
)

logger = logging.getLogger(__name__)

SUMMARY_SUFFIX = "GPA:"
SUBJECT_COLUMN = 1
COURSE_ID_COLUMN = 2
GRADE_COLUMN = 6


def get_year_term(s: str) -> tuple[str, str] | None:
    pieces = s.split()
    if len(pieces) >= 2 and pieces[1] in TERMS:
        return pieces[0], pieces[1]
    return None


def _term_header(chunk: Chunk) -> tuple[str, str] | None:
    text = as_leaf_text(chunk)
    return get_year_term(text) if text is not None else None


def split_terms(chunks: Sequence[Chunk]) -> list[tuple[tuple[str, str], list[Chunk]]]:
    """
    Split the program section before every term header.

    Returns ``((year, term), elements)`` per term, where ``elements`` follow
    the header. Material before the first header is dropped.
    """
    terms: list[tuple[tuple[str, str], list[Chunk]]] = []
    for i, chunk in enumerate(chunks):
        header = _term_header(chunk) if i > 0 else None
        if header is not None:
            terms.append((header, []))
        elif terms:
            terms[-1][1].append(chunk)
    return terms


def _is_course_column(s: str) -> bool:
    return not is_qualifier(s) and not matches_breadth(s) and not is_perm_dt(s)


def _is_course_row(row: list[str]) -> bool:
    # GPA summaries and courses still waiting for a grade are not records.
    return (
        len(row) > GRADE_COLUMN
        and not row[0].endswith(SUMMARY_SUFFIX)
        and row[GRADE_COLUMN] != ""
    )


def process_semesters(chunks: Sequence[Chunk]) -> list[Semester]:
    semesters: list[Semester] = []
    for (year, term), elements in split_terms(chunks):
        rows = [row_texts(c, _is_course_column) for c in elements if is_group(c)]
        courses = [
            Course(
                subject=r[SUBJECT_COLUMN],
                id=r[COURSE_ID_COLUMN],
                grade=check_grade(r[GRADE_COLUMN], r),
            )
            for r in rows
            if _is_course_row(r)
        ]
        if not courses:
            logger.debug("%s %s: no graded courses, skipped", year, term)
            continue
        semesters.append(Semester(year=year, term=term, is_good_standing=True, courses=courses))
    return semesters
