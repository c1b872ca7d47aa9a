from __future__ import annotations

import logging
from collections.abc import Sequence

from .chunks import Chunk, is_group, row_texts
from .errors import StructuralMismatch
from .records import Course, Transfer, check_grade, is_qualifier, matches_breadth

logger = logging.getLogger(__name__)

PAGE_BREAK_TAG = "SFUSR"
# Rows that carry an institution name have one of these widths.
SCHOOL_ROW_WIDTHS = (10, 2)
# A full-width row has an extra leading spacer before the course columns.
SPACED_ROW_WIDTH = 10
SUBJECT_COLUMN = 1
COURSE_ID_COLUMN = 2
GRADE_COLUMN = 6


def _is_transfer_column(s: str) -> bool:
    return not is_qualifier(s) and not matches_breadth(s)


def _reduce_rows(chunks: Sequence[Chunk]) -> list[list[str]]:
    # Leading loose strings carry no transfer information; only groups are rows.
    return [row_texts(c, _is_transfer_column) for c in chunks if is_group(c)]


def merge_page_breaks(rows: list[list[str]]) -> list[list[str]]:
    """Rejoin rows split over a page break, in one forward sweep."""
    i = 0
    while i < len(rows) - 1:
        if rows[i] and rows[i][-1].startswith(PAGE_BREAK_TAG):
            rows[i].pop()
            rows[i].extend(rows.pop(i + 1))
        i += 1
    return rows


def _column(row: list[str], index: int) -> str:
    if index >= len(row):
        raise StructuralMismatch(f"Transfer row too short for column {index}: {row!r}")
    return row[index]


def process_transfers(chunks: Sequence[Chunk]) -> list[Transfer]:
    rows = _reduce_rows(chunks)
    if not rows:
        raise StructuralMismatch("Transfer section has no rows")

    # The first row still has a header column and lacks the spacer the others carry.
    rows[0].insert(0, "")
    rows = merge_page_breaks(rows)
    logger.debug("transfer rows: %s", rows)

    # A transfer is spread over a course row and, when known, an institution row.
    transfers: list[Transfer] = []
    for row, following in zip(rows, rows[1:]):
        school = following[1] if len(following) in SCHOOL_ROW_WIDTHS else None
        offset = 1 if len(row) == SPACED_ROW_WIDTH else 0
        grade = check_grade(_column(row, offset + GRADE_COLUMN), row)
        transfers.append(
            Transfer(
                course=Course(
                    subject=row[offset + SUBJECT_COLUMN],
                    id=row[offset + COURSE_ID_COLUMN],
                    grade=grade,
                ),
                school=school,
            )
        )
    return transfers
