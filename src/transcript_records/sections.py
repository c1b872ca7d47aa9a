from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from .chunks import Chunk, Leaf, as_children, as_leaf_text
from .errors import StructuralMismatch
from .records import Plan

logger = logging.getLogger(__name__)

PLAN_MARKER = "Plan"
TRANSFER_MARKER = "TRANSFER COURSES"
PROGRAM_MARKER = "Program:"
END_MARKER = "TOTAL UNITS PASSED BY ACADEMIC GROUP"
# The student id is printed 3 elements before the end of the last page.
STUDENT_ID_OFFSET_FROM_END = 3
# Inside the plan block, the plan code is the second to last element.
PLAN_NAME_OFFSET_FROM_END = 2


@dataclass(frozen=True)
class Sections:
    plan_index: int
    transfers: slice | None
    program: slice
    student_id: str


def find_marker(chunks: Sequence[Chunk], start: int, marker: str) -> int | None:
    """Index of the first leaf equal to ``marker`` at or after ``start``."""
    target = Leaf(marker)
    for i in range(start, len(chunks)):
        if chunks[i] == target:
            return i
    return None


def _require_marker(chunks: Sequence[Chunk], start: int, marker: str) -> int:
    index = find_marker(chunks, start, marker)
    if index is None:
        raise StructuralMismatch(f"Marker {marker!r} not found")
    return index


def locate_sections(chunks: Sequence[Chunk]) -> Sections:
    plan_index = _require_marker(chunks, 0, PLAN_MARKER) + 1
    if plan_index >= len(chunks):
        raise StructuralMismatch("Plan marker is the last element")

    # Transfer credits are optional; the caller decides what a missing section means.
    transfer_index = find_marker(chunks, plan_index, TRANSFER_MARKER)
    program_index = _require_marker(chunks, plan_index, PROGRAM_MARKER)
    end_index = _require_marker(chunks, program_index, END_MARKER)

    id_index = len(chunks) - STUDENT_ID_OFFSET_FROM_END
    id_chunk = chunks[id_index] if id_index >= 0 else None
    student_id = as_leaf_text(id_chunk) if id_chunk is not None else None
    if student_id is None:
        raise StructuralMismatch(f"Bad student id element: {id_chunk!r}")

    logger.debug(
        "sections: plan=%d transfers=%s program=%d..%d",
        plan_index, transfer_index, program_index, end_index,
    )
    return Sections(
        plan_index=plan_index,
        transfers=None if transfer_index is None else slice(transfer_index, program_index),
        program=slice(program_index, end_index),
        student_id=student_id,
    )


def read_plan(chunk: Chunk) -> Plan:
    children = as_children(chunk)
    if children and len(children) >= PLAN_NAME_OFFSET_FROM_END:
        name = as_leaf_text(children[-PLAN_NAME_OFFSET_FROM_END])
        if name is not None:
            return Plan(name=name)
    raise StructuralMismatch(f"Bad plan chunk found: {chunk!r}")
