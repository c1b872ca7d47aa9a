import pytest

from transcript_records.chunks import Group, Leaf
from transcript_records.errors import StructuralMismatch
from transcript_records.records import Course, Transfer
from transcript_records.transfers import merge_page_breaks, process_transfers


def G(*children):
    return Group(tuple(children))


def row(*texts):
    return G(*(Leaf(t) for t in texts))


# The first row is one column short of the spacer-led rows that follow it.
FIRST_ROW = row("Course", "ENGR", "100", "Engineering Design", "Q", "3.00", "3.00", "B+", "T", "0.00")
SCHOOL_ROW = row("", "Acme College", "", "", "", "", "", "", "", "")


def test_course_with_institution_row():
    chunks = [Leaf("TRANSFER COURSES"), Leaf("Subject"), FIRST_ROW, SCHOOL_ROW]
    assert process_transfers(chunks) == [
        Transfer(course=Course(subject="ENGR", id="100", grade="B+"), school="Acme College")
    ]


def test_rows_without_institution_have_no_school():
    chunks = [
        FIRST_ROW,
        row("", "MATH", "151", "Calculus I", "3.00", "3.00", "A", "B-Sci", "T"),
        row("", "Douglas College"),
    ]
    transfers = process_transfers(chunks)
    assert transfers == [
        Transfer(course=Course("ENGR", "100", "B+"), school=None),
        Transfer(course=Course("MATH", "151", "A"), school="Douglas College"),
    ]


def test_page_break_rows_are_rejoined():
    chunks = [
        row("Course", "CMPT", "120", "Intro", "3.00", "SFUSR0101"),
        row("3.00", "A-", "T", "0.00"),
        SCHOOL_ROW,
    ]
    assert process_transfers(chunks) == [
        Transfer(course=Course("CMPT", "120", "A-"), school="Acme College")
    ]


def test_merge_drops_tag_and_removes_one_row():
    rows = [["a", "b", "SFUSR2"], ["c", "d"], ["e"]]
    merged = merge_page_breaks(rows)
    assert merged == [["a", "b", "c", "d"], ["e"]]
    assert len(merged) == 2


def test_merge_is_a_single_forward_sweep():
    rows = [["a", "SFUSR1"], ["b", "SFUSR2"], ["c"]]
    assert merge_page_breaks(rows) == [["a", "b", "SFUSR2"], ["c"]]


def test_unknown_grade_is_fatal():
    chunks = [
        row("Course", "ENGR", "100", "Engineering Design", "3.00", "3.00", "Z", "T", "0.00"),
        SCHOOL_ROW,
    ]
    with pytest.raises(StructuralMismatch, match="grade"):
        process_transfers(chunks)


def test_short_row_is_fatal():
    with pytest.raises(StructuralMismatch):
        process_transfers([row("Course", "ENGR"), SCHOOL_ROW])


def test_empty_section_is_fatal():
    with pytest.raises(StructuralMismatch):
        process_transfers([Leaf("TRANSFER COURSES")])
