from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence
from pathlib import Path

from .chunks import Chunk, simplify
from .combine import combine_pages
from .errors import OptionalSectionAbsent, TranscriptError
from .export import open_writer, write_long_csv
from .grouping import extract_page_chunks
from .records import StudentInfo
from .sections import locate_sections, read_plan
from .semesters import process_semesters
from .transfers import process_transfers

logger = logging.getLogger("transcript_records")


def process_chunks(chunks: Sequence[Chunk], require_transfers: bool = True) -> StudentInfo:
    """
    Assemble a StudentInfo from the combined chunk sequence of one transcript.

    The transfer section is optional in the layout, but by default a
    transcript without one is rejected with OptionalSectionAbsent; pass
    ``require_transfers=False`` to get an empty transfer list instead.
    """
    sections = locate_sections(chunks)
    if sections.transfers is not None:
        transfers = process_transfers(chunks[sections.transfers])
    elif require_transfers:
        raise OptionalSectionAbsent("Transfer marker not found")
    else:
        transfers = []
    return StudentInfo(
        id=sections.student_id,
        plan=read_plan(chunks[sections.plan_index]),
        transfers=transfers,
        semesters=process_semesters(chunks[sections.program]),
    )


def run_file(path: Path, require_transfers: bool = True) -> StudentInfo:
    pages = extract_page_chunks(path)
    simplified = [[simplify(c) for c in page] for page in pages]
    combined = combine_pages(simplified)
    logger.debug("%s: %d pages, %d combined chunks", path.name, len(pages), len(combined))
    return process_chunks(combined, require_transfers=require_transfers)


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.environ.get("TRANSCRIPT_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="transcript-records")
    parser.add_argument("inputs", nargs="+", help="Transcript PDF file(s)")
    parser.add_argument(
        "-n",
        "--newid",
        type=int,
        required=True,
        help="Anonymized student id for the first input; later inputs count up from it",
    )
    parser.add_argument("-o", "--out", default=None, help="CSV output path (default: stdout)")
    parser.add_argument(
        "--allow-missing-transfers",
        action="store_true",
        help="Accept transcripts without a TRANSFER COURSES section",
    )
    parser.add_argument("--verbose", action="store_true", help="Log extraction details to stderr")
    args = parser.parse_args(argv if argv is not None else sys.argv[1:])
    _configure_logging(args.verbose)

    out = open(args.out, "w", newline="", encoding="utf-8") if args.out else sys.stdout
    failed = 0
    try:
        writer = open_writer(out)
        for offset, inp in enumerate(args.inputs):
            p = Path(inp)
            try:
                student = run_file(p, require_transfers=not args.allow_missing_transfers)
            except TranscriptError as e:
                failed += 1
                logger.error("%s: %s", p.name, e)
                continue
            write_long_csv(writer, student, args.newid + offset)
            logger.info(
                "%s: %d transfers, %d semesters",
                p.name, len(student.transfers), len(student.semesters),
            )
        out.flush()
    finally:
        if out is not sys.stdout:
            out.close()
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
