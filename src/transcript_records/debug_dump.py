from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Optional, Pattern

from .chunks import Chunk, Group, simplify
from .combine import combine_pages
from .errors import TranscriptError
from .grouping import extract_page_chunks

PAGE_RANGE = re.compile(r"^(\d+)(?:-(\d+))?$")


def page_selection(value: str) -> frozenset[int]:
    """argparse type for ``--pages``: comma separated numbers and ranges, e.g. ``1-2,4``."""
    pages: set[int] = set()
    for piece in filter(None, (s.strip() for s in value.split(","))):
        m = PAGE_RANGE.match(piece)
        if not m:
            raise argparse.ArgumentTypeError(f"bad page selection {piece!r}")
        first = int(m.group(1))
        last = int(m.group(2) or first)
        pages.update(range(min(first, last), max(first, last) + 1))
    if not pages:
        raise argparse.ArgumentTypeError("empty page selection")
    return frozenset(pages)


def render(chunk: Chunk) -> str:
    """Compact one-line rendering: leaves quoted, groups bracketed."""
    if isinstance(chunk, Group):
        return "[" + ", ".join(render(c) for c in chunk.children) + "]"
    return repr(chunk.text)


def format_sequence(chunks: list[Chunk], rx: Optional[Pattern[str]] = None) -> list[str]:
    lines: list[str] = []
    size = len(chunks)
    for i, c in enumerate(chunks):
        text = render(c)
        if rx and not rx.search(text):
            continue
        # negative index too, since footer and student id are found from the end
        lines.append(f"{i:5d} {i - size:6d}  {text}")
    return lines


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="transcript-records-dump",
        description="Dump the simplified chunk sequence of a transcript for debugging",
    )
    ap.add_argument("pdf", help="Path to PDF")
    ap.add_argument("--pages", type=page_selection, help="Pages to include, e.g. 1-2,4", default=None)
    ap.add_argument("--grep", help="Regex to filter elements", default=None)
    ap.add_argument(
        "--combined",
        action="store_true",
        help="Dump the footer-stripped document sequence instead of each page",
    )
    args = ap.parse_args(argv if argv is not None else sys.argv[1:])
    if args.combined and args.pages:
        ap.error("--pages selects single pages and cannot be used with --combined")

    path = Path(args.pdf)
    if not path.exists():
        print("File not found:", path)
        return 1

    rx: Optional[Pattern[str]] = re.compile(args.grep, re.I) if args.grep else None
    try:
        pages = [[simplify(c) for c in page] for page in extract_page_chunks(path)]
        if args.combined:
            print("\n".join(format_sequence(combine_pages(pages), rx)))
            return 0
    except TranscriptError as e:
        print("Cannot dump", path.name + ":", e)
        return 1

    for pidx, page in enumerate(pages, start=1):
        if args.pages and pidx not in args.pages:
            continue
        print(f"[page {pidx}] {len(page)} blocks")
        for line in format_sequence(page, rx):
            print(line)
        print("-" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
