from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pdfminer.psparser import PSLiteral, literal_name

from .chunks import Chunk, Group, Leaf
from .document import Operation, decode_text, open_document, page_fonts, page_operations
from .errors import StructuralMismatch

logger = logging.getLogger(__name__)

BLOCK_END = "ET"
FONT_SELECT = "Tf"
SHOW_TEXT = {"Tj", "TJ"}


def group_text_blocks(operations: Sequence[Operation]) -> list[list[Operation]]:
    """Split operations at every text-block end; separators are dropped, empty blocks kept."""
    blocks: list[list[Operation]] = [[]]
    for op in operations:
        if op.operator == BLOCK_END:
            blocks.append([])
        else:
            blocks[-1].append(op)
    return blocks


def operands_to_chunk(encoding: str | None, operands: Sequence[Any]) -> Group:
    chunks: list[Chunk] = []
    for operand in operands:
        if isinstance(operand, bytes):
            chunks.append(Leaf(decode_text(encoding, operand)))
        elif isinstance(operand, list):
            chunks.append(operands_to_chunk(encoding, operand))
    return Group(tuple(chunks))


def _font_name(op: Operation) -> str:
    if not op.operands:
        raise StructuralMismatch("Font select operator without a font operand")
    name = op.operands[0]
    if not isinstance(name, PSLiteral):
        raise StructuralMismatch(f"Font select operand is not a name: {name!r}")
    return str(literal_name(name))


def block_to_chunk(block: Sequence[Operation], encodings: Mapping[str, str]) -> Group:
    # The current encoding starts unset in every block.
    encoding: str | None = None
    chunks: list[Chunk] = []
    for op in block:
        if op.operator == FONT_SELECT:
            encoding = encodings.get(_font_name(op))
        elif op.operator in SHOW_TEXT:
            chunks.append(operands_to_chunk(encoding, op.operands))
    return Group(tuple(chunks))


def page_to_chunks(operations: Sequence[Operation], encodings: Mapping[str, str]) -> list[Chunk]:
    return [block_to_chunk(b, encodings) for b in group_text_blocks(operations)]


def extract_page_chunks(path: str | Path) -> list[list[Chunk]]:
    """Return the raw (unsimplified) block chunks of every page, in page order."""
    pages: list[list[Chunk]] = []
    with open_document(path) as pdf:
        for page in pdf.pages:
            encodings = page_fonts(page)
            chunks = page_to_chunks(page_operations(page), encodings)
            logger.debug("page %d: %d blocks, fonts %s", page.page_number, len(chunks), encodings)
            pages.append(chunks)
    return pages
