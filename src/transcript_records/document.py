from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pdfplumber
from pdfminer.encodingdb import EncodingDB
from pdfminer.pdfinterp import PDFContentParser
from pdfminer.psexceptions import PSEOF
from pdfminer.psparser import PSKeyword, PSLiteral, keyword_name, literal_name
from pdfminer.pdftypes import dict_value, resolve1
from pdfminer.utils import decode_text as pdfdoc_decode

from .errors import DocumentError, TranscriptError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "StandardEncoding"
# Simple-font tables pdfminer ships; Identity-H is two-byte big endian.
TABLE_ENCODINGS = {"StandardEncoding", "MacRomanEncoding", "WinAnsiEncoding", "PDFDocEncoding"}
IDENTITY_ENCODING = "Identity-H"


@dataclass(frozen=True)
class Operation:
    operator: str
    operands: list[Any] = field(default_factory=list)


@contextmanager
def open_document(path: str | Path) -> Iterator[Any]:
    """Open a PDF with pdfplumber, wrapping low level failures in DocumentError."""
    try:
        pdf = pdfplumber.open(path)
    except Exception as e:
        raise DocumentError(f"Cannot open {path}: {e}") from e
    try:
        yield pdf
    except TranscriptError:
        raise
    except Exception as e:
        # pdfplumber reads pages lazily, so broken pages fail inside the block.
        raise DocumentError(f"Cannot read {path}: {e}") from e
    finally:
        pdf.close()


def _encoding_name(font_ref: object) -> str:
    font = resolve1(font_ref)
    if not isinstance(font, dict):
        return DEFAULT_ENCODING
    encoding = resolve1(font.get("Encoding"))
    if isinstance(encoding, PSLiteral):
        return str(literal_name(encoding))
    return DEFAULT_ENCODING


def page_fonts(page: Any) -> dict[str, str]:
    """Map each font resource name on ``page`` to its encoding name."""
    resources = resolve1(page.page_obj.resources) or {}
    fonts = resolve1(resources.get("Font")) if isinstance(resources, dict) else None
    if not fonts:
        return {}
    return {str(name): _encoding_name(ref) for name, ref in dict_value(fonts).items()}


def page_operations(page: Any) -> list[Operation]:
    """Decode the page's content streams into operator/operand pairs, in order."""
    streams = [s for s in (page.page_obj.contents or []) if s is not None]
    if not streams:
        return []
    ops: list[Operation] = []
    operands: list[Any] = []
    try:
        parser = PDFContentParser(streams)
        while True:
            try:
                _, obj = parser.nextobject()
            except PSEOF:
                break
            if isinstance(obj, PSKeyword):
                ops.append(Operation(str(keyword_name(obj)), operands))
                operands = []
            else:
                operands.append(obj)
    except Exception as e:
        raise DocumentError(f"Cannot decode content of page {page.page_number}: {e}") from e
    logger.debug("page %d: %d operations", page.page_number, len(ops))
    return ops


def decode_text(encoding: str | None, data: bytes) -> str:
    if encoding in TABLE_ENCODINGS:
        table = EncodingDB.get_encoding(encoding)
        return "".join(table[b] for b in data if b in table)
    if encoding == IDENTITY_ENCODING:
        return data.decode("utf-16-be", errors="replace")
    return pdfdoc_decode(data)
