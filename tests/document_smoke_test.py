from pathlib import Path
from tempfile import TemporaryDirectory

import pytest
from reportlab.pdfgen import canvas  # type: ignore

from transcript_records.chunks import leaf_texts, simplify
from transcript_records.document import open_document, page_fonts, page_operations
from transcript_records.errors import DocumentError, StructuralMismatch
from transcript_records.grouping import extract_page_chunks
from transcript_records.parse_transcript import main


def _make_pdf(path: Path) -> None:
    c = canvas.Canvas(str(path))
    c.setFont("Helvetica", 12)
    c.drawString(72, 720, "Plan")
    c.drawString(72, 690, "CMPT 120 Intro Comp Sci A-")
    c.showPage()
    c.setFont("Helvetica", 12)
    c.drawString(72, 720, "TRANSFER COURSES")
    c.save()


def test_pages_decode_to_chunks():
    with TemporaryDirectory() as td:
        pdf = Path(td) / "sample.pdf"
        _make_pdf(pdf)
        pages = extract_page_chunks(pdf)

        with open_document(pdf) as doc:
            ops = page_operations(doc.pages[0])
            fonts = page_fonts(doc.pages[0])

    assert len(pages) == 2
    first = [t for c in pages[0] for t in leaf_texts(simplify(c))]
    assert first.index("Plan") < first.index("CMPT 120 Intro Comp Sci A-")
    assert "TRANSFER COURSES" in [t for c in pages[1] for t in leaf_texts(c)]
    assert "ET" in [o.operator for o in ops]
    assert fonts


def _broken_contents_pdf(path: Path) -> None:
    # Valid catalog and page tree; the page content claims FlateDecode but is not zlib data.
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] /Contents 4 0 R >>",
        b"<< /Length 12 /Filter /FlateDecode >>\nstream\nnot zlib!!!!\nendstream",
    ]
    out = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(out))
        out += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref = len(out)
    out += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        out += b"%010d 00000 n \n" % offset
    out += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref)
    path.write_bytes(bytes(out))


def test_broken_page_content_is_a_document_error():
    with TemporaryDirectory() as td:
        pdf = Path(td) / "broken.pdf"
        _broken_contents_pdf(pdf)
        with pytest.raises(DocumentError):
            extract_page_chunks(pdf)


def test_cli_reports_broken_page_and_fails():
    with TemporaryDirectory() as td:
        pdf = Path(td) / "broken.pdf"
        _broken_contents_pdf(pdf)
        assert main([str(pdf), "-n", "1"]) == 1


def test_failures_while_reading_pages_are_wrapped():
    with TemporaryDirectory() as td:
        pdf = Path(td) / "sample.pdf"
        _make_pdf(pdf)
        with pytest.raises(DocumentError, match="Cannot read"):
            with open_document(pdf):
                raise TypeError("'NoneType' object is not iterable")
        with pytest.raises(StructuralMismatch):
            with open_document(pdf):
                raise StructuralMismatch("Footer banner not found")
