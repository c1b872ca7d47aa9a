from __future__ import annotations

import logging

from .chunks import Chunk, as_children, as_leaf_text
from .errors import StructuralMismatch

logger = logging.getLogger(__name__)

FOOTER_BANNER = "S I M O N   F R A S E R   U N I V E R S I T Y"
# The footer block sits 7 elements before the end of every page but the last.
FOOTER_OFFSET_FROM_END = 7


def _is_footer(chunk: Chunk) -> bool:
    children = as_children(chunk)
    return bool(children) and as_leaf_text(children[0]) == FOOTER_BANNER


def combine_pages(pages: list[list[Chunk]]) -> list[Chunk]:
    """
    Strip the footer from every page but the last and concatenate the pages.

    The last page keeps its footer; the student id is read relative to its end.
    """
    if not pages:
        raise StructuralMismatch("Document has no pages")
    combined: list[Chunk] = []
    for number, page in enumerate(pages[:-1], start=1):
        footer_start = len(page) - FOOTER_OFFSET_FROM_END
        if footer_start < 0 or not _is_footer(page[footer_start]):
            raise StructuralMismatch(f"Footer banner not found at expected position on page {number}")
        logger.debug("page %d: dropping %d footer elements", number, len(page) - footer_start)
        combined.extend(page[:footer_start])
    combined.extend(pages[-1])
    return combined
