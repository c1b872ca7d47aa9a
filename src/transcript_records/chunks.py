from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Leaf:
    text: str


@dataclass(frozen=True)
class Group:
    children: tuple[Chunk, ...] = ()


Chunk = Union[Leaf, Group]


def is_group(chunk: Chunk) -> bool:
    return isinstance(chunk, Group)


def as_children(chunk: Chunk) -> tuple[Chunk, ...] | None:
    return chunk.children if isinstance(chunk, Group) else None


def as_leaf_text(chunk: Chunk) -> str | None:
    return chunk.text if isinstance(chunk, Leaf) else None


def row_texts(row: Chunk, keep: Callable[[str], bool]) -> list[str]:
    """Leaf texts directly under ``row`` that pass ``keep``; nested groups are skipped."""
    texts = (as_leaf_text(c) for c in as_children(row) or ())
    return [t for t in texts if t is not None and keep(t)]


def leaf_texts(chunk: Chunk) -> Iterator[str]:
    """Yield every leaf text under ``chunk`` in drawing order."""
    if isinstance(chunk, Leaf):
        yield chunk.text
        return
    for child in chunk.children:
        yield from leaf_texts(child)


def simplify(chunk: Chunk) -> Chunk:
    """
    Collapse single-element groups into their element and trim leaf text.

    Groups with zero or several children are kept, so column structure
    survives for the row extraction later. Empty leaves are kept as well
    because their position is meaningful.
    """
    if isinstance(chunk, Leaf):
        return Leaf(chunk.text.strip())
    children = tuple(simplify(c) for c in chunk.children)
    if len(children) == 1:
        return children[0]
    return Group(children)
