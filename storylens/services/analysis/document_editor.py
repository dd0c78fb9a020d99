"""
Manual editing operations on a segmented story.

Every operation returns a new Document with paragraphs renumbered 1..N;
the input document is never modified.
"""
from typing import List, Optional

from storylens.core.constants import NEW_PARAGRAPH_PLACEHOLDER
from storylens.models.story_models import Document


def _index_of(document: Document, number: int) -> int:
    if number < 1 or number > document.paragraph_count:
        raise ValueError(
            f"Paragraph {number} does not exist (document has {document.paragraph_count} paragraphs)"
        )
    return number - 1


def _clean(content: str) -> str:
    cleaned = (content or "").strip()
    if not cleaned:
        raise ValueError("Paragraph content cannot be empty")
    return cleaned


def _rebuild(document: Document, contents: List[str], title: Optional[str] = None) -> Document:
    return Document.from_contents(document.title if title is None else title, contents)


def update_paragraph(document: Document, number: int, content: str) -> Document:
    contents = document.contents
    contents[_index_of(document, number)] = _clean(content)
    return _rebuild(document, contents)


def insert_paragraph(
    document: Document,
    content: str = NEW_PARAGRAPH_PLACEHOLDER,
    position: Optional[int] = None
) -> Document:
    """Insert a paragraph so it becomes number `position` (appended when None)."""
    contents = document.contents
    if position is None:
        contents.append(_clean(content))
    else:
        if position < 1 or position > len(contents) + 1:
            raise ValueError(f"Cannot insert at position {position}")
        contents.insert(position - 1, _clean(content))
    return _rebuild(document, contents)


def delete_paragraph(document: Document, number: int) -> Document:
    contents = document.contents
    del contents[_index_of(document, number)]
    return _rebuild(document, contents)


def move_paragraph(document: Document, from_number: int, to_number: int) -> Document:
    """Move a paragraph so that it ends up at `to_number` (drag-and-drop reorder)."""
    source = _index_of(document, from_number)
    target = _index_of(document, to_number)
    contents = document.contents
    moved = contents.pop(source)
    contents.insert(target, moved)
    return _rebuild(document, contents)


def retitle(document: Document, title: str) -> Document:
    cleaned = (title or "").strip()
    if not cleaned:
        raise ValueError("Title cannot be empty")
    return _rebuild(document, document.contents, title=cleaned)
