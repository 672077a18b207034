"""Combine per-chunk notes into one markdown document with a table of contents."""

import re
from collections.abc import Iterable

from studynotes.models.notes import ProcessedChunk

TOC_HEADING = "# Table of Contents"
SECTION_SEPARATOR = "---"

_HEADING = re.compile(r"^(#+) (.+)$")
_FENCE = re.compile(r"^\s*(```|~~~)")


def _iter_headings(markdown: str) -> Iterable[tuple[int, str]]:
    in_code_block = False
    for line in markdown.splitlines():
        if _FENCE.match(line):
            in_code_block = not in_code_block
            continue
        if in_code_block:
            continue
        match = _HEADING.match(line)
        if match:
            yield len(match.group(1)), match.group(2).strip()


def build_table_of_contents(markdown: str) -> str:
    """Build a nested bullet list from the headings in ``markdown``.

    Nesting depth is the heading level minus one. Lines inside fenced
    code blocks are ignored.
    """
    return "\n".join(
        f"{'  ' * (level - 1)}- {title}" for level, title in _iter_headings(markdown)
    )


def assemble_notes(processed: Iterable[ProcessedChunk]) -> str:
    """Join notes in order and prepend the table of contents.

    The table of contents heading is always present, even when the notes
    contain no headings.
    """
    body = "\n\n".join(f"{SECTION_SEPARATOR}\n\n{chunk.notes}" for chunk in processed)
    toc = build_table_of_contents(body)
    return f"{TOC_HEADING}\n\n{toc}\n\n{body}"
