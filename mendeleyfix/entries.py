"""Splitting a Mendeley export into entries and classifying them.

Mendeley never puts a bare ``}`` at the start of a line except to close an
entry, so the end of an entry is the first ``\\n}`` followed by a newline or
the end of the document.  Annotations and abstracts may contain ``}`` and
blank lines of their own; anchoring on the start of the line keeps them
from ending the entry early.
"""

from __future__ import annotations

import re
from typing import Iterator

from .core import DEFAULT_CONFIG, FixConfig

ENTRY_END_RE = re.compile(r"\n\}(?:\n|\Z)")


def iter_entries(text: str, strict: bool = False) -> Iterator[str]:
    """Yield every entry of *text* in document order.

    Each entry runs from its ``@`` through the closing brace and the newline
    after it, byte-for-byte as in *text*.  Anything between entries is
    skipped.  A trailing entry that is never closed is dropped, or raises
    :class:`ValueError` when *strict* is set.
    """
    pos = 0
    while True:
        start = text.find("@", pos)
        if start == -1:
            return
        match = ENTRY_END_RE.search(text, start + 1)
        if match is None:
            if strict:
                raise ValueError(
                    f"Unterminated entry at offset {start}: "
                    f"{text[start:start + 40].splitlines()[0]!r}"
                )
            return
        brace = match.start() + 1
        yield text[start:brace + 2]
        pos = brace + 1


def entry_type(entry: str) -> str:
    """Return the type tag of *entry*, e.g. ``article`` for ``@article{...``."""
    end = entry.find("{")
    if end == -1:
        end = len(entry)
    return entry[1:end] if entry.startswith("@") else entry[:end]


def is_url_exception(bib_type: str, config: FixConfig = DEFAULT_CONFIG) -> bool:
    """Return ``True`` if entries of *bib_type* may keep their URL.

    The comparison is exact and case-sensitive.  Whether the URL really
    survives also depends on DOI presence, see :mod:`mendeleyfix.fixes`.
    """
    if config.turn_every_entry_url_exception:
        return True
    return bib_type in config.url_exception_types
