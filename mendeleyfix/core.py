"""Core data structures and file helpers for mendeleyfix.

This module contains the :class:`FixConfig` switches that drive a run, the
:class:`BibText` abstraction around a path and its raw text, and the two
collaborators used by the rest of the package to load and persist whole
documents.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

INPUT_DEFAULT = "library.bib"
OUTPUT_DEFAULT = "library_fixed.bib"

# entry types that keep their URL; Mendeley exports a "web page" as ``misc``
URL_EXCEPTION_TYPES = ("misc", "unpublished")

# undecodable bytes survive a read/write round trip unchanged
ENCODING = "utf-8"
ENCODING_ERRORS = "surrogateescape"


@dataclass(frozen=True)
class FixConfig:
    """Switches that apply to every entry of a run.

    ``url_exception_types`` lists entry types (without the ``@``) whose URL
    is kept.  ``strict`` turns a trailing entry without a closing brace into
    an error instead of silently dropping it.
    """

    turn_issn_into_missing_year: bool = False
    turn_every_entry_url_exception: bool = True
    keep_url_only_if_no_doi: bool = True
    keep_annote: bool = False
    keep_abstract: bool = False
    url_exception_types: tuple[str, ...] = URL_EXCEPTION_TYPES
    strict: bool = False


DEFAULT_CONFIG = FixConfig()


def read_bib_text(path: Path | str) -> str:
    """Return the full contents of *path* as a single string."""
    path = Path(path)
    try:
        with path.open("r", encoding=ENCODING, errors=ENCODING_ERRORS) as f:
            return f.read()
    except FileNotFoundError:
        raise RuntimeError(f'Input file "{path}" not found.')
    except OSError as exc:
        raise RuntimeError(f'Error reading "{path}": {exc}')


def write_bib_text(path: Path | str, text: str) -> None:
    """Write *text* to *path*, replacing any existing file."""
    path = Path(path)
    try:
        with path.open("w", encoding=ENCODING, errors=ENCODING_ERRORS) as f:
            f.write(text)
    except OSError:
        raise RuntimeError(f'Cannot create output file "{path}".')


class BibText:
    """Lightweight wrapper around a ``.bib`` file and its raw text.

    Unlike a parsed database the text is kept verbatim; the fixing routines
    work on the character level and must not disturb anything they do not
    explicitly rewrite.
    """

    def __init__(self, path: Path | str, read: bool = True):
        self.path = Path(path)
        self.text = ""
        if read:
            self.read()

    def read(self) -> None:
        self.text = read_bib_text(self.path)

    def write(self) -> None:
        write_bib_text(self.path, self.text)

    def __len__(self) -> int:
        return len(self.text)
