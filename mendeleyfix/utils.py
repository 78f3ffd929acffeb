"""Low-level scanning helpers shared by the segmenter and the rewriter."""

import re

ESCAPED_BRACE_RE = re.compile(r"\{\\([{}])\}")

FIELD_TERMINATOR = "},\n"


def end_of_line(text: str, start: int) -> int:
    """Return the index just past the newline ending the line at *start*.

    The last line of *text* may lack a newline, in which case ``len(text)``
    is returned.
    """
    eol = text.find("\n", start)
    return len(text) if eol == -1 else eol + 1


def end_of_field(text: str, start: int) -> int | None:
    """Return the index just past the ``},\\n`` closing the field at *start*.

    Fields such as ``annote`` may span several lines and contain braces of
    their own, so the first ``}`` is not enough; Mendeley always closes a
    field with ``},`` and a newline.  ``None`` is returned when no terminator
    follows.
    """
    idx = text.find(FIELD_TERMINATOR, start + 1)
    if idx == -1:
        return None
    return idx + len(FIELD_TERMINATOR)


def unescape_braces(text: str) -> str:
    r"""Replace ``{\{}`` with ``{`` and ``{\}}`` with ``}``."""
    if "{\\" not in text:
        return text
    return ESCAPED_BRACE_RE.sub(r"\1", text)


def wraps_whole(value: str) -> bool:
    r"""Return ``True`` if *value* is a single ``{...}`` group.

    ``{A}`` and ``{A {b} c}`` qualify, ``{A} and {B}`` does not.  Braces
    preceded by a backslash (``\{``, ``\}``) are literal and not counted.
    """
    if len(value) < 2 or value[0] != "{" or value[-1] != "}":
        return False
    depth = 0
    prev = ""
    for i, char in enumerate(value):
        if prev == "\\":
            prev = ""
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return i == len(value) - 1
        prev = char
    return False
