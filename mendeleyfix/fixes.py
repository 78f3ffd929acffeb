"""Field-level fixes applied to a single Mendeley entry.

Mendeley Desktop writes every field on its own line as ``name = {value},``
(``annote`` and ``abstract`` may continue over several lines).  The fixes
below are keyed on the field name at the start of a line and are listed in
:data:`FIELD_RULES`; adding a rule does not require touching the scanning
loop in :func:`fix_entry`.

The input entry is never modified.  The output is built from copied and
rewritten spans, so a deleted field simply is not copied and the scan
resumes on the line that followed it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, NamedTuple

from . import utils
from .core import DEFAULT_CONFIG, FixConfig
from .entries import entry_type, is_url_exception

MONTH_RE = re.compile(r"(?P<head>month = )\{(?P<value>[^{}\n]{3})\}(?P<tail>.*)", re.DOTALL)
TITLE_RE = re.compile(r"(?P<head>title = )\{(?P<value>.*)\}(?P<tail>,?\n?)", re.DOTALL)


@dataclass
class EntryScan:
    """State of one pass over an entry.

    ``pieces`` collects the output; ``written`` is its running length so
    that positions in the output (the ISSN line) can be recorded before the
    pieces are joined.
    """

    text: str
    config: FixConfig
    url_exception: bool
    has_doi: bool = False
    has_year: bool = False
    issn_offset: int | None = None
    pieces: list[str] = field(default_factory=list)
    written: int = 0

    def emit(self, span: str) -> None:
        span = utils.unescape_braces(span)
        self.pieces.append(span)
        self.written += len(span)

    def result(self) -> str:
        return "".join(self.pieces)


# A rule receives the scan and the start of the line that matched and
# returns the position the scan continues from.
FieldAction = Callable[[EntryScan, int], int]


class FieldRule(NamedTuple):
    prefix: str
    action: FieldAction


def _keep_line(scan: EntryScan, start: int) -> int:
    end = utils.end_of_line(scan.text, start)
    scan.emit(scan.text[start:end])
    return end


def _drop_line(scan: EntryScan, start: int) -> int:
    return utils.end_of_line(scan.text, start)


def fix_month(scan: EntryScan, start: int) -> int:
    """``month = {jan},`` -> ``month = jan,``; any other layout is kept."""
    end = utils.end_of_line(scan.text, start)
    line = scan.text[start:end]
    match = MONTH_RE.fullmatch(line)
    if match:
        line = match.group("head") + match.group("value") + match.group("tail")
    scan.emit(line)
    return end


def fix_title(scan: EntryScan, start: int) -> int:
    """Strip the extra pair of braces Mendeley puts around titles.

    Only a title whose inner group spans the whole value is touched, so
    ``{{A} and {B}}`` is left alone and a fixed title is not fixed twice.
    """
    end = utils.end_of_line(scan.text, start)
    line = scan.text[start:end]
    match = TITLE_RE.fullmatch(line)
    if match and utils.wraps_whole(match.group("value")):
        line = "{head}{{{inner}}}{tail}".format(
            head=match.group("head"),
            inner=match.group("value")[1:-1],
            tail=match.group("tail"),
        )
    scan.emit(line)
    return end


def _drop_field(scan: EntryScan, start: int) -> int:
    end = utils.end_of_field(scan.text, start)
    if end is None:
        return _keep_line(scan, start)
    return end


def remove_annote(scan: EntryScan, start: int) -> int:
    if scan.config.keep_annote:
        return _keep_line(scan, start)
    return _drop_field(scan, start)


def remove_abstract(scan: EntryScan, start: int) -> int:
    if scan.config.keep_abstract:
        return _keep_line(scan, start)
    return _drop_field(scan, start)


def record_doi(scan: EntryScan, start: int) -> int:
    scan.has_doi = True
    return _keep_line(scan, start)


def remove_file(scan: EntryScan, start: int) -> int:
    # local file paths never span lines
    return _drop_line(scan, start)


def fix_url(scan: EntryScan, start: int) -> int:
    """Drop the URL unless the entry type is an exception.

    An exception still loses its URL when a DOI was seen and
    ``keep_url_only_if_no_doi`` is set.  Mendeley sorts fields
    alphabetically, so ``doi`` is always scanned before ``url``.
    """
    if not scan.url_exception:
        return _drop_line(scan, start)
    if scan.config.keep_url_only_if_no_doi and scan.has_doi:
        return _drop_line(scan, start)
    return _keep_line(scan, start)


def record_year(scan: EntryScan, start: int) -> int:
    scan.has_year = True
    return _keep_line(scan, start)


def record_issn(scan: EntryScan, start: int) -> int:
    scan.issn_offset = scan.written
    return _keep_line(scan, start)


FIELD_RULES: tuple[FieldRule, ...] = (
    FieldRule("month =", fix_month),
    FieldRule("title =", fix_title),
    FieldRule("annote =", remove_annote),
    FieldRule("abstract =", remove_abstract),
    FieldRule("doi =", record_doi),
    FieldRule("file =", remove_file),
    FieldRule("url =", fix_url),
    FieldRule("year =", record_year),
    FieldRule("issn =", record_issn),
)


def match_rule(text: str, start: int) -> FieldRule | None:
    """Return the rule whose field name begins the line at *start*."""
    for rule in FIELD_RULES:
        if text.startswith(rule.prefix, start):
            return rule
    return None


def fix_entry(entry: str, config: FixConfig = DEFAULT_CONFIG) -> str:
    """Return *entry* with every field-level fix applied.

    The first line (``@type{key,``) only gets its escaped braces repaired;
    every following line is matched against :data:`FIELD_RULES`.
    """
    scan = EntryScan(
        text=entry,
        config=config,
        url_exception=is_url_exception(entry_type(entry), config),
    )
    pos = utils.end_of_line(entry, 0)
    scan.emit(entry[:pos])
    while pos < len(entry):
        rule = match_rule(entry, pos)
        if rule is None:
            pos = _keep_line(scan, pos)
        else:
            pos = rule.action(scan, pos)

    fixed = scan.result()
    if (config.turn_issn_into_missing_year and not scan.has_year
            and scan.issn_offset is not None):
        # same length, so nothing after the ISSN moves
        offset = scan.issn_offset
        fixed = fixed[:offset] + "year" + fixed[offset + len("issn"):]
    return fixed
