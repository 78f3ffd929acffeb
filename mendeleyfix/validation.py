"""Checks run on a fixed document (used by ``mendeleyfix --validate``).

The fixes themselves work on raw text; here the result is also handed to
``bibtexparser`` to make sure it still parses as BibTeX, and is scanned for
any of the Mendeley quirks that should have been removed.
"""

from __future__ import annotations

import re
from typing import List

import bibtexparser  # type: ignore[import]
from bibtexparser.bparser import BibTexParser  # type: ignore[import]

from . import utils
from .core import DEFAULT_CONFIG, FixConfig
from .entries import entry_type, is_url_exception, iter_entries
from .fixes import MONTH_RE, TITLE_RE

ENTRY_KEY_RE = re.compile(r"@[^{]*\{([^,\n]*)")


def parse_fixed_text(text: str) -> bibtexparser.bibdatabase.BibDatabase:
    """Parse *text* with ``bibtexparser`` and return the database.

    Bare month abbreviations (``month = jan``) are BibTeX string macros, so
    the common month strings are enabled.
    """
    parser = BibTexParser(
        common_strings=True,
        ignore_nonstandard_types=False,
        homogenize_fields=False,
    )
    try:
        return bibtexparser.loads(text, parser=parser)
    except Exception as exc:
        raise RuntimeError(f"Error parsing fixed output: {exc}")


def _entry_key(entry: str) -> str:
    match = ENTRY_KEY_RE.match(entry)
    return match.group(1).strip() if match else "?"


def _line_starts(entry: str):
    yield 0
    idx = entry.find("\n")
    while idx != -1 and idx + 1 < len(entry):
        yield idx + 1
        idx = entry.find("\n", idx + 1)


def find_leftover_quirks(text: str, config: FixConfig = DEFAULT_CONFIG) -> List[str]:
    """Return one description per quirk still present in *text*."""
    removed = []
    if not config.keep_annote:
        removed.append("annote =")
    if not config.keep_abstract:
        removed.append("abstract =")
    removed.append("file =")

    issues: List[str] = []
    for entry in iter_entries(text):
        key = _entry_key(entry)
        if utils.ESCAPED_BRACE_RE.search(entry):
            issues.append(f"{key}: escaped brace")
        url_allowed = is_url_exception(entry_type(entry), config)
        has_doi = False
        for start in _line_starts(entry):
            line = entry[start:utils.end_of_line(entry, start)]
            if line.startswith("title ="):
                match = TITLE_RE.fullmatch(line)
                if match and utils.wraps_whole(match.group("value")):
                    issues.append(f"{key}: double-braced title")
            elif line.startswith("month =") and MONTH_RE.fullmatch(line):
                issues.append(f"{key}: braced month")
            elif line.startswith("doi ="):
                has_doi = True
            elif line.startswith("url =") and (
                    not url_allowed or (config.keep_url_only_if_no_doi and has_doi)):
                issues.append(f"{key}: url field")
            else:
                for prefix in removed:
                    if line.startswith(prefix):
                        issues.append(f"{key}: {prefix[:-2]} field")
    return issues


def validate_fixed_text(
    text: str,
    expected_entries: int | None = None,
    config: FixConfig = DEFAULT_CONFIG,
) -> List[str]:
    """Run every check on *text*, print the issues and return them."""
    issues: List[str] = []
    try:
        db = parse_fixed_text(text)
    except RuntimeError as exc:
        issues.append(str(exc))
    else:
        if expected_entries is not None and len(db.entries) != expected_entries:
            issues.append(
                f"entry count mismatch: parsed {len(db.entries)}, fixed {expected_entries}"
            )
    issues.extend(find_leftover_quirks(text, config))

    for issue in issues:
        print(f"  {issue}")
    print(f"Validation: {len(issues)} issue(s) found")
    return issues


def generate_report(text: str) -> dict:
    """Print DOI/URL/year coverage of the fixed document and return it."""
    db = parse_fixed_text(text)
    stats = {
        "entry_count": len(db.entries),
        "entries_with_doi": sum(1 for e in db.entries if e.get("doi")),
        "entries_with_url": sum(1 for e in db.entries if e.get("url")),
        "entries_with_year": sum(1 for e in db.entries if e.get("year")),
    }
    print(f"  Total entries: {stats['entry_count']}")
    for label, name in (("DOI", "entries_with_doi"), ("URL", "entries_with_url"),
                        ("year", "entries_with_year")):
        if stats["entry_count"]:
            pct = 100 * stats[name] / stats["entry_count"]
            print(f"  Entries with {label}: {stats[name]} ({pct:.1f}%)")
        else:
            print(f"  Entries with {label}: {stats[name]} (N/A)")
    return stats
