#!/usr/bin/env python3
"""Command line interface for the *mendeleyfix* package.

The output file is the first positional argument, so that
``mendeleyfix refs.bib`` only renames the result.  Everything else is
switched with flags that map onto
:class:`mendeleyfix.core.FixConfig`.
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

from . import core, validation
from .curate import fix_bib_file


def build_config(args: argparse.Namespace) -> core.FixConfig:
    """Translate parsed command-line flags into a :class:`FixConfig`."""
    changes = {
        'turn_issn_into_missing_year': args.issn_to_year,
        'turn_every_entry_url_exception': not args.no_url_exception_for_all,
        'keep_url_only_if_no_doi': not args.keep_url_with_doi,
        'keep_annote': args.keep_annote,
        'keep_abstract': args.keep_abstract,
        'strict': args.strict,
    }
    if args.url_exception:
        changes['url_exception_types'] = tuple(args.url_exception)
    return dataclasses.replace(core.DEFAULT_CONFIG, **changes)


def main(argv: list[str] | None = None) -> int:
    """Parse command-line arguments and fix the requested file."""
    parser = argparse.ArgumentParser(
        description='Correct formatting of BibTeX files generated by Mendeley Desktop',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                          # library.bib -> library_fixed.bib
  %(prog)s refs.bib                 # library.bib -> refs.bib
  %(prog)s refs.bib export.bib      # export.bib -> refs.bib
  %(prog)s --no-url-exception-for-all --url-exception misc --url-exception online
        """,
    )

    parser.add_argument('output', nargs='?', default=core.OUTPUT_DEFAULT,
                        help=f'Output file (default: {core.OUTPUT_DEFAULT})')
    parser.add_argument('input', nargs='?', default=core.INPUT_DEFAULT,
                        help=f'Input file exported by Mendeley (default: {core.INPUT_DEFAULT})')
    parser.add_argument('--issn-to-year', action='store_true',
                        help='Rename the issn field to year in entries that have no year')
    parser.add_argument('--no-url-exception-for-all', action='store_true',
                        help='Only keep URLs of the configured exception types')
    parser.add_argument('--url-exception', action='append', metavar='TYPE',
                        help='Entry type that keeps its URL (repeatable; default: '
                             + ', '.join(core.URL_EXCEPTION_TYPES) + ')')
    parser.add_argument('--keep-url-with-doi', action='store_true',
                        help='Keep the URL of an exception entry even if it has a DOI')
    parser.add_argument('--keep-annote', action='store_true', help='Keep annote fields')
    parser.add_argument('--keep-abstract', action='store_true', help='Keep abstract fields')
    parser.add_argument('--strict', action='store_true',
                        help='Fail on a trailing entry without a closing brace instead of dropping it')
    parser.add_argument('--validate', action='store_true',
                        help='Check the written file with bibtexparser and report leftovers')

    args = parser.parse_args(argv)
    config = build_config(args)

    try:
        result = fix_bib_file(args.input, args.output, config)
    except (RuntimeError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    if args.validate:
        print("\nValidating output")
        issues = validation.validate_fixed_text(result.text, result.entry_count, config)
        if issues:
            return 1
        try:
            validation.generate_report(result.text)
        except RuntimeError as exc:
            print(f"ERROR: {exc}", file=sys.stderr)
            return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
