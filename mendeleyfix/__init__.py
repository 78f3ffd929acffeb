"""Top-level imports for the mendeleyfix package."""

__version__ = "1.3.0"

from .core import FixConfig, DEFAULT_CONFIG, BibText, read_bib_text, write_bib_text
from .entries import iter_entries, entry_type, is_url_exception
from .fixes import fix_entry
from .curate import FixResult, fix_document, fix_bib_file

__all__ = [
    "__version__", "FixConfig", "DEFAULT_CONFIG", "BibText", "read_bib_text",
    "write_bib_text", "iter_entries", "entry_type", "is_url_exception",
    "fix_entry", "FixResult", "fix_document", "fix_bib_file",
]
