import pytest

from mendeleyfix import validation
from mendeleyfix.core import FixConfig


def test_parse_fixed_text(fixed_export):
    db = validation.parse_fixed_text(fixed_export)
    keys = {e.get("ID") for e in db.entries}
    assert keys == {"Noel2016", "Web2019"}
    noel = next(e for e in db.entries if e["ID"] == "Noel2016")
    assert noel["title"] == "Diffusive {molecular} communication"
    assert noel["ENTRYTYPE"] == "article"


def test_leftover_quirks_in_raw_export(mendeley_export):
    issues = validation.find_leftover_quirks(mendeley_export)
    assert "Noel2016: escaped brace" in issues
    assert "Noel2016: double-braced title" in issues
    assert "Noel2016: braced month" in issues
    assert "Noel2016: abstract field" in issues
    assert "Noel2016: file field" in issues
    assert "Web2019: double-braced title" in issues


def test_no_leftover_quirks_after_fixing(fixed_export):
    assert validation.find_leftover_quirks(fixed_export) == []


def test_leftover_quirks_respect_config():
    text = "@article{A,\nannote = {kept},\nurl = {http://a.example}\n}\n"
    config = FixConfig(keep_annote=True, turn_every_entry_url_exception=False)
    assert validation.find_leftover_quirks(text, config) == ["A: url field"]
    assert validation.find_leftover_quirks(text) == ["A: annote field"]


def test_validate_fixed_text(fixed_export, capsys):
    assert validation.validate_fixed_text(fixed_export, 2) == []
    assert "Validation: 0 issue(s) found" in capsys.readouterr().out

    issues = validation.validate_fixed_text(fixed_export, 3)
    assert issues == ["entry count mismatch: parsed 2, fixed 3"]
    out = capsys.readouterr().out
    assert "entry count mismatch" in out


def test_generate_report(fixed_export, capsys):
    stats = validation.generate_report(fixed_export)
    assert stats == {
        "entry_count": 2,
        "entries_with_doi": 1,
        "entries_with_url": 1,
        "entries_with_year": 1,
    }
    out = capsys.readouterr().out
    assert "Total entries: 2" in out
    assert "Entries with DOI: 1 (50.0%)" in out


def test_generate_report_empty(capsys):
    stats = validation.generate_report("")
    assert stats["entry_count"] == 0
    assert "(N/A)" in capsys.readouterr().out


def test_parse_fixed_text_wraps_errors(monkeypatch):
    def boom(*args, **kwargs):
        raise ValueError("bad input")

    monkeypatch.setattr(validation.bibtexparser, "loads", boom)
    with pytest.raises(RuntimeError, match="Error parsing fixed output"):
        validation.parse_fixed_text("@article{A,\n}\n")


def test_leftover_url_on_exception_with_doi():
    text = "@misc{M,\ndoi = {10.1/x},\nurl = {http://m.example}\n}\n"
    assert validation.find_leftover_quirks(text) == ["M: url field"]
    keep = FixConfig(keep_url_only_if_no_doi=False)
    assert validation.find_leftover_quirks(text, keep) == []
    no_doi = "@misc{M,\nurl = {http://m.example}\n}\n"
    assert validation.find_leftover_quirks(no_doi) == []
