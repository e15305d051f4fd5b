from __future__ import annotations

import io
import json
from pathlib import Path

from micro_ini.models import IniEntry, SyntaxIssue
from micro_ini.writer import printable, write_jsonl, write_text


def test_write_jsonl_accepts_entries_and_mappings(tmp_path: Path) -> None:
    destination = tmp_path / "nested" / "out.jsonl"
    records = [
        IniEntry("server", "host", "local host"),
        SyntaxIssue("oops", 4),
        {"section": "", "key": "k", "value": "v"},
    ]

    write_jsonl(records, destination)

    lines = destination.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line) for line in lines] == [
        {"section": "server", "key": "host", "value": "local host"},
        {"line": "oops", "lineno": 4},
        {"section": "", "key": "k", "value": "v"},
    ]


def test_write_text_supports_file_like_handles() -> None:
    buffer = io.StringIO()

    write_text([IniEntry("", "top", "1"), IniEntry("db", "user", "admin")], buffer)

    assert buffer.getvalue() == "top = 1\ndb.user = admin\n"
    assert buffer.closed is False


def test_undecodable_bytes_are_written_as_escapes(tmp_path: Path) -> None:
    value = b"caf\xe9".decode("utf-8", "surrogateescape")
    jsonl = tmp_path / "out.jsonl"
    text = io.StringIO()

    write_jsonl([IniEntry("s", "name", value)], jsonl)
    write_text([IniEntry("s", "name", value)], text)

    assert json.loads(jsonl.read_text(encoding="utf-8"))["value"] == "caf\\xe9"
    assert text.getvalue() == "s.name = caf\\xe9\n"


def test_printable_keeps_valid_text_and_escapes_stray_surrogates() -> None:
    assert printable("naïve ✓") == "naïve ✓"
    assert printable("\ud800") == "\\ud800"
