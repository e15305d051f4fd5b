from __future__ import annotations

from typing import List, Optional

import pytest

from micro_ini.parser import load_stream
from micro_ini.status import MAX_LINE_LENGTH, ParserFlags, ParseStatus


class _LineStream:
    """In-memory physical lines honouring the reader size limit."""

    def __init__(self, text: str) -> None:
        self.lines: List[str] = text.splitlines(keepends=True)
        self.reads = 0


def _reader(stream: _LineStream, size: int) -> Optional[str]:
    stream.reads += 1
    if not stream.lines:
        return None
    line = stream.lines.pop(0)
    if len(line) > size:
        stream.lines.insert(0, line[size:])
        line = line[:size]
    return line


def _eof(stream: _LineStream) -> bool:
    return not stream.lines


class _Recorder:
    def __init__(self) -> None:
        self.values: List[tuple[str, str, str]] = []
        self.errors: List[tuple[str, int]] = []

    def on_value(self, section: str, key: str, value: str) -> None:
        self.values.append((section, key, value))

    def on_error(self, line: str, lineno: int) -> None:
        self.errors.append((line, lineno))


def _parse(text: str, flags: int = ParserFlags.NONE, **kwargs) -> tuple[int, _Recorder]:
    recorder = _Recorder()
    result = load_stream(
        _LineStream(text),
        flags,
        recorder.on_value,
        recorder.on_error,
        _reader,
        _eof,
        **kwargs,
    )
    return result, recorder


def test_reference_document() -> None:
    text = '[server]\nhost = "local host"\nport=8080\nbad line without equals\n'

    result, recorder = _parse(text)

    assert result == 1
    assert recorder.values == [("server", "host", "local host"), ("server", "port", "8080")]
    assert recorder.errors == [("bad line without equals", 4)]


def test_empty_input_is_clean() -> None:
    result, recorder = _parse("")

    assert result == ParseStatus.SUCCESS
    assert recorder.values == []
    assert recorder.errors == []


def test_values_before_first_section_have_empty_section() -> None:
    result, recorder = _parse("top=1\n[a]\nx=2\n; comment\n\n[b]\ny=3\nx=4\n")

    assert result == 0
    assert recorder.values == [("", "top", "1"), ("a", "x", "2"), ("b", "y", "3"), ("b", "x", "4")]


def test_duplicate_keys_are_all_reported() -> None:
    _, recorder = _parse("[s]\nk=1\nk=2\n")

    assert recorder.values == [("s", "k", "1"), ("s", "k", "2")]


def test_precondition_failures() -> None:
    recorder = _Recorder()
    stream = _LineStream("k=v\n")

    assert load_stream(None, 0, recorder.on_value, None, _reader, _eof) == ParseStatus.INVALID_STREAM_OBJECT
    assert load_stream(stream, 0, None, None, _reader, _eof) == ParseStatus.INVALID_HANDLER_CALLBACK
    assert load_stream(stream, 0, recorder.on_value, None, None, _eof) == ParseStatus.INVALID_READER_CALLBACK
    assert load_stream(stream, 0, recorder.on_value, None, _reader, None) == ParseStatus.INVALID_EOF_CALLBACK
    assert stream.reads == 0
    assert recorder.values == []


def test_stream_check_comes_before_handler_check() -> None:
    assert load_stream(None, 0, None, None, None, None) == ParseStatus.INVALID_STREAM_OBJECT


def test_errors_do_not_interrupt_parsing() -> None:
    result, recorder = _parse("a=1\nbad\nb=2\nworse\nc=3\n")

    assert result == 2
    assert [key for _, key, _ in recorder.values] == ["a", "b", "c"]
    assert recorder.errors == [("bad", 2), ("worse", 4)]


def test_stop_on_first_error() -> None:
    stream = _LineStream("a=1\nbad\nb=2\nworse\n")
    recorder = _Recorder()

    result = load_stream(
        stream,
        ParserFlags.STOP_ON_FIRST_ERROR,
        recorder.on_value,
        recorder.on_error,
        _reader,
        _eof,
    )

    assert result == 1
    assert recorder.values == [("", "a", "1")]
    assert recorder.errors == [("bad", 2)]
    assert stream.lines == ["b=2\n", "worse\n"]


def test_error_callback_is_optional() -> None:
    recorder = _Recorder()

    result = load_stream(_LineStream("bad\nk=v\n"), 0, recorder.on_value, None, _reader, _eof)

    assert result == 1
    assert recorder.values == [("", "k", "v")]


def test_error_line_keeps_leading_whitespace() -> None:
    _, recorder = _parse("   not valid   \n")

    assert recorder.errors == [("   not valid", 1)]


def test_blank_lines_count_towards_line_numbers() -> None:
    _, recorder = _parse("\n\n   \nbad\n")

    assert recorder.errors == [("bad", 4)]


def test_crlf_line_endings() -> None:
    _, recorder = _parse("[s]\r\nk = v\r\n")

    assert recorder.values == [("s", "k", "v")]


def test_final_line_without_newline() -> None:
    result, recorder = _parse("a=1\nb=2")

    assert result == 0
    assert recorder.values == [("", "a", "1"), ("", "b", "2")]


def test_multiline_joins_continuation_lines() -> None:
    result, recorder = _parse("key = first \\\n  second \\\n third\nnext=1\n", ParserFlags.MULTILINE)

    assert result == 0
    assert recorder.values == [("", "key", "first   second  third"), ("", "next", "1")]


def test_multiline_matches_single_line_equivalent() -> None:
    _, joined = _parse("[s]\nmotd = \"hello \\\nworld\"\n", ParserFlags.MULTILINE)
    _, single = _parse('[s]\nmotd = "hello world"\n')

    assert joined.values == single.values


def test_multiline_errors_report_first_physical_line() -> None:
    result, recorder = _parse("bad \\\nstill bad\nx=1\noops\n", ParserFlags.MULTILINE)

    assert result == 2
    assert recorder.errors == [("bad still bad", 1), ("oops", 4)]
    assert recorder.values == [("", "x", "1")]


def test_backslash_is_literal_without_multiline() -> None:
    result, recorder = _parse("path = C:\\dir\\\nnext = 1\n")

    assert result == 0
    assert recorder.values == [("", "path", "C:\\dir\\"), ("", "next", "1")]


def test_unfinished_continuation_at_end_of_input_is_dropped() -> None:
    result, recorder = _parse("a=1\nb = 2 \\\n", ParserFlags.MULTILINE)

    assert result == 0
    assert recorder.values == [("", "a", "1")]


def test_bom_is_skipped_when_enabled() -> None:
    result, recorder = _parse("\ufeff[s]\nk=v\n", ParserFlags.BOM)

    assert result == 0
    assert recorder.values == [("s", "k", "v")]


def test_bom_is_an_error_when_not_enabled() -> None:
    result, recorder = _parse("\ufeff[s]\nk=v\n")

    assert result == 1
    assert recorder.errors == [("\ufeff[s]", 1)]
    assert recorder.values == [("", "k", "v")]


def test_bom_is_only_skipped_on_first_read() -> None:
    result, recorder = _parse("k=v\n\ufeff[s]\n", ParserFlags.BOM)

    assert result == 1
    assert recorder.errors == [("\ufeff[s]", 2)]


def test_line_filling_the_buffer_exactly_is_accepted() -> None:
    line = "k=" + "v" * (MAX_LINE_LENGTH - 4) + "\n"
    assert len(line) == MAX_LINE_LENGTH - 1

    result, recorder = _parse(line + "next=1\n")

    assert result == 0
    assert recorder.values[0][2] == "v" * (MAX_LINE_LENGTH - 4)
    assert recorder.values[1] == ("", "next", "1")


def test_line_reaching_max_length_with_newline_overflows() -> None:
    line = "k=" + "v" * (MAX_LINE_LENGTH - 3) + "\n"
    assert len(line) == MAX_LINE_LENGTH

    result, recorder = _parse("a=1\n" + line + "next=1\n")

    assert result == ParseStatus.BUFFER_OVERFLOW
    assert recorder.values == [("", "a", "1")]


def test_overflow_aborts_and_discards_error_count() -> None:
    text = "a=1\nbad\nk=" + "v" * MAX_LINE_LENGTH + "\nb=2\n"

    result, recorder = _parse(text)

    assert result == ParseStatus.BUFFER_OVERFLOW
    assert recorder.values == [("", "a", "1")]
    assert recorder.errors == [("bad", 2)]


def test_long_final_line_at_end_of_input_is_not_overflow() -> None:
    text = "k=" + "v" * (MAX_LINE_LENGTH - 3)

    result, recorder = _parse(text)

    assert result == 0
    assert recorder.values == [("", "k", "v" * (MAX_LINE_LENGTH - 3))]


def test_custom_max_line_length() -> None:
    result, recorder = _parse("k=1\nkey=1234567\n", max_line_length=8)

    assert result == ParseStatus.BUFFER_OVERFLOW
    assert recorder.values == [("", "k", "1")]


def test_max_line_length_below_minimum_is_rejected() -> None:
    with pytest.raises(ValueError, match="max_line_length"):
        _parse("k=v\n", max_line_length=1)


def test_continuation_counts_against_the_same_buffer() -> None:
    text = "k = " + "a" * 6 + "\\\n" + "b" * 6 + "\n"

    result, _ = _parse(text, ParserFlags.MULTILINE, max_line_length=16)

    assert result == ParseStatus.BUFFER_OVERFLOW


def test_reader_ignoring_size_limit_is_overflow() -> None:
    def greedy_reader(stream: _LineStream, size: int) -> Optional[str]:
        return stream.lines.pop(0) if stream.lines else None

    recorder = _Recorder()
    result = load_stream(
        _LineStream("key=value\n"),
        0,
        recorder.on_value,
        None,
        greedy_reader,
        _eof,
        max_line_length=4,
    )

    assert result == ParseStatus.BUFFER_OVERFLOW
    assert recorder.values == []
