import io
from types import SimpleNamespace

import pytest

from csvjson import reader
from csvjson.errors import HeaderMalformed, ParseError, RecordError, RecordMalformed
from csvjson.reader import decode_source, parse


def test_parse_maps_rows_by_header():
    headers, rows = parse("name,age,job\nAlice,30,Engineer\nBob,,Designer\n")
    assert headers == ["name", "age", "job"]
    assert rows == [
        {"name": "Alice", "age": "30", "job": "Engineer"},
        {"name": "Bob", "age": "", "job": "Designer"},
    ]


def test_parse_accepts_text_stream():
    headers, rows = parse(io.StringIO("a,b\r\n1,2\r\n", newline=""))
    assert headers == ["a", "b"]
    assert rows == [{"a": "1", "b": "2"}]


def test_short_row_leaves_keys_absent():
    _, rows = parse("a,b,c\n1,2\n")
    assert rows == [{"a": "1", "b": "2"}]
    assert "c" not in rows[0]


def test_long_row_drops_extra_fields():
    _, rows = parse("a,b\n1,2,3,4\n")
    assert rows == [{"a": "1", "b": "2"}]


def test_headers_are_not_trimmed():
    headers, rows = parse(" a ,b\n1,2\n")
    assert headers == [" a ", "b"]
    assert rows[0][" a "] == "1"


def test_duplicate_headers_last_column_wins():
    headers, rows = parse("a,b,a\n1,2,3\n")
    assert headers == ["a", "b", "a"]
    assert rows == [{"a": "3", "b": "2"}]


def test_duplicate_headers_rejected_when_asked():
    with pytest.raises(HeaderMalformed):
        parse("a,b,a\n1,2,3\n", reject_duplicate_headers=True)


def test_quoted_fields():
    _, rows = parse('name,note\n"Smith, J","said ""hi""\nthen left"\n')
    assert rows == [{"name": "Smith, J", "note": 'said "hi"\nthen left'}]


def test_blank_lines_are_skipped():
    _, rows = parse("a,b\n1,2\n\n3,4\n")
    assert rows == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]


def test_custom_delimiter():
    _, rows = parse("a\tb\n1\t2\n", delimiter="\t")
    assert rows == [{"a": "1", "b": "2"}]


def test_header_only():
    headers, rows = parse("name,age\n")
    assert headers == ["name", "age"]
    assert rows == []


def test_empty_input_has_no_header():
    with pytest.raises(HeaderMalformed):
        parse("")


def test_blank_first_line_is_not_a_header():
    with pytest.raises(ParseError):
        parse("\na,b\n1,2\n")


def test_unterminated_quote_in_header():
    with pytest.raises(HeaderMalformed):
        parse('"a,b\n1,2\n')


def test_unterminated_quote_reports_line():
    with pytest.raises(RecordMalformed) as excinfo:
        parse('name,age\nAlice,30\n"Bob,40\nCarl,50\n')
    assert excinfo.value.line_number == 3


def test_text_after_closing_quote_reports_line():
    with pytest.raises(RecordError) as excinfo:
        parse('a,b\n1,2\n"x"y,3\n4,5\n')
    assert excinfo.value.line_number == 3


def test_line_number_counts_physical_lines():
    # first record spans lines 2-3, the bad one starts on line 5
    text = 'a,b\n"multi\nline",1\n\n"bad,2\n'
    with pytest.raises(RecordMalformed) as excinfo:
        parse(text)
    assert excinfo.value.line_number == 5


def test_decode_utf8_strips_bom():
    assert decode_source(b"\xef\xbb\xbfa,b\n1,2\n") == "a,b\n1,2\n"


def test_decode_explicit_encoding():
    raw = "city\nMontréal\n".encode("latin-1")
    assert decode_source(raw, "latin-1") == "city\nMontréal\n"


def test_decode_explicit_encoding_failure():
    with pytest.raises(HeaderMalformed):
        decode_source(b"\xff\xfe\xfa", "utf-8")


def test_decode_unknown_encoding():
    with pytest.raises(HeaderMalformed):
        decode_source(b"a,b\n", "no-such-codec")


def test_decode_undetectable(monkeypatch):
    monkeypatch.setattr(reader, "from_bytes", lambda raw: SimpleNamespace(best=lambda: None))
    with pytest.raises(HeaderMalformed):
        decode_source(b"\xff\xfe\xfa")


def test_large_cell_is_not_a_record_error():
    big = "x" * 200_000
    _, rows = parse(f"a,b\n{big},1\n")
    assert rows == [{"a": big, "b": "1"}]
