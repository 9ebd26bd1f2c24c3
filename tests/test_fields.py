"""Tests for the per-specifier field extractors."""
from __future__ import annotations

from datetime import datetime

import pytest

from logreader.parsers.fields import (
    parse_datetime,
    parse_int,
    parse_ips,
    parse_request,
    parse_string,
)


# ---------------------------------------------------------------------------
# parse_ips
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("line,expected", [
    ("0.0.0.0", ["0.0.0.0"]),
    ("1.2.3.4, 5.6.7.8", ["1.2.3.4", "5.6.7.8"]),
    ("unknown, 255.255.255.255", ["unknown", "255.255.255.255"]),
    ("255.0.255.0, unknown", ["255.0.255.0", "unknown"]),
    ("200.169.54.33, unknown, 200.169.63.242", ["200.169.54.33", "unknown", "200.169.63.242"]),
])
def test_parse_ips(line: str, expected: list[str]) -> None:
    record: dict = {}
    consumed = parse_ips(line + " - frank", 0, record)
    assert record["ips"] == expected
    assert consumed == len(line)


class TestParseIps:
    def test_stops_at_first_address_without_comma(self) -> None:
        record: dict = {}
        consumed = parse_ips("1.2.3.4, 5.6.7.8 - -", 0, record)
        assert consumed == len("1.2.3.4, 5.6.7.8")

    def test_trailing_comma_at_end_of_line(self) -> None:
        record: dict = {}
        consumed = parse_ips("1.2.3.4,", 0, record)
        assert record["ips"] == ["1.2.3.4"]
        assert consumed == 8

    def test_starts_at_offset(self) -> None:
        record: dict = {}
        parse_ips("xx 9.9.9.9", 3, record)
        assert record["ips"] == ["9.9.9.9"]


# ---------------------------------------------------------------------------
# parse_string / parse_int
# ---------------------------------------------------------------------------

class TestParseString:
    def test_unquoted_stops_at_space(self) -> None:
        record: dict = {}
        assert parse_string("frank [x]", 0, record, "username") == 5
        assert record == {"username": "frank"}

    def test_quoted_keeps_spaces(self) -> None:
        record: dict = {}
        assert parse_string('test test" next', 0, record, "referer", quoted=True) == 9
        assert record == {"referer": "test test"}

    def test_empty_token_is_empty_string(self) -> None:
        record: dict = {}
        assert parse_string('" x', 0, record, "referer", quoted=True) == 0
        assert record["referer"] == ""


class TestParseInt:
    def test_number(self) -> None:
        record: dict = {}
        assert parse_int("2326 next", 0, record, "size") == 4
        assert record["size"] == 2326

    def test_dash_becomes_sentinel(self) -> None:
        record: dict = {}
        assert parse_int("- next", 0, record, "size") == 1
        assert record["size"] == -1

    def test_garbage_becomes_sentinel(self) -> None:
        record: dict = {}
        parse_int("12ab", 0, record, "status")
        assert record["status"] == -1

    def test_negative_number(self) -> None:
        record: dict = {}
        parse_int("-5", 0, record, "elapsed")
        assert record["elapsed"] == -5

    @pytest.mark.parametrize("token", ["1_000", "٣٤", "12.5", "+", "0x1f"])
    def test_non_ascii_decimal_becomes_sentinel(self, token: str) -> None:
        record: dict = {}
        assert parse_int(token + " x", 0, record, "size") == len(token)
        assert record["size"] == -1

    def test_surrounding_whitespace_is_accepted(self) -> None:
        record: dict = {}
        parse_int(' 42 " x', 0, record, "size", quoted=True)
        assert record["size"] == 42

    def test_plus_sign(self) -> None:
        record: dict = {}
        parse_int("+7", 0, record, "elapsed")
        assert record["elapsed"] == 7

    def test_quoted_number(self) -> None:
        record: dict = {}
        assert parse_int('42" x', 0, record, "size", quoted=True) == 2
        assert record["size"] == 42


# ---------------------------------------------------------------------------
# parse_datetime
# ---------------------------------------------------------------------------

class TestParseDatetime:
    def test_valid_timestamp(self) -> None:
        record: dict = {}
        text = "[10/Oct/2023:13:55:36 -0700]"
        consumed = parse_datetime(text + ' "GET', 0, record)
        assert record["time"] == datetime(2023, 10, 10, 13, 55, 36)
        assert record["tz"] == "-0700"
        assert consumed == len(text)

    def test_other_month(self) -> None:
        record: dict = {}
        parse_datetime("[03/Jan/2005:00:41:10 -0800]", 0, record)
        assert record["time"] == datetime(2005, 1, 3, 0, 41, 10)
        assert record["tz"] == "-0800"

    def test_bad_date_keeps_tz(self) -> None:
        record: dict = {}
        text = "[xx10/Oct/2023:13:55:36 +0100]"
        consumed = parse_datetime(text, 0, record)
        assert record["time"] is None
        assert record["tz"] == "+0100"
        assert consumed == len(text)

    def test_unknown_month(self) -> None:
        record: dict = {}
        parse_datetime("[10/Foo/2023:13:55:36 -0700]", 0, record)
        assert record["time"] is None

    def test_trailing_characters_reject_the_date(self) -> None:
        record: dict = {}
        text = "[10/Oct/2023:13:55:36x -0700]"
        consumed = parse_datetime(text, 0, record)
        assert record["time"] is None
        assert record["tz"] == "-0700"
        assert consumed == len(text)


# ---------------------------------------------------------------------------
# parse_request
# ---------------------------------------------------------------------------

class TestParseRequest:
    def test_full_request(self) -> None:
        record: dict = {}
        consumed = parse_request('GET /path/to/page.html HTTP/1.0" 200', 0, record, quoted=True)
        assert record == {"method": "GET", "path": "/path/to/page.html", "protocol": "HTTP/1.0"}
        assert consumed == len("GET /path/to/page.html HTTP/1.0")

    def test_query_string(self) -> None:
        record: dict = {}
        parse_request('POST /foo/bar/?betz=10 HTTP/1.0"', 0, record, quoted=True)
        assert record["path"] == "/foo/bar/?betz=10"

    def test_missing_protocol(self) -> None:
        record: dict = {}
        parse_request('GET /x"', 0, record, quoted=True)
        assert record == {"method": "GET", "path": "/x"}
        assert "protocol" not in record

    def test_no_space_is_bad_request(self) -> None:
        record: dict = {}
        parse_request('\\x16\\x03\\x01"', 0, record, quoted=True)
        assert record == {"bad_request": "x16x03x01"}

    def test_extra_spaces_stay_in_protocol(self) -> None:
        record: dict = {}
        parse_request('GET /a b HTTP/1.1"', 0, record, quoted=True)
        assert record["path"] == "/a"
        assert record["protocol"] == "b HTTP/1.1"

    def test_unquoted_request_is_one_word(self) -> None:
        record: dict = {}
        parse_request("GET /x HTTP/1.1", 0, record)
        assert record == {"bad_request": "GET"}
