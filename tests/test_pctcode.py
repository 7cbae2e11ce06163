"""Unit tests for urlvalue/pctcode.py percent-escape handling."""

import pytest

from urlvalue import pctcode


class TestDecode:
    """Tests for decode function."""

    def test_no_escapes(self):
        assert pctcode.decode("") == ""
        assert pctcode.decode("plain/text") == "plain/text"

    def test_escapes(self):
        assert pctcode.decode("a%2Fb") == "a/b"
        assert pctcode.decode("a%2fb") == "a/b"
        assert pctcode.decode("%41%42%43") == "ABC"

    def test_multibyte(self):
        assert pctcode.decode("caf%C3%A9") == "café"
        assert pctcode.decode("snow%E2%98%83man") == "snow☃man"

    def test_non_ascii_passes_through(self):
        assert pctcode.decode("é%20☃") == "é ☃"

    @pytest.mark.parametrize("text", ["%2", "%", "100%", "%zz", "%g0", "a%2-b", "%%41"])
    def test_malformed_escape(self, text):
        assert pctcode.decode(text) is None

    @pytest.mark.parametrize("text", ["%C3", "%FF", "%C3%28", "%ED%A0%80"])
    def test_not_utf8(self, text):
        assert pctcode.decode(text) is None


class TestEncode:
    """Tests for encode function."""

    def test_escapes_everything(self):
        assert pctcode.encode("a") == "%61"
        assert pctcode.encode("a/b") == "%61%2F%62"
        assert pctcode.encode("é") == "%C3%A9"
        assert pctcode.encode("") == ""

    @pytest.mark.parametrize(
        "text",
        ["", "abc", "a b/c?d#e%f", "%2", "café", "☃\U0001F600", "\x00\x7f", "100%25"],
    )
    def test_round_trip(self, text):
        assert pctcode.decode(pctcode.encode(text)) == text

    def test_lone_surrogate(self):
        assert pctcode.encode("a\ud800") == "%61%ED%A0%80"
        assert pctcode.decode(pctcode.encode("a\ud800")) is None
