"""Parsing of WxH sizes and re,im corners."""

import pytest

from mandelraster.parsing import parse_bounds, parse_complex, parse_pair


def test_parse_pair():
    assert parse_pair("0.5x1.5", "x") == (0.5, 1.5)
    assert parse_pair("", "x") is None
    assert parse_pair("20x", "x") is None
    assert parse_pair("x20", "x") is None
    assert parse_pair("10,20", ",", int) == (10, 20)


def test_parse_pair_splits_at_first_separator():
    assert parse_pair("1,2,3", ",", int) is None
    assert parse_pair("1x2", ",") is None


def test_parse_complex():
    assert parse_complex("1.25,-0.0625") == complex(1.25, -0.0625)
    assert parse_complex("-1,0.20") == complex(-1.0, 0.20)
    assert parse_complex(",-0.0625") is None
    assert parse_complex("1.25") is None


@pytest.mark.parametrize("text, expected", [("1000x750", (1000, 750)), ("1x1", (1, 1))])
def test_parse_bounds(text, expected):
    assert parse_bounds(text) == expected


@pytest.mark.parametrize("text", ["0x750", "1000x0", "-5x10", "10.5x3", "1000", "axb", ""])
def test_parse_bounds_rejects(text):
    assert parse_bounds(text) is None


def test_parse_bounds_custom_separator():
    assert parse_bounds("640,480", ",") == (640, 480)


@pytest.mark.parametrize("text", [" 10x5", "10x5 ", "10 x5", "1_0x5", "10x\t5"])
def test_parse_bounds_rejects_padding_and_separators(text):
    assert parse_bounds(text) is None


@pytest.mark.parametrize("text", [" 1.5,2", "1.5, 2", "1_0.5,2", "1.5,2\n"])
def test_parse_complex_rejects_padding_and_separators(text):
    assert parse_complex(text) is None


def test_parse_pair_accepts_signs_and_exponents():
    assert parse_pair("+1e2,-2.5E-1", ",") == (100.0, -0.25)
    assert parse_pair("+10x20", "x", int) == (10, 20)
