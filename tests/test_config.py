import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from mlxir.config import (
    c_atof,
    c_atoi,
    config_line,
    flag_list,
    format_fixed,
    parse_hex8,
    reply_line,
    split_setting,
)

NAMES = {1: "CORRECT_BROKEN_PIXELS", 2: "IIR_FILTER"}


@pytest.mark.parametrize(
    "text, expected",
    [
        ("0.95", 0.95),
        ("  -12.5xyz", -12.5),
        ("abc", 0.0),
        ("", 0.0),
        ("1e2", 100.0),
        (".5", 0.5),
        ("+3", 3.0),
    ],
)
def test_c_atof(text, expected):
    assert c_atof(text) == expected


def test_c_atof_infinity():
    assert math.isinf(c_atof("inf")) and c_atof("-inf") < 0


@pytest.mark.parametrize(
    "text, expected",
    [("7", 7), (" -3abc", -3), ("x", 0), ("+12", 12), ("3.9", 3), ("", 0)],
)
def test_c_atoi(text, expected):
    assert c_atoi(text) == expected


@given(st.integers(min_value=-(10**9), max_value=10**9))
def test_c_atoi_round_trip(number):
    assert c_atoi(str(number)) == number


@given(st.integers(min_value=0, max_value=255))
def test_parse_hex8_round_trip(number):
    assert parse_hex8(f"{number:02X}") == number
    assert parse_hex8(f"{number:x}") == number
    assert parse_hex8(f"0x{number:02x}") == number


@pytest.mark.parametrize("text", ["", "zz", "123", "0x", "-1"])
def test_parse_hex8_rejects(text):
    with pytest.raises(ValueError):
        parse_hex8(text)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("EM=0.9", ("EM", "0.9")),
        ("FLAGS=+IIR", ("FLAGS", "+IIR")),
        ("SA=", ("SA", "")),
        ("EM", ("EM", None)),
        ("A=B=C", ("A", "B=C")),
    ],
)
def test_split_setting(text, expected):
    assert split_setting(text) == expected


def test_format_fixed_pinned():
    assert format_fixed(0.95, 3) == "0.950"
    assert format_fixed(25.0, 1) == "25.0"


@given(
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
    st.integers(min_value=0, max_value=6),
)
def test_format_fixed_round_trip(value, decimals):
    text = format_fixed(value, decimals)
    assert not text.startswith(" ")
    assert abs(c_atof(text) - value) <= 0.5 * 10**-decimals + 1e-9
    assert len(text.partition(".")[2]) == decimals


def test_format_fixed_negative_decimals():
    with pytest.raises(ValueError):
        format_fixed(1.0, -1)


def test_config_line():
    assert config_line(0x33, "EM", "0.950") == "cs:33:EM=0.950"


@given(st.integers(min_value=0, max_value=255), st.sampled_from(["EM", "TR", "RR"]))
def test_config_line_prefix(address, key):
    line = config_line(address, key, 1)
    assert line.startswith("cs:")
    assert parse_hex8(line.split(":")[1]) == address
    assert line.endswith(f":{key}=1")


def test_reply_line():
    assert reply_line(0x33, "EM=OK [hub-register]") == "+cs:33:EM=OK [hub-register]"


@pytest.mark.parametrize("address", [-1, 256])
def test_lines_reject_bad_address(address):
    with pytest.raises(ValueError):
        config_line(address, "EM", 1)
    with pytest.raises(ValueError):
        reply_line(address, "x")


def test_flag_list_none_set():
    assert flag_list(0, NAMES) == "0"


def test_flag_list_all_set():
    assert flag_list(3, NAMES) == "3(CORRECT_BROKEN_PIXELS,IIR_FILTER)"


def test_flag_list_one_set_with_pairs():
    assert flag_list(2, list(NAMES.items())) == "2(IIR_FILTER)"


def test_flag_list_keeps_name_order():
    reversed_names = [(2, "IIR_FILTER"), (1, "CORRECT_BROKEN_PIXELS")]
    assert flag_list(3, reversed_names) == "3(IIR_FILTER,CORRECT_BROKEN_PIXELS)"


def test_flag_list_unnamed_bits_only_in_number():
    assert flag_list(4, NAMES) == "4"