import io
import os
import sys
import tempfile

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src", "py")))

from command_parser import ParseError, parse_line, parse_stream, parse_text
from data_types import (
    DIR_EAST,
    DIR_NORTH,
    DIR_SOUTH,
    DIR_WEST,
    Move,
    Place,
    Report,
    Select,
    TurnLeft,
    TurnRight,
)


# --- parse_line tests ---

@pytest.mark.parametrize(
    "heading, expected",
    [("NORTH", DIR_NORTH), ("EAST", DIR_EAST), ("SOUTH", DIR_SOUTH), ("WEST", DIR_WEST)],
)
def test_place_each_heading(heading, expected):
    assert parse_line(f"PLACE 1,2,{heading}") == Place(x=1, y=2, heading=expected)


def test_place_sign_is_dropped():
    assert parse_line("PLACE -3,+4,WEST") == Place(x=3, y=4, heading=DIR_WEST)


def test_place_allows_space_before_numbers():
    assert parse_line("PLACE  1, 2,NORTH") == Place(x=1, y=2, heading=DIR_NORTH)


def test_place_off_table_coordinates_accepted():
    assert parse_line("PLACE 9,17,SOUTH") == Place(x=9, y=17, heading=DIR_SOUTH)


def test_bare_verbs():
    assert parse_line("MOVE") == Move()
    assert parse_line("LEFT") == TurnLeft()
    assert parse_line("RIGHT") == TurnRight()
    assert parse_line("REPORT") == Report()


def test_verbs_match_by_prefix():
    assert parse_line("MOVEMENT") == Move()
    assert parse_line("REPORT now") == Report()


def test_select():
    assert parse_line("ROBOT 3") == Select(index=3)
    assert parse_line("ROBOT -2") == Select(index=2)


def test_blank_and_whitespace_lines_yield_nothing():
    assert parse_line("") is None
    assert parse_line("   \t ") is None


@pytest.mark.parametrize(
    "line, reason",
    [
        ("PLACE abc,1,NORTH", "X component of PLACE"),
        ("PLACE 1;1,NORTH", "expected X comma"),
        ("PLACE 1,,NORTH", "Y component of PLACE"),
        ("PLACE 1,1 NORTH", "expected Y comma"),
        ("PLACE 1,1,north", "direction component of PLACE"),
        ("PLACE 1,1,NORTH ", "direction component of PLACE"),
        ("PLACE 1,1, NORTH", "direction component of PLACE"),
        ("PLACE 1,1,", "direction component of PLACE"),
        ("ROBOT x", "expected index of ROBOT"),
        ("ROBOT 0", "index of ROBOT must be positive"),
    ],
)
def test_malformed_lines(line, reason):
    with pytest.raises(ParseError) as excinfo:
        parse_line(line, line_no=7)
    assert excinfo.value.reason == reason
    assert excinfo.value.line_no == 7
    assert str(excinfo.value) == f"failed parsing: {reason}, line 7: {line}"


@pytest.mark.parametrize("line", ["JUMP", "move", "  MOVE", "ROBOT", "PLACE"])
def test_unknown_verbs(line):
    with pytest.raises(ParseError) as excinfo:
        parse_line(line, line_no=1)
    assert "unexpected characters" in str(excinfo.value)


def test_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_line("FLY")


# --- parse_stream tests ---

def test_parse_text_keeps_order_and_skips_blanks():
    text = "PLACE 0,0,NORTH\n\nMOVE\n   \nROBOT 1\nREPORT\n"
    assert parse_text(text) == [Place(0, 0, DIR_NORTH), Move(), Select(1), Report()]


def test_parse_stream_handles_crlf_and_missing_final_newline():
    stream = io.StringIO("PLACE 1,2,EAST\r\nLEFT\r\nREPORT")
    assert parse_stream(stream) == [Place(1, 2, DIR_EAST), TurnLeft(), Report()]


def test_parse_stream_empty_source():
    assert parse_stream(io.StringIO("")) == []


def test_parse_stream_reports_line_number():
    with pytest.raises(ParseError) as excinfo:
        parse_text("PLACE 0,0,NORTH\n\nMOVE\nFLY\nREPORT\n")
    assert excinfo.value.line_no == 4
    assert excinfo.value.line == "FLY"


def test_parse_stream_from_file():
    fd, path = tempfile.mkstemp(suffix=".txt")
    with os.fdopen(fd, "w") as f:
        f.write("PLACE 0,0,NORTH\nRIGHT\nMOVE\nREPORT\n")
    try:
        with open(path, "r", encoding="utf-8") as f:
            cmds = parse_stream(f)
        assert cmds == [Place(0, 0, DIR_NORTH), TurnRight(), Move(), Report()]
    finally:
        os.unlink(path)


def test_instructions_render_back_to_commands():
    text = "PLACE 3,4,WEST\nMOVE\nLEFT\nRIGHT\nREPORT\nROBOT 2"
    assert "\n".join(str(c) for c in parse_text(text)) == text


def test_long_numbers_with_leading_zeros():
    line = "PLACE " + "0" * 5000 + "1,-" + "0" * 5000 + "2,EAST"
    assert parse_line(line) == Place(x=1, y=2, heading=DIR_EAST)
    assert parse_line("ROBOT " + "0" * 5000 + "3") == Select(index=3)


def test_overflowing_numbers_clamp_to_int64_max():
    int64_max = 2 ** 63 - 1
    assert parse_line("PLACE " + "9" * 5000 + ",1,NORTH") == Place(x=int64_max, y=1, heading=DIR_NORTH)
    assert parse_line("PLACE 1,-9223372036854775809,NORTH") == Place(x=1, y=int64_max, heading=DIR_NORTH)
    assert parse_line("ROBOT " + "7" * 30) == Select(index=int64_max)
