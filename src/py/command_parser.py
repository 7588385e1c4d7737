"""Parser for the robot command language.

One instruction per line:
    PLACE X,Y,HEADING
    MOVE
    LEFT
    RIGHT
    REPORT
    ROBOT N
Blank and whitespace-only lines are ignored, anything else is a ParseError.
"""

import re
import sys
from typing import Callable, Iterable, Iterator, List, Optional, Tuple

from data_types import (
    NAME_TO_DIR,
    Instruction,
    Move,
    Place,
    Report,
    Select,
    TurnLeft,
    TurnRight,
)

_LINE_BREAK = re.compile(r"\r\n|\r|\n")
# Leading whitespace, optional sign, decimal digits
_NUMBER = re.compile(r"[ \t\n\v\f\r]*([+-]?[0-9]+)")
_WHITESPACE = " \t\r\n"
INT64_MAX = 2 ** 63 - 1


class ParseError(ValueError):
    def __init__(self, message: str, reason: str, line: str, line_no: Optional[int] = None):
        super().__init__(message)
        self.reason = reason
        self.line = line
        self.line_no = line_no


def _where(line_no: Optional[int]) -> str:
    return f"line {line_no}" if line_no is not None else "line"


def _fail(reason: str, line: str, line_no: Optional[int]) -> ParseError:
    return ParseError(f"failed parsing: {reason}, {_where(line_no)}: {line}", reason, line, line_no)


def _parse_number(line: str, pos: int, reason: str, line_no: Optional[int]) -> Tuple[int, int]:
    m = _NUMBER.match(line, pos)
    if m is None:
        raise _fail(reason, line, line_no)
    # A sign is accepted but only the magnitude is kept, clamped to INT64_MAX
    digits = m.group(1).lstrip("+-").lstrip("0")
    if len(digits) > len(str(INT64_MAX)):
        return INT64_MAX, m.end()
    return min(int(digits or "0"), INT64_MAX), m.end()


def _expect_char(ch: str, line: str, pos: int, reason: str, line_no: Optional[int]) -> int:
    if line[pos:pos + 1] != ch:
        raise _fail(reason, line, line_no)
    return pos + 1


def _parse_heading(line: str, pos: int, reason: str, line_no: Optional[int]) -> int:
    heading = NAME_TO_DIR.get(line[pos:])
    if heading is None:
        raise _fail(reason, line, line_no)
    return heading


def _parse_place(line: str, line_no: Optional[int]) -> Place:
    pos = len("PLACE ")
    x, pos = _parse_number(line, pos, "X component of PLACE", line_no)
    pos = _expect_char(",", line, pos, "expected X comma", line_no)
    y, pos = _parse_number(line, pos, "Y component of PLACE", line_no)
    pos = _expect_char(",", line, pos, "expected Y comma", line_no)
    heading = _parse_heading(line, pos, "direction component of PLACE", line_no)
    return Place(x=x, y=y, heading=heading)


def _parse_select(line: str, line_no: Optional[int]) -> Select:
    index, _ = _parse_number(line, len("ROBOT "), "expected index of ROBOT", line_no)
    if index == 0:
        raise _fail("index of ROBOT must be positive", line, line_no)
    return Select(index=index)


def _parse_unknown(line: str, line_no: Optional[int]) -> None:
    if line.strip(_WHITESPACE):
        raise ParseError(
            f"cannot parse {_where(line_no)}, unexpected characters: {line}",
            "unexpected characters",
            line,
            line_no,
        )
    return None


# Tried in order, first prefix match wins. Unknown verbs fall through to _parse_unknown.
PARSE_RULES: Tuple[Tuple[str, Callable[[str, Optional[int]], Instruction]], ...] = (
    ("PLACE ", _parse_place),
    ("MOVE", lambda line, line_no: Move()),
    ("LEFT", lambda line, line_no: TurnLeft()),
    ("RIGHT", lambda line, line_no: TurnRight()),
    ("REPORT", lambda line, line_no: Report()),
    ("ROBOT ", _parse_select),
)


def parse_line(line: str, line_no: Optional[int] = None) -> Optional[Instruction]:
    """Parse one line without its terminator. Returns None for blank lines."""
    if not line:
        return None
    for verb, handler in PARSE_RULES:
        if line.startswith(verb):
            return handler(line, line_no)
    return _parse_unknown(line, line_no)


def _iter_lines(source: Iterable[str]) -> Iterator[str]:
    for raw in source:
        parts = _LINE_BREAK.split(raw)
        if len(parts) > 1 and parts[-1] == "":
            parts.pop()
        yield from parts


def parse_stream(source: Iterable[str], verbose: bool = False) -> List[Instruction]:
    """Read every line of ``source`` and return the parsed instructions in order.

    ``source`` is anything yielding text lines: an open file, ``sys.stdin`` or a
    list of strings. Parsing stops at end of stream; the first malformed line
    raises ParseError and nothing parsed so far is returned.
    """
    instructions: List[Instruction] = []
    line_no = 0
    for line_no, line in enumerate(_iter_lines(source), start=1):
        instruction = parse_line(line, line_no)
        if instruction is not None:
            instructions.append(instruction)
    if verbose:
        print(f"[parse] lines={line_no} instructions={len(instructions)}", file=sys.stderr)
    return instructions


def parse_text(text: str, verbose: bool = False) -> List[Instruction]:
    return parse_stream([text], verbose=verbose)
