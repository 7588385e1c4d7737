from dataclasses import dataclass
from typing import Union

MAX_ROBOT_COUNT = 16
# Largest valid coordinate, so the table is (TABLE_WIDTH + 1) x (TABLE_HEIGHT + 1) cells
TABLE_WIDTH = 4
TABLE_HEIGHT = 4

# Direction constants, in right-turn order
DIR_NORTH = 0
DIR_EAST = 1
DIR_SOUTH = 2
DIR_WEST = 3

HEADING_NAMES = ("NORTH", "EAST", "SOUTH", "WEST")

NAME_TO_DIR = {name: d for d, name in enumerate(HEADING_NAMES)}

# direction -> (dx, dy), north is +y
DIR_TO_DELTA = {
    DIR_NORTH: (0, 1),
    DIR_EAST: (1, 0),
    DIR_SOUTH: (0, -1),
    DIR_WEST: (-1, 0),
}


def turn_left(heading: int) -> int:
    return (heading - 1) % 4


def turn_right(heading: int) -> int:
    return (heading + 1) % 4


@dataclass
class Robot:
    x: int = 0
    y: int = 0
    heading: int = DIR_NORTH
    is_placed: bool = False


@dataclass(frozen=True)
class Place:
    x: int
    y: int
    heading: int

    def __str__(self) -> str:
        return f"PLACE {self.x},{self.y},{HEADING_NAMES[self.heading]}"


@dataclass(frozen=True)
class Move:
    def __str__(self) -> str:
        return "MOVE"


@dataclass(frozen=True)
class TurnLeft:
    def __str__(self) -> str:
        return "LEFT"


@dataclass(frozen=True)
class TurnRight:
    def __str__(self) -> str:
        return "RIGHT"


@dataclass(frozen=True)
class Report:
    def __str__(self) -> str:
        return "REPORT"


@dataclass(frozen=True)
class Select:
    index: int  # 1-based

    def __str__(self) -> str:
        return f"ROBOT {self.index}"


Instruction = Union[Place, Move, TurnLeft, TurnRight, Report, Select]
