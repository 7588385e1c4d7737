import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from data_types import (
    DIR_TO_DELTA,
    HEADING_NAMES,
    MAX_ROBOT_COUNT,
    TABLE_HEIGHT,
    TABLE_WIDTH,
    Instruction,
    Move,
    Place,
    Report,
    Robot,
    Select,
    TurnLeft,
    TurnRight,
    turn_left,
    turn_right,
)


@dataclass
class World:
    robots: List[Robot] = field(default_factory=lambda: [Robot() for _ in range(MAX_ROBOT_COUNT)])
    active: int = 0  # robots placed so far, they occupy robots[:active]
    selected: int = 0

    def selected_robot(self) -> Robot:
        return self.robots[self.selected]

    def snapshot(self) -> Dict:
        return {
            "selected": self.selected,
            "active": self.active,
            "robots": [
                {"id": i + 1, "x": r.x, "y": r.y, "heading": HEADING_NAMES[r.heading]}
                for i, r in enumerate(self.robots[: self.active])
                if r.is_placed
            ],
        }


def format_report(world: World) -> str:
    robot = world.selected_robot()
    return f"Robot {world.selected + 1} of {world.active}: {robot.x},{robot.y},{HEADING_NAMES[robot.heading]}"


def move_robot(robot: Robot) -> None:
    dx, dy = DIR_TO_DELTA[robot.heading]
    # Stop on the edge cell. A robot placed off the table only stops at 0.
    if (dx > 0 and robot.x != TABLE_WIDTH) or (dx < 0 and robot.x != 0):
        robot.x += dx
    if (dy > 0 and robot.y != TABLE_HEIGHT) or (dy < 0 and robot.y != 0):
        robot.y += dy


def place_robot(world: World, cmd: Place) -> None:
    if world.active >= MAX_ROBOT_COUNT:
        raise RuntimeError(f"Cannot place robot: all {MAX_ROBOT_COUNT} robots are already placed")
    robot = world.robots[world.active]
    # Coordinates are taken as given, even off the table
    robot.x = cmd.x
    robot.y = cmd.y
    robot.heading = cmd.heading
    robot.is_placed = True
    world.selected = world.active
    world.active += 1


def select_robot(world: World, cmd: Select) -> None:
    if cmd.index == 0 or cmd.index > MAX_ROBOT_COUNT:
        raise RuntimeError(f"Robot index out of range: {cmd.index} (expected 1..{MAX_ROBOT_COUNT})")
    if cmd.index > world.active:
        return
    if not world.robots[cmd.index - 1].is_placed:
        return
    world.selected = cmd.index - 1


def is_skipped(world: World, cmd: Instruction) -> bool:
    """True when cmd needs a placed robot and the selected one is not."""
    if isinstance(cmd, (Place, Select)):
        return False
    return not world.selected_robot().is_placed


def execute(world: World, cmd: Instruction) -> Optional[str]:
    """Apply one instruction. Returns the report line for REPORT, otherwise None."""
    if is_skipped(world, cmd):
        return None
    robot = world.selected_robot()
    if isinstance(cmd, Place):
        place_robot(world, cmd)
    elif isinstance(cmd, Move):
        move_robot(robot)
    elif isinstance(cmd, TurnLeft):
        robot.heading = turn_left(robot.heading)
    elif isinstance(cmd, TurnRight):
        robot.heading = turn_right(robot.heading)
    elif isinstance(cmd, Report):
        return format_report(world)
    elif isinstance(cmd, Select):
        select_robot(world, cmd)
    else:
        raise RuntimeError(f"Unknown instruction: {cmd!r}")
    return None


def run_instructions(
    world: World,
    instructions: Iterable[Instruction],
    emit: Callable[[str], None] = print,
    trace: Optional[List[Dict]] = None,
    verbose: bool = False,
) -> List[str]:
    reports: List[str] = []
    executed = 0
    skipped = 0
    for cmd in instructions:
        if is_skipped(world, cmd):
            skipped += 1
            continue
        line = execute(world, cmd)
        executed += 1
        if line is not None:
            reports.append(line)
            emit(line)
        if trace is not None:
            step = {"step": len(trace), "instruction": str(cmd)}
            step.update(world.snapshot())
            trace.append(step)
    if verbose:
        print(
            f"[exec] executed={executed} skipped={skipped} robots={world.active} reports={len(reports)}",
            file=sys.stderr,
        )
    return reports
