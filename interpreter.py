from __future__ import annotations
import math
from typing import Optional, Tuple
from diagnostics import Diagnostics, DocumentError, UNSUPPORTED_SEGMENT
from path_data import (PathCommand, COMMAND_ARITY, MOVE, LINE, HORIZONTAL_LINE, VERTICAL_LINE,
                       QUADRATIC, CUBIC, SMOOTH_QUADRATIC, SMOOTH_CUBIC, CLOSE)

MOVE_TO = 'move_to'
LINE_TO = 'line_to'
QUAD_TO = 'quad_to'
CUBIC_TO = 'cubic_to'
CLOSE_PATH = 'close'

Point = Tuple[float, float]

class CanonicalOp:
    """One absolute drawing instruction. Points end with the endpoint."""

    def __init__(self, kind: str, *points: Point):
        self.kind = kind
        self.points = tuple((float(x), float(y)) for x, y in points)

    @property
    def end(self) -> Optional[Point]:
        return self.points[-1] if self.points else None

    def __eq__(self, other):
        if not isinstance(other, CanonicalOp):
            return NotImplemented
        return self.kind == other.kind and self.points == other.points

    def __repr__(self):
        return f"CanonicalOp({self.kind!r}, {', '.join(map(repr, self.points))})"

class Cursor:
    """Current drawing position plus the start of the current subpath.

    The last curve control points are remembered so smooth curves can
    reflect them; they never count as a position.
    """

    def __init__(self, x: float = 0.0, y: float = 0.0,
                 start_x: float = 0.0, start_y: float = 0.0,
                 cubic_control: Optional[Point] = None,
                 quad_control: Optional[Point] = None):
        self.x = x
        self.y = y
        self.start_x = start_x
        self.start_y = start_y
        self.cubic_control = cubic_control
        self.quad_control = quad_control

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def resolve(self, x: float, y: float, relative: bool) -> Point:
        if relative:
            return (self.x + x, self.y + y)
        return (x, y)

    def moved_to(self, point: Point, cubic_control: Optional[Point] = None,
                 quad_control: Optional[Point] = None) -> 'Cursor':
        return Cursor(point[0], point[1], self.start_x, self.start_y, cubic_control, quad_control)

    def started_at(self, point: Point) -> 'Cursor':
        return Cursor(point[0], point[1], point[0], point[1])

    def reflect(self, control: Optional[Point]) -> Point:
        if control is None:
            return self.position
        return (2 * self.x - control[0], 2 * self.y - control[1])

    def __eq__(self, other):
        if not isinstance(other, Cursor):
            return NotImplemented
        return self.position == other.position and (self.start_x, self.start_y) == (other.start_x, other.start_y)

    def __repr__(self):
        return f"Cursor(({self.x}, {self.y}), start=({self.start_x}, {self.start_y}))"

def _is_number(value) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)

def _operands(command: PathCommand, index: int) -> tuple:
    arity = COMMAND_ARITY[command.kind]
    operands = command.operands
    if len(operands) != arity or not all(_is_number(v) for v in operands):
        raise DocumentError(
            f"Malformed operands for '{command.kind}' command at index {index}: "
            f"expected {arity} numbers, got {list(operands)!r}")
    return tuple(float(v) for v in operands)

def step_move(cursor: Cursor, relative: bool, args: tuple):
    point = cursor.resolve(args[0], args[1], relative)
    return CanonicalOp(MOVE_TO, point), cursor.started_at(point)

def step_line(cursor: Cursor, relative: bool, args: tuple):
    point = cursor.resolve(args[0], args[1], relative)
    return CanonicalOp(LINE_TO, point), cursor.moved_to(point)

def step_horizontal_line(cursor: Cursor, relative: bool, args: tuple):
    x = cursor.x + args[0] if relative else args[0]
    point = (x, cursor.y)
    return CanonicalOp(LINE_TO, point), cursor.moved_to(point)

def step_vertical_line(cursor: Cursor, relative: bool, args: tuple):
    y = cursor.y + args[0] if relative else args[0]
    point = (cursor.x, y)
    return CanonicalOp(LINE_TO, point), cursor.moved_to(point)

def step_quadratic(cursor: Cursor, relative: bool, args: tuple):
    control = cursor.resolve(args[0], args[1], relative)
    end = cursor.resolve(args[2], args[3], relative)
    return CanonicalOp(QUAD_TO, control, end), cursor.moved_to(end, quad_control=control)

def step_smooth_quadratic(cursor: Cursor, relative: bool, args: tuple):
    control = cursor.reflect(cursor.quad_control)
    end = cursor.resolve(args[0], args[1], relative)
    return CanonicalOp(QUAD_TO, control, end), cursor.moved_to(end, quad_control=control)

def step_cubic(cursor: Cursor, relative: bool, args: tuple):
    control1 = cursor.resolve(args[0], args[1], relative)
    control2 = cursor.resolve(args[2], args[3], relative)
    end = cursor.resolve(args[4], args[5], relative)
    return CanonicalOp(CUBIC_TO, control1, control2, end), cursor.moved_to(end, cubic_control=control2)

def step_smooth_cubic(cursor: Cursor, relative: bool, args: tuple):
    control1 = cursor.reflect(cursor.cubic_control)
    control2 = cursor.resolve(args[0], args[1], relative)
    end = cursor.resolve(args[2], args[3], relative)
    return CanonicalOp(CUBIC_TO, control1, control2, end), cursor.moved_to(end, cubic_control=control2)

def step_close(cursor: Cursor, relative: bool, args: tuple):
    # 'z' and 'Z' behave the same: back to the subpath start, never the origin
    start = (cursor.start_x, cursor.start_y)
    return CanonicalOp(CLOSE_PATH), cursor.started_at(start)

STEPS = {
    MOVE: step_move,
    LINE: step_line,
    HORIZONTAL_LINE: step_horizontal_line,
    VERTICAL_LINE: step_vertical_line,
    QUADRATIC: step_quadratic,
    SMOOTH_QUADRATIC: step_smooth_quadratic,
    CUBIC: step_cubic,
    SMOOTH_CUBIC: step_smooth_cubic,
    CLOSE: step_close,
}

class PathInterpreter:
    def __init__(self, diagnostics: Optional[Diagnostics] = None):
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def interpret(self, commands: list[PathCommand]) -> list[CanonicalOp]:
        ops = []
        cursor = Cursor()

        for index, command in enumerate(commands):
            step = STEPS.get(command.kind)
            if step is None:
                self.diagnostics.warn(UNSUPPORTED_SEGMENT,
                                      f"Skipping unsupported path segment {command!r} at index {index}",
                                      index=index, kind=command.kind)
                continue

            op, cursor = step(cursor, command.relative, _operands(command, index))
            ops.append(op)

        return ops

def interpret(commands: list[PathCommand], diagnostics: Optional[Diagnostics] = None) -> list[CanonicalOp]:
    return PathInterpreter(diagnostics).interpret(commands)
