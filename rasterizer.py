from __future__ import annotations
import math
import numpy as np
from typing import List, Optional, Tuple
from interpreter import CanonicalOp, MOVE_TO, LINE_TO, QUAD_TO, CUBIC_TO, CLOSE_PATH
from paint import LineJoin, NONZERO, EVENODD, MITER, ROUND

Point = Tuple[float, float]

def _midpoint(a, b):
    return ((a[0] + b[0]) / 2, (a[1] + b[1]) / 2)

def subdivide_cubic_bezier(p0: Point, p1: Point, p2: Point, p3: Point,
                           tolerance: float = 0.25) -> List[Point]:
    points = [p0]

    def flatness(p0, p1, p2, p3):
        ux = 3 * p1[0] - 2 * p0[0] - p3[0]
        uy = 3 * p1[1] - 2 * p0[1] - p3[1]
        vx = 3 * p2[0] - 2 * p3[0] - p0[0]
        vy = 3 * p2[1] - 2 * p3[1] - p0[1]
        return max(ux * ux + uy * uy, vx * vx + vy * vy)

    def subdivide(p0, p1, p2, p3, depth=0):
        if depth > 10 or flatness(p0, p1, p2, p3) < tolerance * tolerance:
            points.append(p3)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m23 = _midpoint(p2, p3)
        m012 = _midpoint(m01, m12)
        m123 = _midpoint(m12, m23)
        m0123 = _midpoint(m012, m123)

        subdivide(p0, m01, m012, m0123, depth + 1)
        subdivide(m0123, m123, m23, p3, depth + 1)

    subdivide(p0, p1, p2, p3)
    return points

def subdivide_quadratic_bezier(p0: Point, p1: Point, p2: Point,
                               tolerance: float = 0.25) -> List[Point]:
    points = [p0]

    def flatness(p0, p1, p2):
        ux = 2 * p1[0] - p0[0] - p2[0]
        uy = 2 * p1[1] - p0[1] - p2[1]
        return ux * ux + uy * uy

    def subdivide(p0, p1, p2, depth=0):
        if depth > 10 or flatness(p0, p1, p2) < tolerance * tolerance:
            points.append(p2)
            return

        m01 = _midpoint(p0, p1)
        m12 = _midpoint(p1, p2)
        m012 = _midpoint(m01, m12)

        subdivide(p0, m01, m012, depth + 1)
        subdivide(m012, m12, p2, depth + 1)

    subdivide(p0, p1, p2)
    return points

def flatten(ops: List[CanonicalOp], tolerance: float = 0.25) -> List[Tuple[List[Point], bool]]:
    """Turn canonical ops into polylines, one (points, closed) pair per subpath."""
    subpaths = []
    points: List[Point] = []
    current = (0.0, 0.0)
    start = current

    for op in ops:
        if op.kind == MOVE_TO:
            if len(points) > 1:
                subpaths.append((points, False))
            current = start = op.end
            points = [current]
            continue

        if op.kind == CLOSE_PATH:
            if len(points) > 1:
                subpaths.append((points, True))
            current = start
            points = [start]
            continue

        if not points:
            points = [current]

        if op.kind == LINE_TO:
            points.append(op.end)
        elif op.kind == QUAD_TO:
            points.extend(subdivide_quadratic_bezier(current, op.points[0], op.end, tolerance)[1:])
        elif op.kind == CUBIC_TO:
            points.extend(subdivide_cubic_bezier(current, op.points[0], op.points[1], op.end, tolerance)[1:])
        current = op.end

    if len(points) > 1:
        subpaths.append((points, False))

    return subpaths

def _without_repeats(points: List[Point], closed: bool) -> List[Point]:
    result = []
    for point in points:
        if not result or result[-1] != point:
            result.append(point)
    if closed and len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result

def _unit(dx: float, dy: float) -> Optional[Point]:
    length = math.hypot(dx, dy)
    if length == 0:
        return None
    return (dx / length, dy / length)

class Rasterizer:
    """Scan-converts canonical ops into coverage masks.

    Pixels are sampled at their centers, or on a 2x2 grid per pixel when
    anti-aliasing is on. Masks are float arrays of shape (height, width)
    holding the covered fraction of each pixel.
    """

    def __init__(self, width: int, height: int, anti_aliasing: bool = False,
                 tolerance: float = 0.25):
        self.width = width
        self.height = height
        self.tolerance = tolerance
        self.samples = 2 if anti_aliasing else 1
        self._xs = (np.arange(width * self.samples) + 0.5) / self.samples
        self._ys = (np.arange(height * self.samples) + 0.5) / self.samples

    def fill(self, ops: List[CanonicalOp], rule: str = NONZERO) -> np.ndarray:
        grid = self._blank()
        polygons = [points for points, _closed in flatten(ops, self.tolerance) if len(points) >= 3]
        self._fill_polygons(grid, polygons, rule)
        return self._coverage(grid)

    def stroke(self, ops: List[CanonicalOp], width: float,
               join: Optional[LineJoin] = None) -> np.ndarray:
        grid = self._blank()
        if width <= 0:
            return self._coverage(grid)

        join = join or LineJoin()
        half_width = width / 2.0

        for points, closed in flatten(ops, self.tolerance):
            points = _without_repeats(points, closed)
            if len(points) < 2:
                continue

            segments = list(zip(points, points[1:]))
            corners = [(points[i - 1], points[i], points[i + 1]) for i in range(1, len(points) - 1)]
            if closed and len(points) > 2:
                segments.append((points[-1], points[0]))
                corners.append((points[-2], points[-1], points[0]))
                corners.append((points[-1], points[0], points[1]))

            for a, b in segments:
                self._stroke_segment(grid, a, b, half_width)
            for prev, vertex, nxt in corners:
                self._stroke_join(grid, prev, vertex, nxt, half_width, join)

        return self._coverage(grid)

    def _blank(self) -> np.ndarray:
        return np.zeros((len(self._ys), len(self._xs)), dtype=bool)

    def _coverage(self, grid: np.ndarray) -> np.ndarray:
        s = self.samples
        return grid.reshape(self.height, s, self.width, s).mean(axis=(1, 3))

    def _window(self, min_x: float, min_y: float, max_x: float, max_y: float):
        s = self.samples
        c0 = max(0, int(math.floor(min_x * s)) - 1)
        c1 = min(len(self._xs), int(math.ceil(max_x * s)) + 1)
        r0 = max(0, int(math.floor(min_y * s)) - 1)
        r1 = min(len(self._ys), int(math.ceil(max_y * s)) + 1)
        if c0 >= c1 or r0 >= r1:
            return None

        xs = self._xs[c0:c1][np.newaxis, :]
        ys = self._ys[r0:r1][:, np.newaxis]
        return (slice(r0, r1), slice(c0, c1)), xs, ys

    def _fill_polygons(self, grid: np.ndarray, polygons: List[List[Point]], rule: str):
        if not polygons:
            return

        all_x = [p[0] for points in polygons for p in points]
        all_y = [p[1] for points in polygons for p in points]
        window = self._window(min(all_x), min(all_y), max(all_x), max(all_y))
        if window is None:
            return
        region, xs, ys = window

        winding = np.zeros((ys.shape[0], xs.shape[1]), dtype=np.int32)
        for points in polygons:
            for i in range(len(points)):
                x0, y0 = points[i - 1]
                x1, y1 = points[i]
                if y0 == y1:
                    continue

                cross = (x1 - x0) * (ys - y0) - (xs - x0) * (y1 - y0)
                upward = (y0 <= ys) & (y1 > ys)
                downward = (y0 > ys) & (y1 <= ys)
                winding += (upward & (cross > 0)).astype(np.int32)
                winding -= (downward & (cross < 0)).astype(np.int32)

        if rule == EVENODD:
            inside = (winding % 2) != 0
        else:
            inside = winding != 0
        grid[region] |= inside

    def _stroke_segment(self, grid: np.ndarray, a: Point, b: Point, half_width: float):
        dx = b[0] - a[0]
        dy = b[1] - a[1]
        length_sq = dx * dx + dy * dy
        if length_sq == 0:
            return

        window = self._window(min(a[0], b[0]) - half_width, min(a[1], b[1]) - half_width,
                              max(a[0], b[0]) + half_width, max(a[1], b[1]) + half_width)
        if window is None:
            return
        region, xs, ys = window

        proj = ((xs - a[0]) * dx + (ys - a[1]) * dy) / length_sq
        dist = np.abs((xs - a[0]) * dy - (ys - a[1]) * dx) / math.sqrt(length_sq)
        grid[region] |= (proj >= 0.0) & (proj <= 1.0) & (dist <= half_width)

    def _stroke_disc(self, grid: np.ndarray, center: Point, radius: float):
        cx, cy = center
        window = self._window(cx - radius, cy - radius, cx + radius, cy + radius)
        if window is None:
            return
        region, xs, ys = window
        grid[region] |= (xs - cx) ** 2 + (ys - cy) ** 2 <= radius * radius

    def _stroke_join(self, grid: np.ndarray, prev: Point, vertex: Point, nxt: Point,
                     half_width: float, join: LineJoin):
        if join.kind == ROUND:
            self._stroke_disc(grid, vertex, half_width)
            return

        d1 = _unit(vertex[0] - prev[0], vertex[1] - prev[1])
        d2 = _unit(nxt[0] - vertex[0], nxt[1] - vertex[1])
        if d1 is None or d2 is None:
            return

        cross = d1[0] * d2[1] - d1[1] * d2[0]
        if abs(cross) < 1e-12:
            return

        # offsets on the outer side of the turn
        side = -1.0 if cross > 0 else 1.0
        n1 = (-d1[1] * side, d1[0] * side)
        n2 = (-d2[1] * side, d2[0] * side)
        outer1 = (vertex[0] + n1[0] * half_width, vertex[1] + n1[1] * half_width)
        outer2 = (vertex[0] + n2[0] * half_width, vertex[1] + n2[1] * half_width)
        polygon = [vertex, outer1, outer2]

        if join.kind == MITER:
            cos_turn = d1[0] * d2[0] + d1[1] * d2[1]
            if 1.0 + cos_turn > 1e-12:
                ratio = 1.0 / math.sqrt((1.0 + cos_turn) / 2.0)
                if ratio <= join.miter_limit:
                    bisector = _unit(n1[0] + n2[0], n1[1] + n2[1])
                    tip = (vertex[0] + bisector[0] * half_width * ratio,
                           vertex[1] + bisector[1] * half_width * ratio)
                    polygon = [vertex, outer1, tip, outer2]

        self._fill_polygons(grid, [polygon], NONZERO)
