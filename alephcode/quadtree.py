from __future__ import annotations

import math
from typing import Sequence

MAX_DEPTH = 24
MIN_CELL_SIZE = 1e-6
BOUNDS_PADDING = 0.05

NO_CHILD = -1
NO_POINT = -1


class QuadTree:
    """
    Barnes-Hut quad-tree stored as an arena of parallel lists.

    Cell `k` spans [x[k], x[k] + size[k]) x [y[k], y[k] + size[k]). An internal
    cell's four children sit at indices child[k] .. child[k] + 3 in the order
    NW, NE, SW, SE. A leaf holds one point index, or a bucket of indices once
    it is too small or too deep to split (coincident points).

    Every cell tracks the number of points below it (`mass`) and their
    center of mass, updated as points are inserted. The tree is rebuilt from
    scratch for every layout tick and thrown away afterwards.
    """

    def __init__(self, xs: Sequence[float], ys: Sequence[float], x0: float, y0: float, size: float):
        self.xs = xs
        self.ys = ys
        self.x: list[float] = []
        self.y: list[float] = []
        self.size: list[float] = []
        self.depth: list[int] = []
        self.mass: list[int] = []
        self.cx: list[float] = []
        self.cy: list[float] = []
        self.child: list[int] = []
        self.point: list[int] = []
        self.bucket: list[list[int] | None] = []
        self._new_cell(x0, y0, size, 0)

    @classmethod
    def build(cls, xs: Sequence[float], ys: Sequence[float]) -> "QuadTree":
        """Tree over all points, inside their bounding square padded by 5%."""
        if xs:
            min_x, max_x = min(xs), max(xs)
            min_y, max_y = min(ys), max(ys)
        else:
            min_x = max_x = min_y = max_y = 0.0
        span = max(max_x - min_x, max_y - min_y, MIN_CELL_SIZE)
        pad = span * BOUNDS_PADDING
        tree = cls(xs, ys, min_x - pad, min_y - pad, span + 2 * pad)
        for i in range(len(xs)):
            tree.insert(i)
        return tree

    def __len__(self) -> int:
        return len(self.x)

    @property
    def root_mass(self) -> int:
        return self.mass[0]

    def _new_cell(self, x0: float, y0: float, size: float, depth: int) -> int:
        self.x.append(x0)
        self.y.append(y0)
        self.size.append(size)
        self.depth.append(depth)
        self.mass.append(0)
        self.cx.append(0.0)
        self.cy.append(0.0)
        self.child.append(NO_CHILD)
        self.point.append(NO_POINT)
        self.bucket.append(None)
        return len(self.x) - 1

    def _add_mass(self, k: int, px: float, py: float) -> None:
        m = self.mass[k]
        self.cx[k] = (self.cx[k] * m + px) / (m + 1)
        self.cy[k] = (self.cy[k] * m + py) / (m + 1)
        self.mass[k] = m + 1

    def _quadrant(self, k: int, px: float, py: float) -> int:
        half = self.size[k] / 2
        east = px >= self.x[k] + half
        south = py >= self.y[k] + half
        return self.child[k] + int(east) + 2 * int(south)

    def _split(self, k: int) -> None:
        half = self.size[k] / 2
        depth = self.depth[k] + 1
        x0, y0 = self.x[k], self.y[k]
        first = self._new_cell(x0, y0, half, depth)
        self._new_cell(x0 + half, y0, half, depth)
        self._new_cell(x0, y0 + half, half, depth)
        self._new_cell(x0 + half, y0 + half, half, depth)
        self.child[k] = first

        j = self.point[k]
        self.point[k] = NO_POINT
        jx, jy = self.xs[j], self.ys[j]
        target = self._quadrant(k, jx, jy)
        self._add_mass(target, jx, jy)
        self.point[target] = j

    def insert(self, i: int) -> None:
        px, py = self.xs[i], self.ys[i]
        k = 0
        while True:
            occupied = self.mass[k] > 0
            self._add_mass(k, px, py)

            if self.child[k] != NO_CHILD:
                k = self._quadrant(k, px, py)
                continue
            if not occupied:
                self.point[k] = i
                return
            if self.bucket[k] is not None:
                self.bucket[k].append(i)
                return
            if self.depth[k] >= MAX_DEPTH or self.size[k] / 2 < MIN_CELL_SIZE:
                self.bucket[k] = [self.point[k], i]
                self.point[k] = NO_POINT
                return

            self._split(k)
            k = self._quadrant(k, px, py)

    def _leaf_points(self, k: int) -> list[int]:
        bucket = self.bucket[k]
        if bucket is not None:
            return bucket
        return [self.point[k]] if self.point[k] != NO_POINT else []

    def repulsion(self, i: int, strength: float, theta: float, epsilon: float) -> tuple[float, float]:
        """
        Approximate repulsive force on point `i` from every other point.

        A cell is treated as one body at its center of mass when
        size^2 / distance^2 < theta^2 and it does not contain the point;
        otherwise its children are visited. Each body pushes with
        strength * mass / (distance^2 + epsilon).
        """
        px, py = self.xs[i], self.ys[i]
        theta2 = theta * theta
        fx = fy = 0.0
        stack = [0]
        while stack:
            k = stack.pop()
            if self.mass[k] == 0:
                continue

            if self.child[k] == NO_CHILD:
                for j in self._leaf_points(k):
                    if j == i:
                        continue
                    dx, dy = px - self.xs[j], py - self.ys[j]
                    if dx == 0.0 and dy == 0.0:
                        # Coincident: push apart along a fixed direction chosen by index order.
                        dx = epsilon if i > j else -epsilon
                    gx, gy = inverse_square_push(dx, dy, strength, epsilon)
                    fx += gx
                    fy += gy
                continue

            dx, dy = px - self.cx[k], py - self.cy[k]
            d2 = dx * dx + dy * dy
            size = self.size[k]
            inside = self.x[k] <= px < self.x[k] + size and self.y[k] <= py < self.y[k] + size
            if not inside and d2 > 0.0 and size * size / d2 < theta2:
                gx, gy = inverse_square_push(dx, dy, strength * self.mass[k], epsilon)
                fx += gx
                fy += gy
            else:
                first = self.child[k]
                stack.extend((first, first + 1, first + 2, first + 3))
        return fx, fy


def inverse_square_push(dx: float, dy: float, strength: float, epsilon: float) -> tuple[float, float]:
    d2 = dx * dx + dy * dy + epsilon
    d = math.sqrt(d2)
    magnitude = strength / d2
    return dx / d * magnitude, dy / d * magnitude
