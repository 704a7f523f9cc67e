from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Literal, Sequence

from .quadtree import QuadTree, inverse_square_push

logger = logging.getLogger(__name__)

NodeType = Literal["word", "value"]


@dataclass
class GraphNode:
    id: str
    type: NodeType
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    payload: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GraphLink:
    source: str
    target: str
    layer: str


@dataclass
class Graph:
    nodes: list[GraphNode]
    links: list[GraphLink]


@dataclass(frozen=True)
class LayoutConfig:
    width: float = 800.0
    height: float = 600.0
    repulsion: float = 1500.0
    spring_length: float = 60.0
    spring_strength: float = 0.05
    centering: float = 0.01
    friction: float = 0.9
    max_velocity: float = 20.0
    alpha_start: float = 1.0
    alpha_decay: float = 0.98
    alpha_min: float = 0.01
    drag_alpha: float = 0.3
    release_alpha: float = 0.5
    settle_frames: int = 40
    barnes_hut_threshold: int = 250
    theta: float = 0.9
    direct_cutoff: float = 500.0
    epsilon: float = 0.01


class ForceLayoutEngine:
    """
    Force-directed layout of word/value nodes.

    Each tick applies repulsion between all nodes (Barnes-Hut above
    `barnes_hut_threshold` nodes, direct pairwise below it), spring attraction
    along links and a weak pull toward the canvas center, all scaled by alpha.
    Alpha cools geometrically; dragging holds it at a floor and releasing a
    node reheats it for a fixed number of settle frames.

    Nodes are updated in place. The engine owns them until the graph is
    rebuilt.
    """

    def __init__(self, graph: Graph, config: LayoutConfig | None = None):
        self.config = config or LayoutConfig()
        self.nodes = graph.nodes
        self.links = graph.links
        self._index = {node.id: i for i, node in enumerate(self.nodes)}
        self._edges = [
            (self._index[link.source], self._index[link.target])
            for link in self.links
            if link.source in self._index and link.target in self._index
        ]
        self.alpha = self.config.alpha_start
        self.ticks = 0
        self.dragged: str | None = None
        self._settle_remaining = 0

    @property
    def running(self) -> bool:
        return self.alpha > self.config.alpha_min or self.dragged is not None or self._settle_remaining > 0

    def node(self, node_id: str) -> GraphNode:
        return self.nodes[self._index[node_id]]

    def positions(self) -> dict[str, tuple[float, float]]:
        return {node.id: (node.x, node.y) for node in self.nodes}

    def reheat(self, alpha: float | None = None) -> None:
        self.alpha = max(self.alpha, self.config.release_alpha if alpha is None else alpha)

    def _pinned(self) -> int:
        return self._index[self.dragged] if self.dragged is not None else -1

    def _apply_repulsion(self, pinned: int) -> None:
        cfg = self.config
        strength = cfg.repulsion * self.alpha
        nodes = self.nodes
        n = len(nodes)

        if n > cfg.barnes_hut_threshold:
            xs = [node.x for node in nodes]
            ys = [node.y for node in nodes]
            tree = QuadTree.build(xs, ys)
            for i, node in enumerate(nodes):
                if i == pinned:
                    continue
                fx, fy = tree.repulsion(i, strength, cfg.theta, cfg.epsilon)
                node.vx += fx
                node.vy += fy
            return

        cutoff2 = cfg.direct_cutoff * cfg.direct_cutoff
        for i in range(n):
            a = nodes[i]
            for j in range(i + 1, n):
                b = nodes[j]
                dx, dy = a.x - b.x, a.y - b.y
                if dx * dx + dy * dy > cutoff2:
                    continue
                if dx == 0.0 and dy == 0.0:
                    dx = cfg.epsilon
                fx, fy = inverse_square_push(dx, dy, strength, cfg.epsilon)
                if i != pinned:
                    a.vx += fx
                    a.vy += fy
                if j != pinned:
                    b.vx -= fx
                    b.vy -= fy

    def _apply_springs(self, pinned: int) -> None:
        cfg = self.config
        k = cfg.spring_strength * self.alpha
        nodes = self.nodes
        for si, ti in self._edges:
            s, t = nodes[si], nodes[ti]
            dx, dy = t.x - s.x, t.y - s.y
            dist = math.hypot(dx, dy)
            if dist == 0.0:
                continue
            pull = (dist - cfg.spring_length) * k
            fx, fy = dx / dist * pull, dy / dist * pull
            if si != pinned:
                s.vx += fx
                s.vy += fy
            if ti != pinned:
                t.vx -= fx
                t.vy -= fy

    def _apply_centering(self, pinned: int) -> None:
        cfg = self.config
        k = cfg.centering * self.alpha
        cx, cy = cfg.width / 2, cfg.height / 2
        for i, node in enumerate(self.nodes):
            if i == pinned:
                continue
            node.vx += (cx - node.x) * k
            node.vy += (cy - node.y) * k

    def _integrate(self, pinned: int) -> None:
        cfg = self.config
        for i, node in enumerate(self.nodes):
            if i == pinned:
                node.vx = node.vy = 0.0
                continue
            speed = math.hypot(node.vx, node.vy)
            if speed > cfg.max_velocity:
                scale = cfg.max_velocity / speed
                node.vx *= scale
                node.vy *= scale
            node.vx *= cfg.friction
            node.vy *= cfg.friction
            node.x += node.vx
            node.y += node.vy

    def _cool(self) -> None:
        cfg = self.config
        if self.dragged is not None:
            self.alpha = max(self.alpha, cfg.drag_alpha)
            return
        self.alpha *= cfg.alpha_decay
        if self._settle_remaining > 0:
            self._settle_remaining -= 1

    def tick(self) -> bool:
        """Advance one frame. Returns whether the layout is still moving."""
        if not self.running:
            return False

        pinned = self._pinned()
        self._apply_repulsion(pinned)
        self._apply_springs(pinned)
        self._apply_centering(pinned)
        self._integrate(pinned)
        self._cool()
        self.ticks += 1

        if not self.running:
            logger.info(f"Layout of {len(self.nodes)} nodes settled after {self.ticks} ticks")
        return self.running

    def run(self, max_ticks: int) -> int:
        """Tick until the layout stops or `max_ticks` frames ran; returns frames run."""
        start = self.ticks
        while self.ticks - start < max_ticks and self.running:
            self.tick()
        return self.ticks - start

    def start_drag(self, node_id: str) -> None:
        node = self.node(node_id)
        node.vx = node.vy = 0.0
        self.dragged = node_id
        self.alpha = max(self.alpha, self.config.drag_alpha)

    def drag_to(self, node_id: str, x: float, y: float) -> None:
        if self.dragged != node_id:
            return
        node = self.node(node_id)
        node.x, node.y = x, y
        node.vx = node.vy = 0.0

    def end_drag(self) -> None:
        if self.dragged is None:
            return
        self.dragged = None
        self.reheat()
        self._settle_remaining = self.config.settle_frames

    def nearest(self, x: float, y: float, radius: float) -> str | None:
        """Id of the node nearest to world point (x, y) within `radius`, if any."""
        best: str | None = None
        best_d2 = radius * radius
        for node in self.nodes:
            d2 = (node.x - x) ** 2 + (node.y - y) ** 2
            if d2 <= best_d2:
                best, best_d2 = node.id, d2
        return best


@dataclass
class Viewport:
    """Screen = world * scale + offset."""

    offset_x: float = 0.0
    offset_y: float = 0.0
    scale: float = 1.0
    min_scale: float = 0.1
    max_scale: float = 8.0

    def to_world(self, sx: float, sy: float) -> tuple[float, float]:
        return (sx - self.offset_x) / self.scale, (sy - self.offset_y) / self.scale

    def to_screen(self, wx: float, wy: float) -> tuple[float, float]:
        return wx * self.scale + self.offset_x, wy * self.scale + self.offset_y

    def zoom_at(self, sx: float, sy: float, factor: float) -> None:
        """Zoom by `factor` keeping the world point under (sx, sy) fixed."""
        wx, wy = self.to_world(sx, sy)
        self.scale = min(self.max_scale, max(self.min_scale, self.scale * factor))
        self.offset_x = sx - wx * self.scale
        self.offset_y = sy - wy * self.scale

    def pan(self, dx: float, dy: float) -> None:
        self.offset_x += dx
        self.offset_y += dy


Gesture = Literal["idle", "drag", "pan"]


class LayoutInteraction:
    """
    Pointer handling for a rendered layout.

    One gesture at a time: pressing on a node drags it, pressing on empty
    space pans. Hover only tracks which node is under the pointer and never
    moves anything.
    """

    ZOOM_STEP = 1.1

    def __init__(self, engine: ForceLayoutEngine, viewport: Viewport | None = None, hit_radius: float = 12.0):
        self.engine = engine
        self.viewport = viewport or Viewport()
        self.hit_radius = hit_radius
        self.gesture: Gesture = "idle"
        self.hovered_id: str | None = None
        self.selected_id: str | None = None
        self._last: tuple[float, float] | None = None

    def hit_test(self, sx: float, sy: float) -> str | None:
        wx, wy = self.viewport.to_world(sx, sy)
        return self.engine.nearest(wx, wy, self.hit_radius / self.viewport.scale)

    def on_wheel(self, sx: float, sy: float, delta_y: float) -> None:
        if delta_y == 0:
            return
        factor = 1 / self.ZOOM_STEP if delta_y > 0 else self.ZOOM_STEP
        self.viewport.zoom_at(sx, sy, factor)

    def on_pointer_down(self, sx: float, sy: float) -> None:
        if self.gesture != "idle":
            return
        hit = self.hit_test(sx, sy)
        if hit is not None:
            self.gesture = "drag"
            self.selected_id = hit
            self.engine.start_drag(hit)
        else:
            self.gesture = "pan"
            self._last = (sx, sy)

    def on_pointer_move(self, sx: float, sy: float) -> None:
        if self.gesture == "drag" and self.engine.dragged is not None:
            wx, wy = self.viewport.to_world(sx, sy)
            self.engine.drag_to(self.engine.dragged, wx, wy)
        elif self.gesture == "pan" and self._last is not None:
            lx, ly = self._last
            self.viewport.pan(sx - lx, sy - ly)
            self._last = (sx, sy)
        else:
            self.hovered_id = self.hit_test(sx, sy)

    def on_pointer_up(self) -> None:
        if self.gesture == "drag":
            self.engine.end_drag()
        self.gesture = "idle"
        self._last = None


def seed_positions(nodes: Sequence[GraphNode], width: float, height: float, jitter: float = 0.0, rng=None) -> None:
    """Place nodes evenly on a circle around the canvas center."""
    n = len(nodes)
    if not n:
        return
    cx, cy = width / 2, height / 2
    radius = min(width, height) / 3
    for i, node in enumerate(nodes):
        angle = 2 * math.pi * i / n
        node.x = cx + radius * math.cos(angle)
        node.y = cy + radius * math.sin(angle)
        if jitter and rng is not None:
            node.x += rng.uniform(-jitter, jitter)
            node.y += rng.uniform(-jitter, jitter)
        node.vx = node.vy = 0.0
