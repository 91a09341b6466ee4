"""
Force-directed layout for concept graphs.

Nodes start evenly spaced on a circle (with a little jitter) and are relaxed
for a fixed number of iterations under three forces:
  - repulsion between every pair of nodes, REPULSION / d^2
  - spring attraction along edges, SPRING * d
  - gravity towards the centre, GRAVITY * offset
Velocities are damped each step and positions are kept inside a padded box.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass

from studynode.models.graph import GraphEdge, GraphNode, NodePosition

REPULSION = 3000.0
SPRING = 0.01
GRAVITY = 0.01
DAMPING = 0.9
STEP = 0.1
PADDING = 60.0
JITTER = 50.0


@dataclass
class _Body:
    id: str
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0


def _initial_bodies(
    nodes: list[GraphNode], width: float, height: float, rng: random.Random
) -> list[_Body]:
    cx, cy = width / 2, height / 2
    radius = min(width, height) * 0.35
    bodies = []
    for index, node in enumerate(nodes):
        angle = (index / len(nodes)) * 2 * math.pi - math.pi / 2
        bodies.append(
            _Body(
                id=node.id,
                x=cx + radius * math.cos(angle) + (rng.random() - 0.5) * JITTER,
                y=cy + radius * math.sin(angle) + (rng.random() - 0.5) * JITTER,
            )
        )
    return bodies


def _step(
    bodies: list[_Body],
    neighbours: dict[str, list[int]],
    width: float,
    height: float,
) -> None:
    cx, cy = width / 2, height / 2
    for i, body in enumerate(bodies):
        fx = fy = 0.0

        for j, other in enumerate(bodies):
            if i == j:
                continue
            dx = body.x - other.x
            dy = body.y - other.y
            distance = math.hypot(dx, dy) or 1.0
            force = REPULSION / (distance * distance)
            fx += dx / distance * force
            fy += dy / distance * force

        for j in neighbours.get(body.id, ()):
            other = bodies[j]
            dx = other.x - body.x
            dy = other.y - body.y
            distance = math.hypot(dx, dy) or 1.0
            force = distance * SPRING
            fx += dx / distance * force
            fy += dy / distance * force

        fx += (cx - body.x) * GRAVITY
        fy += (cy - body.y) * GRAVITY

        body.vx = body.vx * DAMPING + fx * STEP
        body.vy = body.vy * DAMPING + fy * STEP
        body.x = max(PADDING, min(width - PADDING, body.x + body.vx))
        body.y = max(PADDING, min(height - PADDING, body.y + body.vy))


def layout_graph(
    nodes: list[GraphNode],
    edges: list[GraphEdge],
    width: float = 800.0,
    height: float = 600.0,
    iterations: int = 300,
    seed: int | None = None,
) -> list[NodePosition]:
    """Return a position for every node, in node order. Same seed, same layout."""
    if not nodes:
        return []

    rng = random.Random(seed)
    bodies = _initial_bodies(nodes, width, height, rng)
    index = {body.id: i for i, body in enumerate(bodies)}

    neighbours: dict[str, list[int]] = {}
    for edge in edges:
        if edge.source not in index or edge.target not in index:
            continue
        neighbours.setdefault(edge.source, []).append(index[edge.target])
        neighbours.setdefault(edge.target, []).append(index[edge.source])

    for _ in range(iterations):
        _step(bodies, neighbours, width, height)

    return [NodePosition(id=b.id, x=round(b.x, 2), y=round(b.y, 2)) for b in bodies]
