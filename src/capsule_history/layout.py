"""Layout module — lane/row placement for a version history.

Phases:
  1. Normalization (records.py: chronological sort, ordinals)
  2. Forest building (forest.py: adjacency, roots, cycle check)
  3. Lane/row assignment (this file: depth-first walk over each root)
  4. Summary (this file: lane and row counts for sizing a canvas)

The whole pipeline is a pure function of its input batch. Every call owns a
fresh OccupancyContext, so independent batches can be laid out concurrently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from capsule_history.errors import CyclicHistoryError
from capsule_history.forest import Forest, build_forest
from capsule_history.records import VersionRecord, normalize_versions
from capsule_history.types import LayoutResult, PlacementNode

logger = logging.getLogger(__name__)

# ─── Occupancy Tracking ───────────────────────────────────────────────────────


@dataclass
class OccupancyContext:
    """Rows claimed per lane, plus the lane allocation counter.

    Lanes are numbered strictly in allocation order: ``allocate_lane`` always
    hands out ``lane_count`` and then increments it, so a lane returned by it
    has never been used before in this computation.
    """

    rows_by_lane: dict[int, set[int]] = field(default_factory=dict)
    lane_count: int = 0

    def allocate_lane(self) -> int:
        lane = self.lane_count
        self.lane_count += 1
        return lane

    def is_occupied(self, lane: int, row: int) -> bool:
        return row in self.rows_by_lane.get(lane, ())

    def claim(self, lane: int, row: int) -> int:
        """Claim the first free row at or below ``row`` in ``lane``.

        Returns the row actually claimed.
        """
        taken = self.rows_by_lane.setdefault(lane, set())
        while row in taken:
            row += 1
        taken.add(row)
        return row


# ─── Lane/Row Assignment ──────────────────────────────────────────────────────


@dataclass
class _Visit:
    """A pending node on the work stack.

    ``lane`` is None for a branching sibling: its lane is allocated only when
    the visit is popped, after every earlier sibling's subtree is placed.
    """

    version_id: str
    lane: int | None
    row: int


def assign_positions(forest: Forest, ctx: OccupancyContext | None = None) -> dict[str, PlacementNode]:
    """Assign a (lane, row) to every version reachable from the forest's roots.

    Algorithm (iterative depth-first, same order as the recursive walk):
      - Roots take lanes 0..R-1 in chronological order, each at row 0.
      - A node's first child requests (parent lane, parent row + 1).
      - Every later child requests (brand-new lane, parent row + 1).
      - A requested row already taken in its lane moves down until free.

    Raises:
        CyclicHistoryError: if a version is reached twice, or if some versions
            are unreachable from any root (only possible through a cycle).
    """
    if ctx is None:
        ctx = OccupancyContext()

    positions: dict[str, PlacementNode] = {}

    root_lanes = [ctx.allocate_lane() for _ in forest.roots]
    stack: list[_Visit] = [
        _Visit(version_id=root.id, lane=lane, row=0) for root, lane in zip(forest.roots, root_lanes)
    ]
    # The stack pops from the end, so push in reverse to visit in order.
    stack.reverse()

    while stack:
        visit = stack.pop()
        if visit.version_id in positions:
            raise CyclicHistoryError([visit.version_id])

        lane = visit.lane
        if lane is None:
            lane = ctx.allocate_lane()
            logger.debug("version %s opens lane %d", visit.version_id, lane)

        row = ctx.claim(lane, visit.row)
        positions[visit.version_id] = PlacementNode(id=visit.version_id, lane=lane, row=row)

        children = forest.children_of(visit.version_id)
        pending = [
            _Visit(version_id=child_id, lane=lane if idx == 0 else None, row=row + 1)
            for idx, child_id in enumerate(children)
        ]
        pending.reverse()
        stack.extend(pending)

    if len(positions) != len(forest.versions):
        unplaced = [v.id for v in forest.versions if v.id not in positions]
        raise CyclicHistoryError(unplaced)

    return positions


# ─── Summary ──────────────────────────────────────────────────────────────────


def summarize(positions: dict[str, PlacementNode]) -> tuple[int, int]:
    """Return (lane_count, row_count) for a placement; (0, 0) when empty."""
    if not positions:
        return 0, 0
    max_lane = max(p.lane for p in positions.values())
    max_row = max(p.row for p in positions.values())
    return max_lane + 1, max_row + 1


# ─── Full Layout Pipeline ─────────────────────────────────────────────────────


def compute_layout(records: Iterable[VersionRecord]) -> LayoutResult:
    """Run the full pipeline: normalize, build the forest, place, summarize."""
    versions = normalize_versions(records)
    if not versions:
        return LayoutResult()

    forest = build_forest(versions)
    positions = assign_positions(forest)
    lane_count, row_count = summarize(positions)

    logger.debug(
        "laid out %d versions from %d roots into %d lanes x %d rows",
        len(positions),
        len(forest.roots),
        lane_count,
        row_count,
    )
    return LayoutResult(positions=positions, lane_count=lane_count, row_count=row_count, versions=versions)
