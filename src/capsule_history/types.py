"""Layout IR — the placement handed from the engine to renderers."""

from __future__ import annotations

from dataclasses import dataclass, field

from capsule_history.records import VersionRecord


@dataclass(frozen=True)
class PlacementNode:
    """A version placed on the history grid.

    ``lane`` is the branch column, ``row`` the chronological depth. Both are
    grid indices; renderers choose the pixel scale.
    """

    id: str
    lane: int
    row: int


@dataclass
class LayoutResult:
    """Complete placement for one version batch.

    ``versions`` is the normalized (oldest-first) batch, kept so renderers
    can draw in a stable order and reach each version's metadata.
    """

    positions: dict[str, PlacementNode] = field(default_factory=dict)
    lane_count: int = 0
    row_count: int = 0
    versions: list[VersionRecord] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.positions
