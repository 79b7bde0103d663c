"""Lane/row layout for capsule version histories."""

from capsule_history.api import layout_versions, render_svg
from capsule_history.errors import (
    CyclicHistoryError,
    DuplicateVersionError,
    HistoryError,
    InvalidVersionError,
)
from capsule_history.layout import compute_layout
from capsule_history.records import VersionRecord
from capsule_history.types import LayoutResult, PlacementNode

__all__ = [
    "CyclicHistoryError",
    "DuplicateVersionError",
    "HistoryError",
    "InvalidVersionError",
    "LayoutResult",
    "PlacementNode",
    "VersionRecord",
    "compute_layout",
    "layout_versions",
    "render_svg",
]
