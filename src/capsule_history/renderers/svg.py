"""SVG renderer — renders a history LayoutResult as a commit graph."""

from __future__ import annotations

from capsule_history.config import RenderSettings
from capsule_history.records import VersionRecord
from capsule_history.types import LayoutResult, PlacementNode

# ─── Constants ──────────────────────────────────────────────────────────────

FONT_SIZE = 10
FONT_FAMILY = "sans-serif"
EMPTY_MESSAGE = "No version history available"

_EDGE_STROKE = 'stroke="#cbd5e1" stroke-width="2.5"'
_NODE_STROKE = 'fill="white" stroke="#94a3b8" stroke-width="2"'
_ACTIVE_STROKE = 'fill="#2563eb" stroke="#2563eb" stroke-width="2"'


def _escape(s: str) -> str:
    return s.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;").replace('"', "&quot;")


def _font(size: int = FONT_SIZE) -> str:
    return f'font-family="{FONT_FAMILY}" font-size="{size}"'


# ─── Coordinate Helpers ─────────────────────────────────────────────────────


def node_center(node: PlacementNode, settings: RenderSettings) -> tuple[int, int]:
    """Pixel centre of a placed node: grid position scaled by ``unit``."""
    return (
        node.lane * settings.unit + settings.node_offset,
        node.row * settings.unit + settings.node_offset,
    )


def canvas_size(result: LayoutResult, settings: RenderSettings) -> tuple[int, int]:
    return (
        result.lane_count * settings.unit + settings.margin,
        result.row_count * settings.unit + settings.margin,
    )


# ─── Edge Rendering ─────────────────────────────────────────────────────────


def render_edge(parent: PlacementNode, child: PlacementNode, settings: RenderSettings) -> str:
    """Draw the connection from ``parent`` down to ``child``.

    Same lane: a straight segment. Different lanes: one quadratic curve with
    its control point at (child x, parent y), so the branch leaves the
    parent's row sideways and drops into the child's lane.
    """
    px, py = node_center(parent, settings)
    cx, cy = node_center(child, settings)
    if parent.lane == child.lane:
        return f'<line x1="{px}" y1="{py}" x2="{cx}" y2="{cy}" {_EDGE_STROKE}/>'
    return f'<path d="M {px} {py} Q {cx} {py} {cx} {cy}" fill="none" {_EDGE_STROKE}/>'


# ─── Node Rendering ─────────────────────────────────────────────────────────


def _tooltip(version: VersionRecord) -> str:
    lines = [f"Version {version.ordinal}"]
    summary = version.metadata.get("change_summary") or version.metadata.get("summary")
    if summary:
        lines.append(str(summary))
    author = version.metadata.get("created_by")
    if author:
        lines.append(f"Created by {author}")
    lines.append(str(version.created_at))
    return _escape("\n".join(lines))


def render_node(version: VersionRecord, node: PlacementNode, settings: RenderSettings, active: bool = False) -> str:
    x, y = node_center(node, settings)
    css = "version active" if active else "version"
    stroke = _ACTIVE_STROKE if active else _NODE_STROKE
    text_fill = "white" if active else "#334155"
    return "\n".join(
        [
            f'<g class="{css}" data-version-id="{_escape(version.id)}">',
            f"  <title>{_tooltip(version)}</title>",
            f'  <circle cx="{x}" cy="{y}" r="{settings.node_radius}" {stroke}/>',
            f'  <text x="{x}" y="{y}" dominant-baseline="central" text-anchor="middle" '
            f'{_font()} font-weight="bold" fill="{text_fill}">v{version.ordinal}</text>',
            "</g>",
        ]
    )


def _render_empty() -> str:
    width, height = 300, 60
    return "\n".join(
        [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
            f'viewBox="0 0 {width} {height}">',
            f'<text x="{width // 2}" y="{height // 2}" dominant-baseline="central" text-anchor="middle" '
            f'{_font(12)} font-style="italic" fill="#64748b">{EMPTY_MESSAGE}</text>',
            "</svg>",
        ]
    )


# ─── Public Renderer ────────────────────────────────────────────────────────


class SvgRenderer:
    """SVG renderer — consumes a LayoutResult, produces an SVG string.

    ``current_version_id`` marks the live version, which is drawn filled.
    """

    def __init__(self, settings: RenderSettings | None = None, current_version_id: str | None = None) -> None:
        self.settings = settings or RenderSettings()
        self.current_version_id = current_version_id

    def render(self, result: LayoutResult) -> str:
        if result.is_empty:
            return _render_empty()

        settings = self.settings
        positions = result.positions
        svg_w, svg_h = canvas_size(result, settings)

        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{svg_w}" height="{svg_h}" viewBox="0 0 {svg_w} {svg_h}">',
            f'<rect width="{svg_w}" height="{svg_h}" fill="white"/>',
        ]

        # Edges (behind nodes), in chronological order of the child.
        for version in result.versions:
            if version.parent_id is None or version.parent_id not in positions:
                continue
            parts.append(render_edge(positions[version.parent_id], positions[version.id], settings))

        # Nodes (on top)
        for version in result.versions:
            active = version.id == self.current_version_id
            parts.append(render_node(version, positions[version.id], settings, active=active))

        parts.append("</svg>")
        return "\n".join(parts)
