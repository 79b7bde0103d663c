"""Public entry points: raw provider payload in, layout or SVG out."""

from __future__ import annotations

from typing import Any

from capsule_history.config import RenderSettings, get_settings
from capsule_history.layout import compute_layout
from capsule_history.records import parse_version_list
from capsule_history.renderers.svg import SvgRenderer
from capsule_history.types import LayoutResult


def layout_versions(payload: Any) -> LayoutResult:
    """Lay out a version list.

    ``payload`` may be a list of VersionRecord, a list of provider dicts, or a
    ``{"capsule_id": ..., "versions": [...]}`` envelope.
    """
    return compute_layout(parse_version_list(payload))


def render_svg(
    payload: Any,
    current_version_id: str | None = None,
    settings: RenderSettings | None = None,
) -> str:
    """Lay out a version list and render it as an SVG commit graph."""
    result = layout_versions(payload)
    renderer = SvgRenderer(settings=settings or get_settings(), current_version_id=current_version_id)
    return renderer.render(result)
