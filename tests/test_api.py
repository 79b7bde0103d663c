"""Tests for api.py and config.py — payload entry points and render settings."""

from __future__ import annotations

import pytest

from capsule_history import layout_versions, render_svg
from capsule_history.config import DEFAULT_UNIT, RenderSettings, get_settings
from capsule_history.errors import InvalidVersionError

ENVELOPE = {
    "capsule_id": "cap-42",
    "versions": [
        {"version_id": "v3", "parent_version_id": "v1", "created_at": "2024-03-01T09:20:00Z"},
        {"version_id": "v1", "created_at": "2024-03-01T09:00:00Z", "created_by": "lee"},
        {"version_id": "v2", "parent_version_id": "v1", "created_at": "2024-03-01T09:10:00Z"},
    ],
}


class TestLayoutVersions:
    def test_envelope(self):
        result = layout_versions(ENVELOPE)
        placed = {vid: (p.lane, p.row) for vid, p in result.positions.items()}
        assert placed == {"v1": (0, 0), "v2": (0, 1), "v3": (1, 1)}
        assert result.versions[0].metadata["created_by"] == "lee"

    def test_empty_list(self):
        assert layout_versions([]).is_empty

    def test_bad_record(self):
        with pytest.raises(InvalidVersionError):
            layout_versions([{"created_at": "T0"}])


class TestRenderSvg:
    def test_renders_with_current_version(self):
        svg = render_svg(ENVELOPE, current_version_id="v3")
        assert '<g class="version active" data-version-id="v3">' in svg

    def test_explicit_settings(self):
        svg = render_svg(ENVELOPE, settings=RenderSettings(unit=10, node_offset=5, margin=0))
        assert 'width="20" height="20"' in svg

    def test_settings_from_environment(self, monkeypatch):
        monkeypatch.setenv("CAPSULE_HISTORY_UNIT", "50")
        monkeypatch.setenv("CAPSULE_HISTORY_MARGIN", "0")
        svg = render_svg(ENVELOPE)
        assert 'width="100" height="100"' in svg


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in (
            "CAPSULE_HISTORY_UNIT",
            "CAPSULE_HISTORY_NODE_OFFSET",
            "CAPSULE_HISTORY_MARGIN",
            "CAPSULE_HISTORY_NODE_RADIUS",
        ):
            monkeypatch.delenv(name, raising=False)
        assert get_settings() == RenderSettings()
        assert get_settings().unit == DEFAULT_UNIT == 80

    def test_blank_value_uses_default(self, monkeypatch):
        monkeypatch.setenv("CAPSULE_HISTORY_NODE_RADIUS", "  ")
        assert get_settings().node_radius == 16

    def test_override(self, monkeypatch):
        monkeypatch.setenv("CAPSULE_HISTORY_NODE_OFFSET", "12")
        assert get_settings().node_offset == 12

    def test_invalid_integer(self, monkeypatch):
        monkeypatch.setenv("CAPSULE_HISTORY_UNIT", "wide")
        with pytest.raises(ValueError, match="CAPSULE_HISTORY_UNIT"):
            get_settings()
