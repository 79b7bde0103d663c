"""Render settings, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_UNIT = 80
DEFAULT_NODE_OFFSET = 40
DEFAULT_MARGIN = 100
DEFAULT_NODE_RADIUS = 16


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class RenderSettings:
    """Pixel geometry for drawing a laid-out history.

    ``unit`` is the spacing between lanes and between rows. ``node_offset``
    shifts node centres into their grid cell. ``margin`` is added to the
    canvas size on each axis.
    """

    unit: int = DEFAULT_UNIT
    node_offset: int = DEFAULT_NODE_OFFSET
    margin: int = DEFAULT_MARGIN
    node_radius: int = DEFAULT_NODE_RADIUS


def get_settings() -> RenderSettings:
    return RenderSettings(
        unit=_env_int("CAPSULE_HISTORY_UNIT", DEFAULT_UNIT),
        node_offset=_env_int("CAPSULE_HISTORY_NODE_OFFSET", DEFAULT_NODE_OFFSET),
        margin=_env_int("CAPSULE_HISTORY_MARGIN", DEFAULT_MARGIN),
        node_radius=_env_int("CAPSULE_HISTORY_NODE_RADIUS", DEFAULT_NODE_RADIUS),
    )
