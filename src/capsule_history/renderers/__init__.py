from capsule_history.renderers.base import Renderer
from capsule_history.renderers.svg import SvgRenderer

__all__ = ["Renderer", "SvgRenderer"]
