from troutgen.render.fish import Layout, compose, rasterize_png, render
from troutgen.render.overlay import OverlayOptions

__all__ = ["Layout", "OverlayOptions", "compose", "rasterize_png", "render"]
