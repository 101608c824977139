"""Polyline geometry kernel: clipping, union, resampling and textures."""

from troutgen.kernel.clip import ClipResult, binclip, clip, clip_multi, clip_multi_by
from troutgen.kernel.sampling import poisson_disk, resample, simplify
from troutgen.kernel.union import bridge, union

__all__ = [
    "ClipResult",
    "binclip",
    "bridge",
    "clip",
    "clip_multi",
    "clip_multi_by",
    "poisson_disk",
    "resample",
    "simplify",
    "union",
]
