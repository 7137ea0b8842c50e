from __future__ import annotations
from typing import List, Optional, Tuple, Union
from diagnostics import Diagnostics, PAINT_FALLBACK
from geometry import clamp
from interpreter import CanonicalOp
from paint import Fill, Stroke, PaintServer, FALLBACK_COLOR
from raster import Raster
from rasterizer import Rasterizer

class Compositor:
    """Blends fill and stroke coverage onto a shared raster, fill first."""

    def __init__(self, rasterizer: Rasterizer, diagnostics: Optional[Diagnostics] = None):
        self.rasterizer = rasterizer
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def composite(self, raster: Raster, ops: List[CanonicalOp],
                  fill: Optional[Fill] = None, stroke: Optional[Stroke] = None):
        if not ops:
            return

        if fill is not None:
            color = self._source_color(fill)
            if color[3] > 0:
                raster.blend(color, self.rasterizer.fill(ops, fill.rule))

        if stroke is not None and stroke.width > 0:
            color = self._source_color(stroke)
            if color[3] > 0:
                raster.blend(color, self.rasterizer.stroke(ops, stroke.width, stroke.join))

    def _source_color(self, paint: Union[Fill, Stroke]) -> Tuple[int, int, int, int]:
        color = paint.color
        if isinstance(color, PaintServer):
            self.diagnostics.warn(PAINT_FALLBACK,
                                  f"Paint server {color.reference!r} is not supported, using black",
                                  reference=color.reference)
            color = FALLBACK_COLOR

        r, g, b = color
        a = int(round(clamp(paint.alpha, 0.0, 1.0) * 255))
        return (r, g, b, a)
