from __future__ import annotations

import unittest

import numpy as np

from compositor import Compositor
from diagnostics import Diagnostics, PAINT_FALLBACK
from interpreter import PathInterpreter
from paint import Fill, Stroke, LineJoin, PaintServer
from path_data import parse_path_data
from raster import Raster
from rasterizer import Rasterizer

SQUARE = PathInterpreter().interpret(parse_path_data("M5,5 H15 V15 H5 Z"))


class RasterBlendTests(unittest.TestCase):
    def test_new_raster_is_transparent(self) -> None:
        raster = Raster(4, 3)
        self.assertEqual(raster.buffer.shape, (3, 4, 4))
        self.assertEqual(raster.pixel(0, 0), (0, 0, 0, 0))

    def test_opaque_source_replaces_destination(self) -> None:
        raster = Raster(2, 2, background_color=(0, 0, 255))
        raster.blend((255, 0, 0, 255), np.ones((2, 2)))
        self.assertEqual(raster.pixel(1, 1), (255, 0, 0, 255))

    def test_source_over_half_alpha(self) -> None:
        raster = Raster(1, 1, background_color=(0, 0, 255))
        raster.blend((255, 0, 0, 128), np.ones((1, 1)))
        self.assertEqual(raster.pixel(0, 0), (128, 0, 127, 255))

    def test_blend_onto_transparent_keeps_source_color(self) -> None:
        raster = Raster(1, 1)
        raster.blend((10, 20, 30, 128), np.ones((1, 1)))
        self.assertEqual(raster.pixel(0, 0), (10, 20, 30, 128))

    def test_zero_coverage_leaves_pixel_untouched(self) -> None:
        raster = Raster(2, 1, background_color=(1, 2, 3))
        raster.blend((255, 255, 255, 255), np.array([[0.0, 1.0]]))
        self.assertEqual(raster.pixel(0, 0), (1, 2, 3, 255))
        self.assertEqual(raster.pixel(1, 0), (255, 255, 255, 255))

    def test_flatten_onto_background(self) -> None:
        raster = Raster(2, 1)
        raster.blend((255, 0, 0, 255), np.array([[1.0, 0.0]]))
        rgb = raster.flatten((255, 255, 255))
        self.assertEqual(tuple(rgb[0, 0]), (255, 0, 0))
        self.assertEqual(tuple(rgb[0, 1]), (255, 255, 255))


class CompositorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.raster = Raster(20, 20)
        self.diagnostics = Diagnostics()
        self.compositor = Compositor(Rasterizer(20, 20), self.diagnostics)

    def test_fill_paints_inside_only(self) -> None:
        self.compositor.composite(self.raster, SQUARE, fill=Fill((255, 0, 0)))
        self.assertEqual(self.raster.pixel(10, 10), (255, 0, 0, 255))
        self.assertEqual(self.raster.pixel(2, 2), (0, 0, 0, 0))

    def test_stroke_sits_on_top_of_fill(self) -> None:
        self.compositor.composite(self.raster, SQUARE, fill=Fill((255, 0, 0)),
                                  stroke=Stroke((0, 0, 255), width=4, join=LineJoin.miter()))
        self.assertEqual(self.raster.pixel(5, 10), (0, 0, 255, 255))
        self.assertEqual(self.raster.pixel(3, 10), (0, 0, 255, 255))
        self.assertEqual(self.raster.pixel(10, 10), (255, 0, 0, 255))

    def test_fill_alpha_is_normalized(self) -> None:
        self.compositor.composite(self.raster, SQUARE, fill=Fill((0, 255, 0), alpha=0.5))
        self.assertEqual(self.raster.pixel(10, 10), (0, 255, 0, 128))

    def test_paint_server_falls_back_to_black(self) -> None:
        self.compositor.composite(self.raster, SQUARE, fill=Fill(PaintServer("grad"), alpha=0.5))
        self.assertEqual(self.raster.pixel(10, 10), (0, 0, 0, 128))
        self.assertEqual(self.diagnostics.codes(), [PAINT_FALLBACK])

    def test_transparent_paint_and_empty_ops_draw_nothing(self) -> None:
        self.compositor.composite(self.raster, SQUARE, fill=Fill((255, 0, 0), alpha=0.0))
        self.compositor.composite(self.raster, [], fill=Fill((255, 0, 0)))
        self.compositor.composite(self.raster, SQUARE, stroke=Stroke((255, 0, 0), width=0))
        self.assertFalse(self.raster.buffer.any())


if __name__ == "__main__":
    unittest.main()
