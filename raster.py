from __future__ import annotations
import numpy as np
from typing import Optional, Tuple
from PIL import Image

class Raster:
    """RGBA pixel buffer, row-major, straight (non-premultiplied) alpha."""

    def __init__(self, width: int, height: int,
                 background_color: Optional[Tuple[int, int, int]] = None):
        self.width = width
        self.height = height
        self.buffer = np.zeros((height, width, 4), dtype=np.uint8)
        if background_color is not None:
            self.buffer[:, :, 0] = background_color[0]
            self.buffer[:, :, 1] = background_color[1]
            self.buffer[:, :, 2] = background_color[2]
            self.buffer[:, :, 3] = 255

    def pixel(self, x: int, y: int) -> Tuple[int, int, int, int]:
        return tuple(int(v) for v in self.buffer[y, x, :])

    def blend(self, color: Tuple[int, int, int, int], coverage: np.ndarray):
        """Source-over `color` onto the buffer wherever coverage is non-zero."""
        r, g, b, a = color
        src_alpha = (a / 255.0) * np.clip(coverage, 0.0, 1.0)
        mask = src_alpha > 0
        if not mask.any():
            return

        src_alpha = src_alpha[mask][:, np.newaxis]
        dst = self.buffer[mask].astype(np.float64)
        dst_rgb = dst[:, :3]
        dst_alpha = dst[:, 3:4] / 255.0
        src_rgb = np.array([r, g, b], dtype=np.float64)

        out_alpha = src_alpha + dst_alpha * (1.0 - src_alpha)
        weighted = src_rgb * src_alpha + dst_rgb * dst_alpha * (1.0 - src_alpha)
        out_rgb = np.divide(weighted, out_alpha, out=np.zeros_like(weighted), where=out_alpha > 0)

        out = np.concatenate([out_rgb, out_alpha * 255.0], axis=1)
        self.buffer[mask] = np.clip(np.rint(out), 0, 255).astype(np.uint8)

    def flatten(self, background_color: Tuple[int, int, int] = (255, 255, 255)) -> np.ndarray:
        alpha = self.buffer[:, :, 3:4].astype(np.float64) / 255.0
        rgb = self.buffer[:, :, 0:3].astype(np.float64)
        background = np.array(background_color, dtype=np.float64)
        out = rgb * alpha + background * (1.0 - alpha)
        return np.clip(np.rint(out), 0, 255).astype(np.uint8)

    def get_rgba_buffer(self) -> np.ndarray:
        return self.buffer.copy()

    def to_image(self, background_color: Optional[Tuple[int, int, int]] = None) -> Image.Image:
        if background_color is None:
            return Image.fromarray(self.get_rgba_buffer())
        return Image.fromarray(self.flatten(background_color))
