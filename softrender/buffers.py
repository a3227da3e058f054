from typing import Tuple

import numpy as np

Color = Tuple[int, int, int, int]


class PixelBuffer:
    """
    RGBA8 color grid owned by the caller and written by the rasterizer.

    data:
      - shape (height, width, 4), dtype=uint8
      - IMPORTANT: index order is [y, x, channel], row 0 is the BOTTOM row
        (the viewport maps y=-1 to row 0); use to_image() for a top-down array.
    """
    def __init__(self, width: int, height: int, background: Color = (0, 0, 0, 255)):
        self.width = width
        self.height = height
        self.data = np.empty((height, width, 4), dtype=np.uint8)
        self.clear(background)

    def clear(self, color: Color):
        self.data[:, :, :] = color

    def pixel(self, x: int, y: int) -> Color:
        r, g, b, a = self.data[y, x]
        return int(r), int(g), int(b), int(a)

    def to_image(self) -> np.ndarray:
        """Top-down (height, width, 4) copy, ready for Pillow or pygame."""
        return np.ascontiguousarray(self.data[::-1])


class DepthBuffer:
    """
    Per-pixel depth of the nearest fragment drawn so far.

    -inf means "nothing drawn yet": any fragment beats it. Greater depth wins.
    """
    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.data = np.empty((height, width), dtype=np.float64)
        self.reset()

    def reset(self):
        self.data.fill(-np.inf)
