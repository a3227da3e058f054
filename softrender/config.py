from dataclasses import dataclass, field
from typing import Optional, Tuple

from .camera import off_eye_plane
from .errors import DegenerateGeometryError
from .vecmath import Vec3


def parse_hex_color(hex_str: str) -> Tuple[int, int, int]:
    """
    Parse a hex color string to an (r, g, b) tuple.
    Accepts: '#RRGGBB' or 'RRGGBB' (case-insensitive).
    """
    val = str(hex_str).strip().lstrip("#")
    if len(val) != 6:
        raise ValueError(f"expected #RRGGBB, got {hex_str!r}")
    try:
        return int(val[0:2], 16), int(val[2:4], 16), int(val[4:6], 16)
    except ValueError:
        raise ValueError(f"expected #RRGGBB, got {hex_str!r}") from None


@dataclass
class RenderConfig:
    """Configuration for the rendering pipeline."""
    width: int = 800
    height: int = 800
    depth: float = 255.0

    eye: Vec3 = Vec3(0.0, 0.0, 3.0)
    center: Vec3 = Vec3(0.0, 0.0, 0.0)
    up: Vec3 = Vec3(0.0, 1.0, 0.0)
    light: Vec3 = Vec3(0.0, 0.0, 1.0)

    color: Tuple[int, int, int] = (255, 255, 255)
    background: Tuple[int, int, int] = (0, 0, 0)

    # Brightness floor; with cull_unlit triangles facing away are dropped instead.
    ambient: float = 0.1
    cull_unlit: bool = False
    wireframe: bool = False

    # Camera displacement per key press
    step: float = 0.1
    output: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"resolution must be positive, got {self.width}x{self.height}")
        if self.depth <= 0:
            raise ValueError(f"depth range must be positive, got {self.depth}")
        if not 0.0 <= self.ambient <= 1.0:
            raise ValueError(f"ambient must be within [0, 1], got {self.ambient}")
        if not off_eye_plane(self.eye.z):
            raise ValueError("eye must not lie on the z = 0 plane")
        try:
            self.light = self.light.normalize()
        except DegenerateGeometryError:
            raise ValueError("light direction must be non-zero") from None

    @property
    def background_rgba(self) -> Tuple[int, int, int, int]:
        return (*self.background, 255)

    @classmethod
    def from_args(cls, args) -> "RenderConfig":
        """Build a config from the argparse namespace produced by cli.parse_args."""
        return cls(
            width=args.width,
            height=args.height,
            depth=args.depth,
            eye=Vec3(*args.eye),
            center=Vec3(*args.center),
            up=Vec3(*args.up),
            light=Vec3(*args.light),
            color=parse_hex_color(args.color),
            background=parse_hex_color(args.background),
            ambient=args.ambient,
            cull_unlit=args.cull_unlit,
            wireframe=args.wireframe,
            step=args.step,
            output=args.output,
        )
