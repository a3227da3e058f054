import argparse
import logging
import sys
from typing import List, Optional

from .config import RenderConfig
from .errors import ModelLoadError
from .frame import FrameOrchestrator
from .logging_config import setup_logging
from .model import load_mesh
from .raster import warm_up

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    epilog = """\
examples:
  %(prog)s head.obj                                  Interactive window
  %(prog)s head.obj --output head.png                Render one frame headless
  %(prog)s head.obj --wireframe --color #C8C8DC      Edges only
  %(prog)s head.obj --light 0 0 -1 --cull-unlit      Drop faces turned away from the light
"""
    parser = argparse.ArgumentParser(
        prog="softrender",
        description="Software triangle rasterizer for OBJ meshes",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("model", help="Path to .obj file")
    parser.add_argument("--width", type=int, default=800, help="Buffer width (default: 800)")
    parser.add_argument("--height", type=int, default=800, help="Buffer height (default: 800)")
    parser.add_argument("--depth", type=float, default=255.0,
                        help="Depth range of the viewport (default: 255)")
    parser.add_argument("--eye", type=float, nargs=3, default=(0.0, 0.0, 3.0),
                        metavar=("X", "Y", "Z"), help="Camera position (default: 0 0 3)")
    parser.add_argument("--center", type=float, nargs=3, default=(0.0, 0.0, 0.0),
                        metavar=("X", "Y", "Z"), help="Look-at target (default: 0 0 0)")
    parser.add_argument("--up", type=float, nargs=3, default=(0.0, 1.0, 0.0),
                        metavar=("X", "Y", "Z"), help="Up vector (default: 0 1 0)")
    parser.add_argument("--light", type=float, nargs=3, default=(0.0, 0.0, 1.0),
                        metavar=("X", "Y", "Z"), help="Light direction (default: 0 0 1)")
    parser.add_argument("--color", default="#FFFFFF",
                        help="Model color in hex #RRGGBB (default: #FFFFFF)")
    parser.add_argument("--background", default="#000000",
                        help="Background color in hex #RRGGBB (default: #000000)")
    parser.add_argument("--ambient", type=float, default=0.1,
                        help="Brightness floor for faces turned away from the light (default: 0.1)")
    parser.add_argument("--cull-unlit", action="store_true",
                        help="Skip faces turned away from the light instead of clamping")
    parser.add_argument("--wireframe", action="store_true", help="Draw triangle edges only")
    parser.add_argument("--step", type=float, default=0.1,
                        help="Camera displacement per key press (default: 0.1)")
    parser.add_argument("--output", "-o", help="Write one frame to this PNG and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", help="Also log to this file")
    return parser.parse_args(argv)


def run_headless(orchestrator: FrameOrchestrator, path: str):
    from .present import ImageFileSurface

    orchestrator.surface = ImageFileSurface(path)
    orchestrator.redraw_if_dirty()


def run_interactive(orchestrator: FrameOrchestrator):
    from .present import PygameSurface

    cfg = orchestrator.config
    surface = PygameSurface(cfg.width, cfg.height, step=cfg.step,
                            title="softrender: arrows/WASD move, Q/E zoom, ESC exit")
    orchestrator.surface = surface
    try:
        while orchestrator.running:
            for command in surface.poll_commands():
                orchestrator.handle(command)
            if orchestrator.running:
                eye = orchestrator.camera.eye
                surface.hud = f"eye ({eye.x:.2f}, {eye.y:.2f}, {eye.z:.2f}) | faces {orchestrator.mesh.face_count}"
                orchestrator.redraw_if_dirty()
            surface.tick(60)
    finally:
        surface.close()


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.INFO, args.log_file)

    try:
        config = RenderConfig.from_args(args)
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    try:
        mesh = load_mesh(args.model)
    except ModelLoadError as e:
        logger.error(str(e))
        return 1

    warm_up()
    orchestrator = FrameOrchestrator(mesh, config)
    if config.output:
        run_headless(orchestrator, config.output)
    else:
        run_interactive(orchestrator)
    return 0


if __name__ == "__main__":
    sys.exit(main())
