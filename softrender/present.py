import logging
from typing import List

import numpy as np
import pygame
from PIL import Image

from .buffers import PixelBuffer
from .frame import MoveEye, Quit

logger = logging.getLogger(__name__)


class ImageFileSurface:
    """Headless surface: every presented frame overwrites one PNG file."""

    def __init__(self, path: str):
        self.path = path
        self.frames = 0

    def present(self, pixels: PixelBuffer) -> None:
        Image.fromarray(pixels.to_image()).save(self.path)
        self.frames += 1
        logger.info(f"Wrote {pixels.width}x{pixels.height} frame to {self.path}")


class PygameSurface:
    """
    Window that shows the finished pixel buffer and turns key presses into
    camera commands.

    Keys:
      arrows / WASD  - move the eye in X/Y
      Q / E          - move the eye along Z
      ESC / close    - quit
    """

    def __init__(self, width: int, height: int, step: float = 0.1,
                 title: str = "softrender"):
        pygame.init()
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("consolas", 16)
        self.step = step
        self.hud = ""

    def present(self, pixels: PixelBuffer) -> None:
        # pygame.surfarray wants [x, y, rgb]
        rgb = np.transpose(pixels.to_image()[:, :, :3], (1, 0, 2))
        pygame.surfarray.blit_array(self.screen, rgb)
        if self.hud:
            self.screen.blit(self.font.render(self.hud, True, (235, 235, 235)), (10, 10))
        pygame.display.flip()

    def poll_commands(self) -> List[object]:
        s = self.step
        keymap = {
            pygame.K_LEFT: MoveEye(-s, 0.0), pygame.K_a: MoveEye(-s, 0.0),
            pygame.K_RIGHT: MoveEye(s, 0.0), pygame.K_d: MoveEye(s, 0.0),
            pygame.K_UP: MoveEye(0.0, s), pygame.K_w: MoveEye(0.0, s),
            pygame.K_DOWN: MoveEye(0.0, -s), pygame.K_s: MoveEye(0.0, -s),
            pygame.K_q: MoveEye(0.0, 0.0, -s),
            pygame.K_e: MoveEye(0.0, 0.0, s),
        }

        commands = []
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                commands.append(Quit())
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    commands.append(Quit())
                elif event.key in keymap:
                    commands.append(keymap[event.key])
        return commands

    def tick(self, fps: int = 60) -> float:
        return self.clock.tick(fps) / 1000.0

    def close(self):
        pygame.quit()
