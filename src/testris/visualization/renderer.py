from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import pygame

from testris.env.tetris_env import PALETTE
from testris.game import PieceKind


def _color_for_kind(kind: Optional[PieceKind]) -> Tuple[int, int, int]:
    return PALETTE.get(int(kind) if kind else 0, (200, 200, 200))


class Renderer:
    def __init__(self, cell_size: int = 28, margin: int = 20, panel_width: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> Tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 3 + self.panel_width,
            height * self.cell_size + self.margin * 2,
        )

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def draw(self, screen: pygame.Surface, snapshot: Dict[str, Any]) -> None:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        board = snapshot["board"]
        height, width = len(board), len(board[0])
        screen.fill((10, 10, 14))

        for y in range(height):
            for x in range(width):
                pygame.draw.rect(screen, _color_for_kind(board[y][x]), self._cell_rect(x, y))

        color = _color_for_kind(snapshot["current_kind"])
        for x, y in snapshot["ghost_cells"]:
            if y >= 0:
                pygame.draw.rect(screen, color, self._cell_rect(x, y), 2)
        for x, y in snapshot["current_cells"]:
            if y >= 0:
                pygame.draw.rect(screen, color, self._cell_rect(x, y))

        self._draw_panel(screen, snapshot, width)
        pygame.display.flip()

    def _draw_panel(self, screen: pygame.Surface, snapshot: Dict[str, Any], board_width: int) -> None:
        x0 = self.margin * 2 + board_width * self.cell_size
        y0 = self.margin
        preview = self.cell_size // 2
        if snapshot["next_kind"] is not None:
            color = _color_for_kind(snapshot["next_kind"])
            for bx, by in snapshot["next_blocks"]:
                rect = pygame.Rect(
                    int(x0 + (bx + 1) * preview), int(y0 + (by + 1) * preview), preview - 1, preview - 1
                )
                pygame.draw.rect(screen, color, rect)

        lines = [
            f"Score: {snapshot['score']}",
            f"Level: {snapshot['level']}",
            f"Lines: {snapshot['lines']}",
        ]
        lines += [f"{kind.name}: {count}" for kind, count in snapshot["piece_counts"].items()]
        if snapshot["paused"]:
            lines.append("Paused")
        if snapshot["game_over"]:
            lines.append("Game Over - R to restart")
        for i, txt in enumerate(lines):
            img = self._font.render(txt, True, (230, 230, 230))
            screen.blit(img, (x0, y0 + 4 * preview + i * 20))
