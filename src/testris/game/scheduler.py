"""Host-side timers driving the engine.

The engine never schedules anything itself. A host calls ``GameLoop.advance``
with its own clock (``pygame.time.get_ticks()``, or a simulated clock in tests
and headless runs) and the loop fires gravity ticks and autoplay steps from two
independent repeating tasks.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .core import GameEvent, GameStatus, TetrisGame

logger = logging.getLogger(__name__)


class IntervalTask:
    def __init__(self, interval_ms: int, callback: Callable[[], object], max_catch_up: int = 5) -> None:
        if interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {interval_ms}")
        if max_catch_up < 1:
            raise ValueError(f"max_catch_up must be at least 1, got {max_catch_up}")
        self.interval_ms = int(interval_ms)
        self.callback = callback
        self.max_catch_up = max_catch_up
        self.active = False
        self.next_due_ms = 0

    def start(self, now_ms: int) -> None:
        self.active = True
        self.next_due_ms = now_ms + self.interval_ms

    def restart(self, now_ms: int, interval_ms: Optional[int] = None) -> None:
        if interval_ms is not None:
            if interval_ms <= 0:
                raise ValueError(f"Interval must be positive, got {interval_ms}")
            self.interval_ms = int(interval_ms)
        self.start(now_ms)

    def cancel(self) -> None:
        self.active = False

    def poll(self, now_ms: int) -> int:
        """Fire once per elapsed interval, at most ``max_catch_up`` times.

        After a longer stall the missed intervals are dropped and the next
        firing is scheduled one interval after ``now_ms``. Returns how many
        times the callback ran.
        """
        fired = 0
        # The callback may cancel or restart this task
        while self.active and now_ms >= self.next_due_ms:
            if fired == self.max_catch_up:
                logger.debug("Skipping missed intervals, %d ms behind", now_ms - self.next_due_ms)
                self.next_due_ms = now_ms + self.interval_ms
                break
            self.next_due_ms += self.interval_ms
            self.callback()
            fired += 1
        return fired


class GameLoop:
    """Owns the gravity and autoplay timers of one game."""

    def __init__(self, game: TetrisGame, now_ms: int = 0) -> None:
        self.game = game
        self.now_ms = now_ms
        self.gravity = IntervalTask(game.gravity_interval_ms, game.tick)
        self.autoplay = IntervalTask(game.autoplay_interval_ms, game.autoplay_step)
        game.add_listener(self._on_event)
        if game.status is GameStatus.RUNNING:
            self._start_timers()

    def close(self) -> None:
        self.gravity.cancel()
        self.autoplay.cancel()
        self.game.remove_listener(self._on_event)

    def _start_timers(self) -> None:
        self.gravity.restart(self.now_ms, self.game.gravity_interval_ms)
        self._sync_autoplay()

    def _sync_autoplay(self) -> None:
        running = self.game.status in (GameStatus.RUNNING, GameStatus.PAUSED)
        if self.game.autoplay and running:
            self.autoplay.restart(self.now_ms, self.game.autoplay_interval_ms)
        else:
            self.autoplay.cancel()

    def _on_event(self, event: GameEvent, game: TetrisGame) -> None:
        if event is GameEvent.STARTED:
            self._start_timers()
        elif event is GameEvent.LEVEL_UP:
            logger.debug("Gravity timer restarted at %d ms", game.gravity_interval_ms)
            self.gravity.restart(self.now_ms, game.gravity_interval_ms)
        elif event is GameEvent.PAUSED:
            self.gravity.cancel()
        elif event is GameEvent.RESUMED:
            self.gravity.restart(self.now_ms)
        elif event in (GameEvent.GAME_OVER, GameEvent.STOPPED):
            self.gravity.cancel()
            self.autoplay.cancel()
        elif event is GameEvent.AUTOPLAY_CHANGED:
            self._sync_autoplay()

    def advance(self, now_ms: int) -> None:
        self.now_ms = now_ms
        self.gravity.poll(now_ms)
        self.autoplay.poll(now_ms)
