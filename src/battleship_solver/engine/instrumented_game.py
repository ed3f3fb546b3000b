"""Solver game with per-game telemetry hooks."""

from __future__ import annotations

import time

from battleship_solver.engine.game import Game
from battleship_solver.engine.shots import ShotOutcome
from battleship_solver.telemetry import get_logger, get_tracer, record_game_metric


class InstrumentedGame(Game):
    """Wraps Game with a per-game span, completion metrics and logging."""

    _game_id_counter = 0

    def __init__(self, *args, **kwargs) -> None:
        self._logger = get_logger("battleship_solver.engine")
        self._tracer = get_tracer("battleship_solver.engine")
        self._game_span_cm = None
        self._game_span = None
        self._game_start_time: float | None = None
        super().__init__(*args, **kwargs)
        self._start_game_span()

    def step_one_shot(self) -> ShotOutcome:
        with self._tracer.start_as_current_span("battleship_solver.engine.step") as span:
            span.set_attribute("game.id", self.game_id)
            try:
                outcome = super().step_one_shot()
            except Exception as exc:
                record_game_metric("battleship_solver_invalid_steps_total", 1)
                span.record_exception(exc)
                span.set_attribute("error", True)
                self._logger.error("Step failed after %d shots: %s", self.shots_taken, exc)
                raise

            span.set_attribute("shot_outcome", outcome.result.name)
            record_game_metric("battleship_solver_shots_total", 1)
            record_game_metric(
                "battleship_solver_shots_by_result_total", 1, {"result": outcome.result.value}
            )
            self._logger.debug(
                "step coord=(%d,%d) outcome=%s",
                outcome.coord.col,
                outcome.coord.row,
                outcome.result.name,
            )
            if self.is_over:
                self._finish_game()
            return outcome

    def _start_game_span(self) -> None:
        self._close_game_span()
        self._game_start_time = time.perf_counter()
        InstrumentedGame._game_id_counter += 1
        self.game_id = InstrumentedGame._game_id_counter
        self._game_span_cm = self._tracer.start_as_current_span("battleship_solver.engine.game")
        self._game_span = self._game_span_cm.__enter__()
        self._game_span.set_attribute("game.id", self.game_id)
        self._game_span.set_attribute("hits_to_win", self.hits_to_win)

    def _finish_game(self) -> None:
        duration = (time.perf_counter() - self._game_start_time) if self._game_start_time else 0.0

        record_game_metric("battleship_solver_game_completed_total", 1)
        record_game_metric("battleship_solver_game_duration_seconds", duration)

        with self._tracer.start_as_current_span("battleship_solver.engine.game_complete") as span:
            span.set_attribute("game.id", self.game_id)
            span.set_attribute("shots", self.shots_taken)
            span.set_attribute("duration_ms", duration * 1000)

        if self._game_span is not None:
            self._game_span.set_attribute("shots", self.shots_taken)
            self._game_span.set_attribute("duration_ms", duration * 1000)

        self._logger.info(
            "Game finished. shots=%d hits=%d duration_s=%.3f",
            self.shots_taken,
            self.hits_made,
            duration,
        )
        self._close_game_span()

    def _close_game_span(self) -> None:
        if self._game_span_cm is not None:
            self._game_span_cm.__exit__(None, None, None)
            self._game_span_cm = None
            self._game_span = None
