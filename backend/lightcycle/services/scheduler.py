import time
from typing import Callable, Optional

from lightcycle.services.session import SessionController


def tick_period(ticks_per_second: int) -> float:
    """Tick period in seconds, rounded to whole milliseconds."""
    return round(1000 / ticks_per_second) / 1000.0


class TickScheduler:
    """Drive `SessionController.tick` at a fixed cadence for the process lifetime.

    Deadlines are computed from the first tick's timestamp on a monotonic
    clock, so a slow tick shortens the next sleep instead of shifting every
    later tick.
    """

    def __init__(self, controller: SessionController, period: float, logger,
                 sleep: Callable[[float], None] = time.sleep,
                 clock: Callable[[], float] = time.monotonic,
                 heartbeat_sec: int = 0):
        self.controller = controller
        self.period = period
        self.logger = logger
        self.sleep = sleep
        self.clock = clock
        self.heartbeat_sec = heartbeat_sec
        self.ticks = 0
        self.started = False

    def start(self, socketio) -> None:
        if self.started:
            return
        self.started = True
        self.sleep = socketio.sleep
        self.logger.info(f"[tick-start] period={self.period * 1000:.0f}ms")
        socketio.start_background_task(self.run)

    def run(self, max_ticks: Optional[int] = None) -> None:
        origin = self.clock()
        last_beat = origin
        while max_ticks is None or self.ticks < max_ticks:
            try:
                self.controller.tick()
            except Exception:
                self.logger.exception(f"[tick-error] tick={self.ticks}")
            self.ticks += 1

            now = self.clock()
            deadline = origin + self.ticks * self.period
            if now - deadline > self.period:
                # Too far behind to catch up; skip the missed slots
                missed = int((now - deadline) // self.period)
                self.logger.warning(f"[tick-overrun] tick={self.ticks} missed={missed}")
                origin += missed * self.period
                deadline += missed * self.period
            if self.heartbeat_sec and now - last_beat >= self.heartbeat_sec:
                last_beat = now
                self.logger.info(
                    f"[tick-heartbeat] ticks={self.ticks} phase={self.controller.phase.value} running={self.controller.match.running}"
                )
            delay = deadline - now
            if delay > 0:
                self.sleep(delay)
