# core/chrono.py
from typing import Optional

from PySide6.QtCore import QObject, QElapsedTimer, QTimer, Signal


class RealtimeTimer(QObject):
    """Active-time clock for an attempt, with an optional countdown limit."""

    elapsedChanged = Signal(float)  # seconds (active-time only)
    started = Signal()
    paused = Signal()
    resumed = Signal()
    stopped = Signal()
    timeUp = Signal()

    def __init__(self, tick_ms: int = 100, time_limit: Optional[float] = None, parent=None):
        super().__init__(parent)
        if time_limit is not None and time_limit <= 0:
            raise ValueError(f"time_limit must be positive, got {time_limit}")
        self.time_limit = time_limit
        self._elapsed = 0.0          # accumulated active seconds
        self._running = False
        self._paused = False
        self._t = QElapsedTimer()

        self._tick = QTimer(self)
        self._tick.setInterval(tick_ms)
        self._tick.timeout.connect(self._on_tick)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        self._elapsed = 0.0
        self._paused = False
        self._running = True
        self._t.start()
        self._tick.start()
        self.started.emit()

    def pause(self):
        if self._running and not self._paused:
            self._elapsed += self._t.elapsed() / 1000.0
            self._paused = True
            self.paused.emit()

    def resume(self):
        if self._running and self._paused:
            self._paused = False
            self._t.restart()
            self.resumed.emit()

    def stop(self):
        if self._running:
            if not self._paused:
                self._elapsed += self._t.elapsed() / 1000.0
            self._running = False
            self._paused = False
            self._tick.stop()
            self.stopped.emit()

    def seconds(self) -> float:
        if self._running and not self._paused:
            total = self._elapsed + (self._t.elapsed() / 1000.0)
        else:
            total = self._elapsed
        if self.time_limit is not None:
            return min(total, float(self.time_limit))
        return total

    def remaining(self) -> Optional[float]:
        if self.time_limit is None:
            return None
        return max(0.0, self.time_limit - self.seconds())

    def _on_tick(self):
        self.elapsedChanged.emit(self.seconds())
        if self.time_limit is not None and self.remaining() <= 0:
            self.stop()
            self.timeUp.emit()
