# capture/silence.py
from dataclasses import dataclass


@dataclass
class SilenceTimer:
    """Single-shot deadline armed by stillness, cancelled by motion. Checked from the tick loop."""
    threshold: float
    duration_sec: float
    _deadline: float = 0.0   # 0: not armed

    @property
    def pending(self) -> bool:
        return self._deadline > 0.0

    def update(self, velocity: float, now: float) -> bool:
        """Returns True on the tick where the pause has lasted `duration_sec`."""
        if velocity > self.threshold:
            self.cancel()
            return False

        if not self.pending:
            self._deadline = now + self.duration_sec
            return False

        if now >= self._deadline:
            self._deadline = 0.0
            return True
        return False

    def cancel(self):
        self._deadline = 0.0
