# capture/dispatch.py
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional

from config import RATE_LIMIT_COOLDOWN
from service.errors import is_quota_error


def spawn_thread(fn: Callable[[], None]):
    threading.Thread(target=fn, daemon=True).start()


@dataclass
class Ticket:
    epoch: int
    language: str
    context: str


class DispatchController:
    """
    Single-slot gate in front of the interpreter: one request in flight,
    newer triggers are dropped, a rate limit closes the gate for a cooldown.

    Not thread-safe by itself; the capture machine calls every method
    except the spawned job while holding its lock.
    """

    def __init__(self, interpreter, cooldown_sec: float = RATE_LIMIT_COOLDOWN,
                 spawn: Callable[[Callable[[], None]], None] = spawn_thread):
        self.interpreter = interpreter
        self.cooldown_sec = cooldown_sec
        self.spawn = spawn

        self.in_flight = False
        self.rate_limited_until = 0.0
        self._epoch = 0

    def rate_limited(self, now: float) -> bool:
        return now < self.rate_limited_until

    def ready(self, now: float) -> bool:
        return not self.in_flight and not self.rate_limited(now)

    def submit(self, frames: List[bytes], language: str, context: str,
               done: Callable[[Ticket, object, Optional[BaseException]], None]) -> Optional[Ticket]:
        if self.in_flight:
            return None

        self.in_flight = True
        ticket = Ticket(self._epoch, language, context)

        def job():
            try:
                result = self.interpreter.translate(frames, language, context)
            except Exception as e:
                done(ticket, None, e)
            else:
                done(ticket, result, None)

        self.spawn(job)
        return ticket

    def is_current(self, ticket: Ticket) -> bool:
        return ticket.epoch == self._epoch

    def settle(self, ticket: Ticket, error: Optional[BaseException], now: float) -> bool:
        """
        Close out a finished request and reopen the gate. False if the
        ticket was abandoned: its outcome must be dropped and no cooldown
        is applied.
        """
        self.in_flight = False
        if not self.is_current(ticket):
            return False

        if error is not None and is_quota_error(error):
            self.rate_limited_until = now + self.cooldown_sec
        return True

    def abandon(self):
        """
        Forget the outstanding request; its outcome will be ignored. The
        gate stays closed until that job reports back through settle().
        """
        self._epoch += 1
