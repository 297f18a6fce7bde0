import pytest

from capture.session import CaptureMachine
from gesture.types import SensorSample, TranslationResult


class FakeClock:
    def __init__(self, t=100.0):
        self.t = t

    def __call__(self):
        return self.t


class FakeSensor:
    def __init__(self):
        self.hand_present = False
        self.velocity = 0.0

    def poll(self):
        return SensorSample(self.hand_present, self.velocity, 0.0)


class FakeCamera:
    def __init__(self):
        self.count = 0
        self.ready = True

    def capture_frame(self):
        if not self.ready:
            return None
        self.count += 1
        return b"frame-%d" % self.count


class FakeInterpreter:
    def __init__(self):
        self.calls = []
        self.replies = []   # TranslationResult or exception, consumed in order

    def translate(self, frames, target_language, context=""):
        self.calls.append((list(frames), target_language, context))
        reply = self.replies.pop(0) if self.replies else TranslationResult("...", "Low", target_language)
        if isinstance(reply, BaseException):
            raise reply
        return reply


class ManualSpawn:
    """Holds dispatch jobs until the test decides the request has finished."""

    def __init__(self):
        self.jobs = []

    def __call__(self, fn):
        self.jobs.append(fn)

    def finish(self):
        self.jobs.pop(0)()


class Rig:
    def __init__(self):
        self.clock = FakeClock()
        self.sensor = FakeSensor()
        self.camera = FakeCamera()
        self.interpreter = FakeInterpreter()
        self.spawn = ManualSpawn()
        self.machine = CaptureMachine(
            self.sensor, self.camera, self.interpreter,
            language="English", clock=self.clock, spawn=self.spawn,
        )

    def step(self, now, hand=True, velocity=0.0):
        self.clock.t = now
        self.sensor.hand_present = hand
        self.sensor.velocity = velocity
        self.machine.tick(now)

    def run(self, start, end, hand=True, velocity=0.0, dt=0.03):
        i = 0
        while start + i * dt < end:
            self.step(start + i * dt, hand, velocity)
            i += 1

    def finish(self, at):
        self.clock.t = at
        self.spawn.finish()

    def gesture(self, start, moving_until, still_velocity=0.0):
        """Decisive motion from `start`, then stillness until the silence trigger fires."""
        self.run(start, moving_until, velocity=1.0)
        self.run(moving_until, moving_until + 1.6, velocity=still_velocity)


@pytest.fixture
def rig():
    return Rig()
