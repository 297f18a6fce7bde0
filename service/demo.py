# service/demo.py
import time
from typing import Sequence

from config import NO_SIGNAL
from gesture.types import TranslationResult

DEMO_SCRIPTS = {
    "Spanish": ["Hola", "Hola. ¿Cómo estás?", "Quiero café", "Te amo"],
    "English": ["Hello", "Hello. How are you?", "I want coffee", "I love you"],
    "Portuguese": ["Olá", "Olá. Como vai?", "Quero café", "Eu te amo"],
}

# (until second, script line); before the first mark the demo answers NO_SIGNAL
DEMO_TIMELINE = [(3.0, None), (7.0, 0), (14.0, 1), (21.0, 2), (28.0, 3)]


class DemoInterpreter:
    """Scripted stand-in for the real service: walks a fixed conversation on a 28s loop."""

    def __init__(self, latency_sec: float = 0.8, clock=time.time, sleep=time.sleep):
        self.latency_sec = latency_sec
        self.clock = clock
        self.sleep = sleep
        self._started = 0.0

    def line_for(self, target_language: str, elapsed: float) -> str:
        script = DEMO_SCRIPTS.get(target_language, DEMO_SCRIPTS["Spanish"])
        for until, idx in DEMO_TIMELINE:
            if elapsed < until:
                return NO_SIGNAL if idx is None else script[idx]
        return NO_SIGNAL

    def translate(self, frames: Sequence[bytes], target_language: str, context: str = "") -> TranslationResult:
        now = self.clock()
        if self._started == 0.0:
            self._started = now
        elapsed = now - self._started
        if elapsed >= DEMO_TIMELINE[-1][0]:
            self._started = now   # loop the script
            elapsed = 0.0

        text = self.line_for(target_language, elapsed)
        self.sleep(self.latency_sec)
        return TranslationResult(
            text=text,
            confidence="Low" if text == NO_SIGNAL else "High",
            target_language=target_language,
        )
