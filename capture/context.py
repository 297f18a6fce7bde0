# capture/context.py
from config import CONTEXT_STALE_SEC, CONTEXT_MAX_WORDS, NO_SIGNAL


class ContextReconciler:
    """Rolling "last translated text" passed to the interpreter as previous context."""

    def __init__(self, now: float, stale_sec: float = CONTEXT_STALE_SEC,
                 max_words: int = CONTEXT_MAX_WORDS, placeholder: str = NO_SIGNAL):
        self.stale_sec = stale_sec
        self.max_words = max_words
        self.placeholder = placeholder
        self.text = ""
        self.updated_at = now

    def build(self, now: float) -> str:
        """Context for the next request: empty when stale, tail-trimmed when long."""
        if now - self.updated_at > self.stale_sec:
            return ""

        words = self.text.split()
        if len(words) > self.max_words:
            return self.placeholder + " ".join(words[-self.max_words:])
        return self.text

    def is_signal(self, text: str) -> bool:
        return bool(text) and text != self.placeholder and bool(text.strip())

    def absorb(self, text: str, sent_context: str, now: float) -> bool:
        """
        Keep `text` as the new context if it is at least as long as, and
        different from, the context the request was built with.
        Returns True when the stored context changed.
        """
        if not self.is_signal(text):
            return False

        new = text.strip()
        old = sent_context.replace(self.placeholder, "", 1).strip()
        if len(new) >= len(old) and new != old:
            self.text = text
            self.updated_at = now
            return True
        return False

    def reset(self):
        self.text = ""
