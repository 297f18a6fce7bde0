# service/errors.py


class InterpretationError(Exception):
    """The interpreter could not produce a translation for this burst."""


class RateLimitError(InterpretationError):
    """Quota exhausted (HTTP 429 / RESOURCE_EXHAUSTED). Dispatch backs off."""


class EmptyResponseError(InterpretationError):
    pass


QUOTA_MARKERS = ("429", "RESOURCE_EXHAUSTED", "quota")


def is_quota_error(error: BaseException) -> bool:
    if isinstance(error, RateLimitError):
        return True
    if getattr(error, "code", None) == 429:
        return True
    msg = str(error)
    return any(m in msg for m in QUOTA_MARKERS)
