# capture/sampler.py
from typing import List, Sequence, TypeVar

from config import MIN_DISPATCH_FRAMES, BURST_SIZE

F = TypeVar("F")


def sample_burst(frames: Sequence[F], min_frames: int = MIN_DISPATCH_FRAMES) -> List[F]:
    """
    Reduce a recording to at most four representative frames.

    Fewer than `min_frames` is noise and yields an empty list. Up to four
    frames are returned as they are; longer recordings give first, ~33%,
    ~66% and last, in order.
    """
    n = len(frames)
    if n < min_frames:
        return []
    if n <= BURST_SIZE:
        return list(frames)
    return [
        frames[0],
        frames[int(n * 0.33)],
        frames[int(n * 0.66)],
        frames[n - 1],
    ]
