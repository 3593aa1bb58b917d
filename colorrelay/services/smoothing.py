"""Sliding-window vote that turns a noisy stream of observations into a debounced color."""
import logging
from collections import Counter, deque
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_BUFFER_SIZE = 20
DEFAULT_CONFIDENCE_THRESHOLD = 0.6


@dataclass(frozen=True)
class VoteResult:
    """Outcome of one tally over the window.

    ``candidate`` is the most frequent value (None only for an empty window);
    ``winner`` is the candidate when its share reached the threshold, else None.
    """

    candidate: str | None
    count: int
    window_size: int
    winner: str | None

    @property
    def confidence(self) -> float:
        if not self.window_size:
            return 0.0
        return self.count / self.window_size

    @property
    def has_winner(self) -> bool:
        return self.winner is not None


class SmoothingEngine:
    """Fixed-capacity FIFO window of observations with a confidence-gated majority vote.

    capacity=1 and threshold=0 reproduce an unsmoothed relay: every
    observation wins immediately.
    """

    def __init__(self, capacity: int = DEFAULT_BUFFER_SIZE, threshold: float = DEFAULT_CONFIDENCE_THRESHOLD):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        if not 0.0 <= threshold <= 1.0:
            raise ValueError(f"threshold must be between 0 and 1, got {threshold}")
        self.capacity = capacity
        self.threshold = threshold
        self._window: deque[str] = deque(maxlen=capacity)

    @property
    def window(self) -> list[str]:
        """Current observations, oldest first."""
        return list(self._window)

    def __len__(self) -> int:
        return len(self._window)

    def observe(self, value: str) -> VoteResult:
        """Append one observation (evicting the oldest when full) and re-run the vote."""
        # deque(maxlen=...) drops from the left on append
        self._window.append(value)
        return self.vote()

    def vote(self) -> VoteResult:
        if not self._window:
            return VoteResult(candidate=None, count=0, window_size=0, winner=None)

        # Counter keeps first-seen order, and max() returns the first maximal
        # item, so ties go to the value that appears earliest in the window.
        tally = Counter(self._window)
        candidate, count = max(tally.items(), key=lambda item: item[1])
        size = len(self._window)
        winner = candidate if count / size >= self.threshold else None
        return VoteResult(candidate=candidate, count=count, window_size=size, winner=winner)
