"""
Rolling telemetry buffers for rate limiter diagnostics
"""

from collections import deque
from typing import Deque, List, Optional

from shopify_gateway.shared.constants.shopify import DEFAULT_TELEMETRY_WINDOW_SIZE


class AveragingBuffer:
    """Fixed-capacity FIFO of recent samples; the oldest sample is evicted first"""

    def __init__(self, capacity: int = DEFAULT_TELEMETRY_WINDOW_SIZE):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._samples: Deque[float] = deque(maxlen=capacity)

    def push(self, sample: float) -> None:
        self._samples.append(sample)

    def average(self) -> Optional[float]:
        """Mean of the buffered samples, None while empty"""
        if not self._samples:
            return None
        return sum(self._samples) / len(self._samples)

    def samples(self) -> List[float]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __contains__(self, sample: object) -> bool:
        return sample in self._samples
