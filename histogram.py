import math
from typing import Dict

from config import HISTOGRAM_BIN_WIDTH, HISTOGRAM_BINS


class AngleHistogram:
    """Fixed 10-degree bins over 0-180 degrees, keyed by bin start angle."""

    def __init__(self):
        self.bins: Dict[int, int] = {}
        self.reset()

    @staticmethod
    def bin_key(angle_degrees: float) -> int:
        return int(math.floor(abs(angle_degrees) / HISTOGRAM_BIN_WIDTH)) * HISTOGRAM_BIN_WIDTH

    def reset(self):
        self.bins = {i * HISTOGRAM_BIN_WIDTH: 0 for i in range(HISTOGRAM_BINS)}

    def record(self, angle_degrees: float) -> bool:
        # Keys outside the registered bins are dropped
        key = self.bin_key(angle_degrees)
        if key not in self.bins:
            return False
        self.bins[key] += 1
        return True

    def snapshot(self) -> Dict[int, int]:
        return dict(self.bins)

    def counts(self):
        return [self.bins[k] for k in sorted(self.bins)]

    def total(self) -> int:
        return sum(self.bins.values())

    def max_count(self) -> int:
        """Bar scaling denominator, never below 1"""
        return max(1, *self.bins.values())
