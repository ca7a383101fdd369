import logging
import time
from dataclasses import dataclass


'''
RAPL energy counter (microjoules) and monotonic clock (microseconds)
'''

RAPL_ENERGY_PATH = "/sys/class/powercap/intel-rapl:0/energy_uj"
USEC = 1_000_000

logger = logging.getLogger(__name__)


class ClockFailure(Exception):
    pass


@dataclass(frozen=True)
class Sample:
    energy: object  # int microjoules, None when the endpoint was unreadable
    timestamp: int

    @property
    def available(self):
        return self.energy is not None


def monotonic_us():
    try:
        return time.monotonic_ns() // 1000
    except OSError as e:
        raise ClockFailure(f"monotonic clock failed: {e}") from e


class RaplReader(object):
    def __init__(self, path=RAPL_ENERGY_PATH, clock=monotonic_us):
        self.path = path
        self.clock = clock

    def read_energy(self):
        try:
            with open(self.path) as f:
                raw = f.read().strip()
        except OSError as e:
            logger.warning("energy counter %s unreadable: %s", self.path, e)
            return None
        try:
            value = int(raw)
        except ValueError:
            logger.warning("energy counter %s is not an integer: %r", self.path, raw)
            return None
        if value < 0:
            logger.warning("energy counter %s is negative: %d", self.path, value)
            return None
        return value

    def read_timestamp(self):
        return self.clock()

    def sample(self, fresh=False):
        energy = self.read_energy()
        return Sample(energy, self.read_timestamp())


class CachedRaplReader(RaplReader):
    '''
    Memoizes the last successful sample for `threshold_us` so callers polling
    faster than the counter updates do not reopen the endpoint. The memoized
    sample keeps the timestamp of the actual read. `fresh` always reopens
    the endpoint.
    '''

    def __init__(self, path=RAPL_ENERGY_PATH, clock=monotonic_us, threshold_us=USEC):
        super().__init__(path, clock)
        self.threshold_us = threshold_us
        self._last = None

    def sample(self, fresh=False):
        if self._last is not None and not fresh:
            now = self.clock()
            if now - self._last.timestamp < self.threshold_us:
                return self._last
        current = super().sample()
        if current.available:
            self._last = current
        return current

    def reset(self):
        self._last = None
