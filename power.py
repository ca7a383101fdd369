import enum
import logging
import threading
import time
from dataclasses import dataclass

from energy import CachedRaplReader, ClockFailure


'''
CPU package power (W) from two RAPL energy samples.

microjoules / microseconds is watts, so no unit conversion is needed.
'''

DEFAULT_WINDOW = 1.0  # seconds

logger = logging.getLogger(__name__)


class PowerError(enum.Enum):
    ENDPOINT_UNAVAILABLE = "endpoint unreadable"
    CLOCK_FAILURE = "clock failed"
    NON_MONOTONIC_INTERVAL = "time did not advance"
    COUNTER_REGRESSION = "counter decreased"


@dataclass(frozen=True)
class PowerReading:
    watts: float = 0.0
    error: object = None  # PowerError when invalid

    @property
    def valid(self):
        return self.error is None

    @classmethod
    def invalid(cls, error):
        logger.warning("power reading invalid: %s", error.value)
        return cls(0.0, error)

    def as_dict(self):
        return {
            "valid": self.valid,
            "watts": self.watts,
            "error": self.error.value if self.error else None
        }


def take_sample(reader, fresh=False):
    '''
    Returns (sample, None) or (None, PowerError).
    '''
    try:
        sample = reader.sample(fresh=fresh)
    except ClockFailure as e:
        logger.error("%s", e)
        return None, PowerError.CLOCK_FAILURE
    if not sample.available:
        return None, PowerError.ENDPOINT_UNAVAILABLE
    return sample, None


def compute_power(baseline, final):
    if baseline.energy is None or final.energy is None:
        return PowerReading.invalid(PowerError.ENDPOINT_UNAVAILABLE)
    elapsed = final.timestamp - baseline.timestamp
    if elapsed <= 0:
        return PowerReading.invalid(PowerError.NON_MONOTONIC_INTERVAL)
    consumed = final.energy - baseline.energy
    if consumed < 0:
        return PowerReading.invalid(PowerError.COUNTER_REGRESSION)
    return PowerReading(consumed / elapsed)


def measure_power(reader, window=DEFAULT_WINDOW, sleep=time.sleep):
    baseline, error = take_sample(reader)
    if error is not None:
        return PowerReading.invalid(error)
    sleep(window)
    final, error = take_sample(reader, fresh=True)
    if error is not None:
        return PowerReading.invalid(error)
    reading = compute_power(baseline, final)
    if reading.valid:
        logger.debug("%.2f W over %d us", reading.watts, final.timestamp - baseline.timestamp)
    return reading


class PowerSampler(object):
    '''
    Incremental power sampler for callers that poll on their own cadence.

    The first poll blocks for one window to get a second data point; later
    polls compare against the previous stored sample and never block. A poll
    on the same clock tick as the stored sample (the debounced reader returns
    its memoized sample for a second) is a no-op returning an invalid reading.
    '''

    def __init__(self, reader=None, window=DEFAULT_WINDOW, sleep=time.sleep):
        self.reader = reader if reader is not None else CachedRaplReader()
        self.window = window
        self.sleep = sleep
        self._previous = None
        self._lock = threading.Lock()

    @property
    def previous(self):
        return self._previous

    def reset(self):
        with self._lock:
            self._previous = None

    def poll(self):
        with self._lock:
            if self._previous is None:
                return self._seed()
            current, error = take_sample(self.reader)
            if error is not None:
                return PowerReading.invalid(error)
            if current.timestamp == self._previous.timestamp:
                return PowerReading(0.0, PowerError.NON_MONOTONIC_INTERVAL)
            reading = compute_power(self._previous, current)
            if reading.valid or reading.error is PowerError.COUNTER_REGRESSION:
                self._previous = current
            return reading

    def _seed(self):
        baseline, error = take_sample(self.reader)
        if error is not None:
            return PowerReading.invalid(error)
        self._previous = baseline
        self.sleep(self.window)
        current, error = take_sample(self.reader, fresh=True)
        if error is not None:
            return PowerReading.invalid(error)
        reading = compute_power(baseline, current)
        if reading.valid or reading.error is PowerError.COUNTER_REGRESSION:
            self._previous = current
        return reading
