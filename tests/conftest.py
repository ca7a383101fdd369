import os

import pytest

from energy import ClockFailure, Sample


class FakeClock(object):
    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, us):
        self.now += us


class ScriptedReader(object):
    '''
    hands out prepared samples in order; a ClockFailure instance is raised
    '''

    def __init__(self, samples):
        self.samples = list(samples)
        self.calls = 0

    def sample(self, fresh=False):
        self.calls += 1
        item = self.samples.pop(0)
        if isinstance(item, ClockFailure):
            raise item
        return item


class RecordingSleep(object):
    def __init__(self):
        self.calls = []

    def __call__(self, seconds):
        self.calls.append(seconds)


def write(path, content):
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)
    return path


@pytest.fixture
def clock():
    return FakeClock(1_000_000)


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def hwmon_tree(tmp_path):
    '''
    hwmon0 nct6687, hwmon1 k10temp, hwmon2 amdgpu, hwmon8/9 spd5118
    '''
    base = tmp_path / "hwmon"
    write(str(base / "hwmon0" / "name"), "nct6687\n")
    write(str(base / "hwmon0" / "temp2_input"), "38000\n")
    write(str(base / "hwmon0" / "temp3_input"), "45500\n")
    write(str(base / "hwmon0" / "temp5_input"), "51000\n")
    write(str(base / "hwmon0" / "fan1_input"), "1450\n")
    write(str(base / "hwmon0" / "fan4_input"), "900\n")
    write(str(base / "hwmon0" / "fan5_input"), "870\n")
    write(str(base / "hwmon0" / "fan6_input"), "0\n")
    write(str(base / "hwmon1" / "name"), "k10temp\n")
    write(str(base / "hwmon1" / "temp1_input"), "61250\n")
    write(str(base / "hwmon1" / "temp3_input"), "58000\n")
    write(str(base / "hwmon2" / "name"), "amdgpu\n")
    write(str(base / "hwmon2" / "temp1_input"), "44000\n")
    write(str(base / "hwmon2" / "temp2_input"), "47000\n")
    write(str(base / "hwmon2" / "temp3_input"), "52000\n")
    write(str(base / "hwmon2" / "power1_average"), "31000000\n")
    write(str(base / "hwmon8" / "name"), "spd5118\n")
    write(str(base / "hwmon8" / "temp1_input"), "40250\n")
    write(str(base / "hwmon9" / "name"), "spd5118\n")
    write(str(base / "hwmon9" / "temp1_input"), "41500\n")
    return base


def samples(*pairs):
    return [Sample(energy, ts) for energy, ts in pairs]
