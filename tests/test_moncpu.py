import moncpu
from conftest import write


SENSORS_OUTPUT = """\
k10temp-pci-00c3
Adapter: PCI adapter
Tctl:         +61.2°C
Tccd1:        +58.0°C

"""

MEMINFO = """\
MemTotal:       32768000 kB
MemFree:         1024000 kB
MemAvailable:   24379392 kB
Buffers:          512000 kB
"""


def make_cpu(base, index, cur, gov="schedutil"):
    freq = base / f"cpu{index}" / "cpufreq"
    write(str(freq / "scaling_cur_freq"), f"{cur}\n")
    write(str(freq / "scaling_min_freq"), "545000\n")
    write(str(freq / "scaling_max_freq"), "5050000\n")
    write(str(freq / "scaling_governor"), f"{gov}\n")


def test_get_cpu_scaling_info(tmp_path):
    make_cpu(tmp_path, 0, 4200000)
    make_cpu(tmp_path, 10, 3000000, "performance")
    (tmp_path / "cpufreq").mkdir()
    (tmp_path / "cpuidle").mkdir()
    info = moncpu.get_cpu_scaling_info(str(tmp_path))
    assert list(info) == [0, 10]
    assert info[0] == {"cur_freq_mhz": 4200, "min_freq_mhz": 545, "max_freq_mhz": 5050, "governor": "schedutil"}
    assert info[10]["governor"] == "performance"


def test_get_core_frequencies(tmp_path):
    make_cpu(tmp_path, 0, 4200000)
    make_cpu(tmp_path, 1, 3999999)
    assert moncpu.get_core_frequencies(3, str(tmp_path)) == [4200, 3999, None]


def test_parse_sensors():
    assert moncpu.parse_sensors(SENSORS_OUTPUT) == {"Tctl": 61.2, "Tccd1": 58.0}
    assert moncpu.parse_sensors(None) == {}


def test_get_sensors_temps_runs_sensors(monkeypatch):
    calls = []

    def fake_run(args):
        calls.append(args)
        return SENSORS_OUTPUT

    monkeypatch.setattr(moncpu, "run_command", fake_run)
    assert moncpu.get_sensors_temps()["Tctl"] == 61.2
    assert calls == [["sensors", "k10temp-pci-*"]]


def test_get_memory_usage(tmp_path):
    path = write(str(tmp_path / "meminfo"), MEMINFO)
    assert moncpu.get_memory_usage(path) == (32768000 - 24379392) / (1024.0 * 1024.0)


def test_get_memory_usage_incomplete(tmp_path):
    path = write(str(tmp_path / "meminfo"), "MemTotal:       32768000 kB\n")
    assert moncpu.get_memory_usage(path) is None
    assert moncpu.get_memory_usage(str(tmp_path / "missing")) is None
