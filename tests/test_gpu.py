import pytest

import gpu


SHOWUSE = """\
============================ ROCm System Management Interface ============================
=================================== % time GPU is busy ===================================
GPU[0]          : GPU use (%): 17
==========================================================================================
"""

TEMPS = """\
========================= ROCm System Management Interface =========================
=========================== Temperature ============================================
GPU[0]          : Temperature (Sensor edge) (C): 45.0
GPU[0]          : Temperature (Sensor junction) (C): 49.0
GPU[0]          : Temperature (Sensor memory) (C): 56.0
====================================================================================
"""

POWER = """\
========================= ROCm System Management Interface =========================
=========================== Power Consumption ======================================
GPU[0]          : Average Graphics Package Power (W): 31.0
====================================================================================
"""


def fake_rocm(args):
    if "--showuse" in args:
        return SHOWUSE
    if "-t" in args:
        return TEMPS
    if "-P" in args:
        return POWER
    return None


def test_get_rocm_stats(monkeypatch):
    monkeypatch.setattr(gpu, "run_command", fake_rocm)
    assert gpu.get_rocm_stats(0) == {
        "use_pct": 17.0,
        "edge": 45.0,
        "junction": 49.0,
        "memory": 56.0,
        "power_watts": 31.0
    }


def test_get_rocm_stats_without_rocm_smi(monkeypatch):
    monkeypatch.setattr(gpu, "run_command", lambda args: None)
    assert set(gpu.get_rocm_stats(1).values()) == {None}


def test_to_float():
    assert gpu.to_float("17%") == 17.0
    assert gpu.to_float("N/A") is None
    assert gpu.to_float(None) is None


def test_get_amdgpu_sensors(hwmon_tree):
    stats = gpu.get_amdgpu_sensors(str(hwmon_tree / "hwmon2"), {"Edge": "temp1_input", "Mem": "temp3_input"})
    assert stats["temps"] == {"Edge": 44.0, "Mem": 52.0}
    assert stats["power_watts"] == pytest.approx(31.0)
