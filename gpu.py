import logging

from hwmon import read_power, read_temperatures
from readings import last_field, run_command


'''
AMD GPU statistics from rocm-smi and the amdgpu hwmon chip
'''

GPU_USE = "GPU use (%)"
EDGE_TEMP = "Temperature (Sensor edge) (C):"
JUNCTION_TEMP = "Temperature (Sensor junction) (C):"
MEMORY_TEMP = "Temperature (Sensor memory) (C):"
AVERAGE_POWER = "Average Graphics Package Power (W):"

logger = logging.getLogger(__name__)


def to_float(value):
    if value is None:
        return None
    try:
        return float(value.rstrip("%"))
    except ValueError:
        return None


def get_rocm_stats(device=0):
    dev = ["-d", str(device)]
    use = run_command(["rocm-smi"] + dev + ["--showuse"])
    temps = run_command(["rocm-smi"] + dev + ["-t"])
    power = run_command(["rocm-smi"] + dev + ["-P"])
    if use is None and temps is None and power is None:
        logger.warning("rocm-smi returned nothing for device %s", device)
    return {
        "use_pct": to_float(last_field(use, GPU_USE)),
        "edge": to_float(last_field(temps, EDGE_TEMP)),
        "junction": to_float(last_field(temps, JUNCTION_TEMP)),
        "memory": to_float(last_field(temps, MEMORY_TEMP)),
        "power_watts": to_float(last_field(power, AVERAGE_POWER))
    }


def get_amdgpu_sensors(hwmon_path, temps, power_channel="power1_average"):
    return {
        "temps": read_temperatures(hwmon_path, temps),
        "power_watts": read_power(hwmon_path, power_channel)
    }
