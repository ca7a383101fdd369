import logging
import os
import re

from readings import read_file, read_int, run_command


'''
CPU frequency per core (MHz)     /sys/devices/system/cpu/cpuN/cpufreq
Governor mode per core           scaling_governor
CPU temperatures (C)             sensors k10temp-pci-*
Memory in use (GiB)              /proc/meminfo
'''

CPU_PATH = "/sys/devices/system/cpu/"
MEMINFO_PATH = "/proc/meminfo"
KIB_PER_GIB = 1024.0 * 1024.0

logger = logging.getLogger(__name__)

sensors_line = re.compile(r'^\s*([^:]+):\s*([+-]?[\d\.]+)\s*°?C')


def get_cpu_scaling_info(cpu_path=CPU_PATH):
    cpu_data = {}
    try:
        entries = os.listdir(cpu_path)
    except OSError as e:
        logger.warning("cannot list %s: %s", cpu_path, e)
        return cpu_data
    for cpu in sorted([d for d in entries if d.startswith("cpu") and d[3:].isdigit()], key=lambda d: int(d[3:])):
        idx = int(cpu[3:])
        base = os.path.join(cpu_path, cpu, "cpufreq")
        if os.path.exists(base):
            cur = read_int(os.path.join(base, "scaling_cur_freq"))
            minf = read_int(os.path.join(base, "scaling_min_freq"))
            maxf = read_int(os.path.join(base, "scaling_max_freq"))
            gov = read_file(os.path.join(base, "scaling_governor"))
            cpu_data[idx] = {
                "cur_freq_mhz": cur // 1000 if cur is not None else None,
                "min_freq_mhz": minf // 1000 if minf is not None else None,
                "max_freq_mhz": maxf // 1000 if maxf is not None else None,
                "governor": gov if gov else "unknown"
            }
    return cpu_data


def get_core_frequencies(cores, cpu_path=CPU_PATH):
    freqs = []
    for i in range(cores):
        khz = read_int(os.path.join(cpu_path, f"cpu{i}", "cpufreq", "scaling_cur_freq"))
        freqs.append(khz // 1000 if khz is not None else None)
    return freqs


def parse_sensors(output):
    temps = {}
    if not output:
        return temps
    for line in output.splitlines():
        match = sensors_line.match(line)
        if match:
            try:
                temps[match.group(1).strip()] = float(match.group(2))
            except ValueError:
                continue
    return temps


def get_sensors_temps(chip="k10temp-pci-*"):
    return parse_sensors(run_command(["sensors", chip]))


def get_memory_usage(path=MEMINFO_PATH):
    total = None
    available = None
    try:
        with open(path) as f:
            for line in f:
                parts = line.split()
                if len(parts) < 2:
                    continue
                if parts[0] == "MemTotal:":
                    total = int(parts[1])
                elif parts[0] == "MemAvailable:":
                    available = int(parts[1])
                if total is not None and available is not None:
                    break
    except (OSError, ValueError) as e:
        logger.warning("cannot parse %s: %s", path, e)
        return None
    if not total or not available:
        return None
    return (total - available) / KIB_PER_GIB
