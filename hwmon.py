import fnmatch
import logging
import os

from readings import read_file, read_int, run_command


'''
hwmon chips, board name, DRAM and NVMe temperatures

tempN_input   millidegrees Celsius
fanN_input    RPM
powerN_*      microwatts
'''

HWMON_BASE = "/sys/class/hwmon"
BOARD_NAME_PATH = "/sys/devices/virtual/dmi/id/board_name"
SYS_ROOT = "/sys"

logger = logging.getLogger(__name__)


def find_hwmon(pattern, base=HWMON_BASE):
    try:
        entries = sorted(os.listdir(base))
    except OSError as e:
        logger.warning("cannot list %s: %s", base, e)
        return None
    for entry in entries:
        path = os.path.join(base, entry)
        name = read_file(os.path.join(path, "name"))
        if name and fnmatch.fnmatch(name, pattern):
            return path
    logger.info("no hwmon chip matching %r under %s", pattern, base)
    return None


def millidegrees(value):
    if value is None or value < 0:
        return None
    return value / 1000.0


def microwatts(value):
    if value is None or value < 0:
        return None
    return value / 1_000_000.0


def read_channels(hwmon_path, channels, convert=None):
    '''
    channels maps a display label to a channel file, e.g. {"Tctl": "temp1_input"}
    '''
    values = {}
    for label, channel in channels.items():
        value = read_int(os.path.join(hwmon_path, channel))
        if convert is not None:
            value = convert(value)
        elif value is not None and value < 0:
            value = None
        values[label] = value
    return values


def read_temperatures(hwmon_path, channels):
    return read_channels(hwmon_path, channels, millidegrees)


def read_fans(hwmon_path, channels):
    return read_channels(hwmon_path, channels)


def read_power(hwmon_path, channel="power1_average"):
    return microwatts(read_int(os.path.join(hwmon_path, channel)))


def get_board_name(path=BOARD_NAME_PATH):
    return read_file(path) or None


def get_dram_temperatures(indices, base=HWMON_BASE):
    temps = []
    for index in indices:
        value = read_int(os.path.join(base, f"hwmon{index}", "temp1_input"))
        temps.append(millidegrees(value))
    return temps


def find_nvme_hwmon(device, sys_root=SYS_ROOT):
    output = run_command(["udevadm", "info", "--query=path", device])
    if not output:
        return None
    devpath = output.splitlines()[0].strip()
    top = os.path.join(sys_root, devpath.lstrip("/"))
    for root, dirs, files in os.walk(top):
        dirs.sort()
        for d in dirs:
            if d.startswith("hwmon"):
                return os.path.join(root, d)
    logger.info("no hwmon directory below %s", top)
    return None


def get_nvme_model(device):
    output = run_command(["udevadm", "info", "--query=property", f"--name={device}n1"])
    if not output:
        return None
    for line in output.splitlines():
        if line.startswith("ID_MODEL="):
            return line.split("=", 1)[1].strip() or None
    return None


def get_nvme_drives(count, sys_root=SYS_ROOT):
    drives = []
    for i in range(count):
        device = f"/dev/nvme{i}"
        hwmon_path = find_nvme_hwmon(device, sys_root)
        if hwmon_path is None:
            drives.append({"device": device, "found": False, "model": None, "temp": None})
            continue
        temp = millidegrees(read_int(os.path.join(hwmon_path, "temp1_input")))
        drives.append({"device": device, "found": True, "model": get_nvme_model(device), "temp": temp})
    return drives
