'''
console formatting; missing readings print as 0
'''

BOLD = "\033[1m"
RESET = "\033[0m"


def zero(value):
    return value if value is not None else 0


def bold(text):
    return f"{BOLD}{text}{RESET}"


def format_power(reading):
    return f"{reading.watts:.2f}"


def format_cpu_report(name, temps, reading, freqs):
    lines = ["", name, ""]
    for label, value in temps.items():
        lines.append(f"{label:<8}: {int(zero(value)):8d}°C")
    lines.append(f"{'Power':<8}: {reading.watts:8.2f} W")
    lines.append("")
    for i, mhz in enumerate(freqs):
        lines.append(f"CPU {i + 1:2d}  : {zero(mhz):6d} MHz")
    return "\n".join(lines)


def _temp_lines(temps):
    return [f"{label:<9}: {zero(value):.2f}°C" for label, value in temps.items()]


def format_snapshot(snapshot):
    '''
    snapshot keys: board_name, board_temps, cpu, gpu, dram, nvme, case
    '''
    lines = [""]
    lines.append(bold(snapshot.get("board_name") or "Unknown Motherboard"))
    lines.extend(_temp_lines(snapshot["board_temps"]))
    lines.append("")

    cpu = snapshot["cpu"]
    lines.append(bold(cpu["name"]))
    lines.extend(_temp_lines(cpu["temps"]))
    lines.append(f"{'Power':<9}: {cpu['power'].watts:.2f} W")
    lines.append("")

    gpu = snapshot["gpu"]
    lines.append(bold(gpu["name"]))
    lines.extend(_temp_lines(gpu["temps"]))
    lines.append(f"{'Power':<9}: {zero(gpu['power_watts']):.2f} W")
    lines.append("")

    dram = snapshot["dram"]
    lines.append(bold(dram["name"]))
    for i, value in enumerate(dram["temps"]):
        lines.append(f"{f'DRAM {i + 1}':<9}: {zero(value):.2f}°C")
    lines.append("")

    for i, drive in enumerate(snapshot["nvme"]):
        if not drive["found"]:
            lines.append(f"Failed to find hwmon path for {drive['device']}")
            continue
        lines.append(bold(drive["model"] or f"NVMe {i + 1}: Model name not found"))
        lines.append(f"{'NAND':<9}: {zero(drive['temp']):.2f}°C")
        lines.append("")

    case = snapshot["case"]
    lines.append(bold(case["name"]))
    for label, rpm in case["fans"].items():
        lines.append(f"{label:<9}: {zero(rpm)} RPM")
    return "\n".join(lines)


def format_cpu_bar(memory_gb, temps, reading):
    tctl = zero(temps.get("Tctl"))
    tccd = zero(temps.get("Tccd1"))
    return f"{zero(memory_gb):.1f} GB | {tctl:.0f} °C | {tccd:.0f} °C | {reading.watts:.0f} W"


def format_gpu_bar(stats):
    return (f"{zero(stats['use_pct']):.0f} % | {zero(stats['edge']):.0f} °C | "
            f"{zero(stats['junction']):.0f} °C | {zero(stats['memory']):.0f} °C | "
            f"{zero(stats['power_watts']):.0f} W")
