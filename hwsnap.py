import logging
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

import gpu
import hwmon
import moncpu
import procs
import report
from collector import TelemetryCollector, write_textfile
from config import ConfigError, get_configuration
from energy import CachedRaplReader, RaplReader, USEC
from power import PowerSampler, measure_power


app = typer.Typer(help="One-shot hardware telemetry for this desktop")

logger = logging.getLogger("hwsnap")


class Mode(str, Enum):
    cpu = "cpu"
    gpu = "gpu"


def cpu_power(config):
    rapl = config['rapl']
    return measure_power(RaplReader(rapl['energy_path']), rapl['window'])


def require_hwmon(pattern):
    path = hwmon.find_hwmon(pattern)
    if path is None:
        typer.echo(f"{pattern} sensor module not found!", err=True)
        raise typer.Exit(1)
    return path


@app.callback()
def main(ctx: typer.Context,
         config: Optional[Path] = typer.Option(None, "--config", "-c", help="YAML configuration file"),
         verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging on stderr")):
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        ctx.obj = get_configuration(str(config) if config is not None else None)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(2)


@app.command()
def power(ctx: typer.Context):
    """Print CPU package power in watts"""
    reading = cpu_power(ctx.obj)
    if not reading.valid:
        typer.echo(f"Failed to calculate CPU power: {reading.error.value}", err=True)
        raise typer.Exit(1)
    typer.echo(report.format_power(reading))


@app.command()
def cpu(ctx: typer.Context):
    """CPU temperatures, package power and per-core frequency"""
    config = ctx.obj['cpu']
    path = require_hwmon(config['chip'])
    temps = hwmon.read_temperatures(path, config['temps'])
    if any(value is None for value in temps.values()):
        typer.echo("Failed to read temperatures!", err=True)
        raise typer.Exit(1)
    reading = cpu_power(ctx.obj)
    if not reading.valid:
        typer.echo(f"Failed to calculate CPU power: {reading.error.value}", err=True)
        raise typer.Exit(1)
    freqs = moncpu.get_core_frequencies(config['cores'])
    typer.echo(report.format_cpu_report(config['name'], temps, reading, freqs))


@app.command()
def sens(ctx: typer.Context):
    """Full snapshot: board, CPU, GPU, DRAM, NVMe and fans"""
    config = ctx.obj
    board_path = require_hwmon(config['board']['chip'])
    cpu_path = require_hwmon(config['cpu']['chip'])
    gpu_path = require_hwmon(config['gpu']['chip'])

    card = gpu.get_amdgpu_sensors(gpu_path, config['gpu']['temps'], config['gpu']['power'])
    snapshot = {
        'board_name': hwmon.get_board_name(),
        'board_temps': hwmon.read_temperatures(board_path, config['board']['temps']),
        'cpu': {
            'name': config['cpu']['name'],
            'temps': hwmon.read_temperatures(cpu_path, config['cpu']['temps']),
            'power': cpu_power(config)
        },
        'gpu': {
            'name': config['gpu']['name'],
            'temps': card['temps'],
            'power_watts': card['power_watts']
        },
        'dram': {
            'name': config['dram']['name'],
            'temps': hwmon.get_dram_temperatures(config['dram']['hwmon'])
        },
        'nvme': hwmon.get_nvme_drives(config['nvme']['devices']),
        'case': {
            'name': config['case']['name'],
            'fans': hwmon.read_fans(board_path, config['case']['fans'])
        }
    }
    typer.echo(report.format_snapshot(snapshot))


@app.command()
def bar(ctx: typer.Context,
        blacklist: Path = typer.Argument(..., help="File with one process name per line"),
        mode: Mode = typer.Argument(..., help="cpu or gpu")):
    """One status line, suppressed while a blacklisted process runs"""
    names = procs.load_process_names(blacklist)
    if names is None:
        raise typer.Exit(1)
    running = procs.find_running_process(names)
    if running is not None:
        logger.debug("suppressed by %s", running)
        raise typer.Exit(1)

    config = ctx.obj
    if mode is Mode.cpu:
        temps = moncpu.get_sensors_temps(config['cpu']['sensors_chip'])
        reading = cpu_power(config)
        memory = moncpu.get_memory_usage()
        if 'Tctl' in temps and 'Tccd1' in temps and memory:
            typer.echo(report.format_cpu_bar(memory, temps, reading))
    else:
        stats = gpu.get_rocm_stats(config['gpu']['device'])
        if all(stats[key] is not None for key in ('use_pct', 'edge', 'junction', 'memory')):
            typer.echo(report.format_gpu_bar(stats))


@app.command()
def textfile(ctx: typer.Context,
             path: Optional[Path] = typer.Argument(None, help="Output .prom file, defaults to exporter.textfile")):
    """Write every reading for the node_exporter textfile collector"""
    config = ctx.obj
    target = str(path) if path is not None else config['exporter']['textfile']
    rapl = config['rapl']
    reader = CachedRaplReader(rapl['energy_path'], threshold_us=int(rapl['debounce'] * USEC))
    sampler = PowerSampler(reader, rapl['window'])
    try:
        write_textfile(target, TelemetryCollector(config, sampler))
    except OSError as e:
        typer.echo(f"Error: cannot write {target}: {e}", err=True)
        raise typer.Exit(1)
    logger.info("wrote %s", target)


if __name__ == "__main__":
    app()
