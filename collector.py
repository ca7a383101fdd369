import logging

from prometheus_client.core import GaugeMetricFamily
from prometheus_client import CollectorRegistry, write_to_textfile

import gpu
import hwmon
import moncpu


logger = logging.getLogger(__name__)


class TelemetryCollector(object):
    def __init__(self, config, sampler):
        self.config = config
        self.sampler = sampler

    def collect(self):
        '''
        One pass over every reading. Power comes from the sampler, so a
        collector kept alive between scrapes polls without blocking.
        '''
        reading = self.sampler.poll()
        if reading.valid:
            metric = GaugeMetricFamily("hwsnap_cpu_power_watts", "CPU package power from RAPL", labels=[])
            metric.add_metric([], reading.watts)
            yield metric
        else:
            logger.warning("skipping cpu power: %s", reading.error.value)

        cpu = self.config['cpu']
        path = hwmon.find_hwmon(cpu['chip'])
        if path is not None:
            metric = GaugeMetricFamily("hwsnap_cpu_temperature_celsius", "CPU temperatures", labels=['sensor'])
            for label, value in hwmon.read_temperatures(path, cpu['temps']).items():
                if value is not None:
                    metric.add_metric([label], value)
            yield metric

        cpu_data = moncpu.get_cpu_scaling_info()
        if cpu_data:
            metric = GaugeMetricFamily("hwsnap_cpu_frequency_mhz", "CPU Frequencies", labels=['core', 'governor'])
            for core, info in cpu_data.items():
                if info['cur_freq_mhz'] is not None:
                    metric.add_metric([str(core), info['governor']], info['cur_freq_mhz'])
            yield metric

        used = moncpu.get_memory_usage()
        if used is not None:
            metric = GaugeMetricFamily("hwsnap_memory_used_gibibytes", "Memory in use", labels=[])
            metric.add_metric([], used)
            yield metric

        board = self.config['board']
        path = hwmon.find_hwmon(board['chip'])
        if path is not None:
            metric = GaugeMetricFamily("hwsnap_board_temperature_celsius", "Motherboard temperatures",
                                       labels=['sensor'])
            for label, value in hwmon.read_temperatures(path, board['temps']).items():
                if value is not None:
                    metric.add_metric([label], value)
            yield metric

            metric = GaugeMetricFamily("hwsnap_fan_speed_rpm", "Fan speeds", labels=['fan'])
            for label, value in hwmon.read_fans(path, self.config['case']['fans']).items():
                if value is not None:
                    metric.add_metric([label], value)
            yield metric

        card = self.config['gpu']
        path = hwmon.find_hwmon(card['chip'])
        if path is not None:
            stats = gpu.get_amdgpu_sensors(path, card['temps'], card['power'])
            metric = GaugeMetricFamily("hwsnap_gpu_temperature_celsius", "GPU temperatures", labels=['sensor'])
            for label, value in stats['temps'].items():
                if value is not None:
                    metric.add_metric([label], value)
            yield metric
            if stats['power_watts'] is not None:
                metric = GaugeMetricFamily("hwsnap_gpu_power_watts", "GPU average package power", labels=[])
                metric.add_metric([], stats['power_watts'])
                yield metric

        metric = GaugeMetricFamily("hwsnap_dram_temperature_celsius", "DRAM module temperatures", labels=['module'])
        for index, value in enumerate(hwmon.get_dram_temperatures(self.config['dram']['hwmon'])):
            if value is not None:
                metric.add_metric([str(index + 1)], value)
        yield metric

        metric = GaugeMetricFamily("hwsnap_nvme_temperature_celsius", "NVMe NAND temperatures",
                                   labels=['device', 'model'])
        for drive in hwmon.get_nvme_drives(self.config['nvme']['devices']):
            if drive['temp'] is not None:
                metric.add_metric([drive['device'], drive['model'] or "unknown"], drive['temp'])
        yield metric


def write_textfile(path, collector):
    registry = CollectorRegistry()
    registry.register(collector)
    write_to_textfile(path, registry)
