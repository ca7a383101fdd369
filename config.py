import copy
import logging
import os

import yaml

from energy import RAPL_ENERGY_PATH


'''
configuration: built-in defaults for one desktop, overridden by YAML
'''

CONFIG_PATHS = [
    os.path.expanduser("~/.config/hwsnap/hwsnap.yaml"),
    "/etc/default/hwsnap.yaml"
]

DEFAULTS = {
    'rapl': {
        'energy_path': RAPL_ENERGY_PATH,
        'window': 1.0,
        'debounce': 1.0
    },
    'board': {
        'chip': 'nct668*',
        'temps': {'Mobo': 'temp2_input', 'VRM': 'temp3_input', 'Chipset': 'temp5_input'}
    },
    'cpu': {
        'name': 'AMD Ryzen 7 7800X3D',
        'chip': 'k10temp',
        'sensors_chip': 'k10temp-pci-*',
        'temps': {'Tctl': 'temp1_input', 'Tccd': 'temp3_input'},
        'cores': 16
    },
    'gpu': {
        'name': 'AMD Radeon RX 6800 XT',
        'chip': 'amdgpu',
        'device': 0,
        'temps': {'Edge': 'temp1_input', 'Junction': 'temp2_input', 'Mem': 'temp3_input'},
        'power': 'power1_average'
    },
    'dram': {
        'name': 'G-SKILL Trident Z5 Neo',
        'hwmon': [8, 9]
    },
    'nvme': {
        'devices': 4
    },
    'case': {
        'name': 'Lian Li Lancool II',
        'fans': {'Radiator': 'fan1_input', 'Top': 'fan4_input', 'Bottom 1': 'fan5_input', 'Bottom 2': 'fan6_input'}
    },
    'exporter': {
        'textfile': '/var/lib/prometheus/node-exporter/hwsnap.prom'
    }
}


logger = logging.getLogger(__name__)


class ConfigError(Exception):
    pass


def recursive_merge(target, source):
    for key, value in source.items():
        if isinstance(value, dict) and isinstance(target.get(key), dict):
            recursive_merge(target[key], value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def load_file(file):
    config_data = {}
    try:
        with open(file, "r") as file_object:
            generator_obj = yaml.load_all(file_object, Loader=yaml.SafeLoader)
            for data in generator_obj:
                config_data = data
    except OSError as e:
        raise ConfigError(f"cannot read {file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {file}: {e}") from e
    if config_data is None:
        return {}
    if not isinstance(config_data, dict):
        raise ConfigError(f"{file} must contain a mapping")
    return config_data


def _check_number(config, section, key, kind):
    value = config[section][key]
    if isinstance(value, bool) or not isinstance(value, kind) or value < 0:
        raise ConfigError(f"{section}.{key} must be a non-negative number, got {value!r}")


def validate(config):
    for section, key, kind in [('rapl', 'window', (int, float)),
                               ('rapl', 'debounce', (int, float)),
                               ('cpu', 'cores', int),
                               ('nvme', 'devices', int),
                               ('gpu', 'device', int)]:
        if not isinstance(config.get(section), dict) or key not in config[section]:
            raise ConfigError(f"{section}.{key} is missing")
        _check_number(config, section, key, kind)
    return config


def get_configuration(file=None, search=CONFIG_PATHS):
    config = copy.deepcopy(DEFAULTS)
    if file is None:
        for candidate in search:
            if os.path.exists(candidate):
                file = candidate
                break
    if file is not None:
        logger.debug("loading configuration from %s", file)
        recursive_merge(config, load_file(file))
    return validate(config)

