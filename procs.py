import logging
import os


'''
blacklisted processes: one command name per line in the blacklist file,
compared against the first token of /proc/<pid>/comm
'''

PROC_PATH = "/proc"
MAX_PROCESSES = 100

logger = logging.getLogger(__name__)


def load_process_names(config_file):
    '''
    returns None when the blacklist cannot be read
    '''
    names = []
    try:
        with open(config_file) as f:
            for line in f:
                name = line.strip()
                if not name:
                    continue
                names.append(name)
                if len(names) >= MAX_PROCESSES:
                    logger.warning("blacklist %s truncated to %d names", config_file, MAX_PROCESSES)
                    break
    except OSError as e:
        logger.warning("cannot read blacklist %s: %s", config_file, e)
        return None
    return names


def get_running_commands(proc_path=PROC_PATH):
    commands = set()
    try:
        pids = os.listdir(proc_path)
    except OSError as e:
        logger.warning("cannot list %s: %s", proc_path, e)
        return commands
    for pid in filter(str.isdigit, pids):
        comm_path = os.path.join(proc_path, pid, "comm")
        try:
            with open(comm_path) as f:
                parts = f.read().split()
        except (PermissionError, FileNotFoundError, ProcessLookupError):
            continue
        if parts:
            commands.add(parts[0])
    return commands


def find_running_process(process_names, proc_path=PROC_PATH):
    '''
    first blacklisted name found running, or None
    '''
    if not process_names:
        return None
    running = get_running_commands(proc_path)
    for name in process_names:
        if name in running:
            logger.info("blacklisted process running: %s", name)
            return name
    return None
