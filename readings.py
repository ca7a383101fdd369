import logging
import subprocess


'''
raw readings from pseudo-files and diagnostic commands
'''

logger = logging.getLogger(__name__)


def read_file(path):
    try:
        with open(path) as f:
            return f.read().strip()
    except OSError as e:
        logger.debug("cannot read %s: %s", path, e)
        return None


def read_int(path):
    value = read_file(path)
    if value is None:
        return None
    try:
        return int(value.split()[0])
    except (ValueError, IndexError):
        logger.debug("not an integer in %s: %r", path, value)
        return None


def run_command(args):
    try:
        result = subprocess.run(args, capture_output=True, text=True, errors="replace", check=True)
    except FileNotFoundError:
        logger.debug("command not found: %s", args[0])
        return None
    except subprocess.CalledProcessError as e:
        logger.debug("%s exited with %s", " ".join(args), e.returncode)
        return None
    return result.stdout


def last_field(output, marker):
    '''
    last whitespace separated field of the first line containing marker
    '''
    if not output:
        return None
    for line in output.splitlines():
        if marker in line:
            parts = line.split()
            return parts[-1] if parts else None
    return None
