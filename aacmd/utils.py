'''
Support functions for aacmd

Usage as script:

    python utils.py [-l]

shows package version (-l:  shows version and date)

'''

import sys
import os
import logging

# __version__ = "1.0"    # First version: L, D, B, V, O, C commands (CCDAutoPilot)
# __version__ = "1.1"    # Added P, F, G commands for Voyager

__version__ = "1.2"      # Added Alnitak serial driver and simulator

__date__ = "October 2026"

LOG_FILE = 'fflog.txt'          # Append log, written beside the launched script
LOG_FORMAT = '%(asctime)s - %(message)s'

SIM_PORT = 'SIM'                # Port identifier selecting the simulator

def get_version(long=False):
    "get version, as string"
    if long:
        return f"{__version__} - {__date__}"
    return __version__

def port_name(port, platform=None):
    '''
    Convert port identifier into a serial device name

    A bare number is a COM port number as given by automation software,
    anything else is a device path and is returned unchanged
    '''
    port = port.strip()
    if not port.isdigit():
        return port
    platform = platform or sys.platform
    if platform == 'win32':
        return f'COM{int(port)}'
    return f'/dev/ttyUSB{int(port)}'

def is_simulator(port):
    'True if port identifier selects the simulator'
    return port.strip().upper() == SIM_PORT

def make_logname(script=None):
    'generate log file path'
    script = script or sys.argv[0]
    ldir = os.path.dirname(os.path.abspath(script))
    return os.path.join(ldir, LOG_FILE)

def set_logger(filepath, name='aacmd'):
    'Logger initialization'
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)
    try:
        fhndl = logging.FileHandler(filepath, mode='a', encoding='utf-8')
    except OSError:          # log file is optional
        if not logger.handlers:
            logger.addHandler(logging.NullHandler())
        logger.filename = None
        return logger
    fhndl.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fhndl)
    logger.filename = filepath
    return logger

def close_logger(logger):
    'Remove and close file handlers'
    for hndl in list(logger.handlers):
        if isinstance(hndl, logging.FileHandler):
            logger.removeHandler(hndl)
            hndl.close()

if __name__ == "__main__":
    if "-l" in sys.argv:
        print(get_version(long=True))
    else:
        print(get_version())
