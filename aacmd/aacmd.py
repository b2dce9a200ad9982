"""
aacmd.py - AACmd compatible command line control of flat field panels

Lets automation software (CCDAutoPilot, Voyager) drive a flat panel with the
Alnitak AACmd command set. Each directive prints a fixed acknowledgment
which the caller looks for in the output line.

Usage:

    aacmd <port> <CMD> [<CMD> ...]

See USAGE below for the directive list.
"""

import sys
import re
import time
import logging

from aacmd import utils
from aacmd.flatman import FlatMan
from aacmd.flatman_simulator import FlatManSimulator

AACMD_VERSION = "3.14.16"     # Version reported by the V directive
DEFAULT_DELAY = 3.0           # Exit delay (sec), S sets it to 0

MIN_BRIGHT = 1
MAX_BRIGHT = 255

USAGE = """Usage: aacmd <port> <CMD> [<CMD> ...]

Directives (case insensitive, executed in order):

  L      turn light on                    -> LIGHT ON
  D      turn light off                   -> LIGHT OFF
  Bnnn   set brightness to nnn (1-255)    -> BRIGHT nnn
  G      get brightness from device       -> BRIGHT nnn
  V      get aacmd version                -> AACMD version: x.x.x
  O      open (Flip-Flat)                 -> OPEN
  C      close (Flip-Flat)                -> CLOSE
  P      product id                       -> PRODUCTID
  F      firmware version                 -> FIRMWARE
  S      silent: exit immediately (otherwise output stays for 3 seconds)

<port> is a COM port number, a serial device path or SIM for the simulator.

Examples:

  aacmd <port> L Bnnn S      - turns the panel on to brightness nnn 1-255
  aacmd <port> D S           - turns the panel off
  aacmd <port> V             - version: x.x.x
  aacmd <port> O S           - opens the FlipFlat
  aacmd <port> C S           - closes the FlipFlat
"""

CONNECT_ERROR = "could not connect to usb dimmer!"

                     # Acknowledgments not depending on the device
REPLIES = {
    "V": f"AACMD version: {AACMD_VERSION} ",
    "O": "OPEN ",
    "C": "CLOSE ",
    "P": "PRODUCTID ",
    "F": "FIRMWARE ",
}

LIGHT_ON = "LIGHT ON "
LIGHT_OFF = "LIGHT OFF "
BRIGHT = "BRIGHT {} "

SILENT = "S"

_BRIGHT_RE = re.compile(r"\s*\+?([0-9]+)", re.ASCII)

class UsageError(Exception):
    'malformed invocation'

def usage(file=None):
    'print usage text'
    print(USAGE, end='', file=file or sys.stderr)

def parse_brightness(token):
    '''
    Get brightness value from a B token (e.g.: "B120")

    ASCII digits following the directive letter are parsed as an unsigned
    integer, trailing characters are ignored. The value must be in 1..255
    '''
    match = _BRIGHT_RE.match(token[1:])
    if match is None:
        raise UsageError(f"missing brightness value: {token}")
    digits = match.group(1).lstrip("0")
    if len(digits) > 3:
        raise UsageError(f"brightness out of range [{MIN_BRIGHT}-{MAX_BRIGHT}]: {token[:10]}...")
    value = int(digits or "0")
    if not MIN_BRIGHT <= value <= MAX_BRIGHT:
        raise UsageError(f"brightness out of range [{MIN_BRIGHT}-{MAX_BRIGHT}]: {token}")
    return value

def execute(device, commands):                 #pylint: disable=R0912
    '''
    Execute directives in order

    Parameters
    ----------
    device : FlatMan or FlatManSimulator
        connected device
    commands : list of str
        command tokens

    Returns
    -------
    (reply, delay) : acknowledgment line (without newline) and exit delay (sec)

    Raises UsageError at the first invalid token. Directives executed
    before it are not undone.
    '''
    logger = logging.getLogger('aacmd')
    reply = []
    delay = DEFAULT_DELAY
    for token in commands:
        cmd = token[:1].upper()
        if cmd == "L":
            ret = device.set_light_on(True)
            logger.info('light on: %s', ret)
            if ret:
                reply.append(LIGHT_ON)
        elif cmd == "D":
            ret = device.set_light_on(False)
            logger.info('light off: %s', ret)
            if ret:
                reply.append(LIGHT_OFF)
        elif cmd == "B":
            value = parse_brightness(token)
            ret = device.set_brightness(value)
            logger.info('set brightness %d: %s', value, ret)
            if ret:
                reply.append(BRIGHT.format(value))
        elif cmd == "G":
            value = device.get_brightness()
            logger.info('get brightness: %d', value)
            reply.append(BRIGHT.format(value))
        elif cmd in REPLIES:
            reply.append(REPLIES[cmd])
        elif cmd == SILENT:
            delay = 0
        else:
            raise UsageError(f"unknown command: {token!r}")
    return "".join(reply), delay

def open_device(port):
    'Create device object for the given port identifier'
    if utils.is_simulator(port):
        return FlatManSimulator(port)
    return FlatMan(utils.port_name(port))

def run(argv, logger):
    'Command interpreter. Returns exit status'
    if len(argv) < 2:
        logger.error('too few arguments: %s', argv)
        usage()
        return 1
    port, commands = argv[0], argv[1:]
    device = open_device(port)
    if not device.connect():
        logger.error('connection failed on port %s', port)
        print(CONNECT_ERROR, file=sys.stderr)
        return 1
    try:
        reply, delay = execute(device, commands)
    except UsageError as excp:
        logger.error('usage error: %s', excp)
        usage()
        return 1
    finally:
        device.close()
    logger.info('reply: %r', reply)
    print(reply)
    sys.stdout.flush()
    time.sleep(delay)
    return 0

def main(argv=None):
    'main entry point'
    if argv is None:
        argv = sys.argv[1:]
    logger = utils.set_logger(utils.make_logname())
    logger.info('aacmd %s (version %s) - args: %s',
                utils.get_version(), AACMD_VERSION, ' '.join(argv))
    try:
        ret = run(argv, logger)
        logger.info('exit status: %d', ret)
    finally:
        utils.close_logger(logger)
    return ret

if __name__ == "__main__":
    sys.exit(main())
