"""
flatman.py - Driver for Alnitak Flat-Man / Flip-Flat flat field panels

Implements the Alnitak generic serial command set.

Test usage:

    python flatman.py <port> [-d]

where:

    -d: enable debug
"""

import sys
import time
import logging
import serial

__version__ = "1.0"
__date__ = "October 2026"

SPEED = 9600        # Serial line speed
TIMEOUT = 1         # Serial read timeout (sec)

MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 255

                              # Commands (data field is always 3 chars)
_PING = ">P000\r"             # reply: *Pii000
_LIGHT_ON = ">L000\r"         # reply: *Lii000
_LIGHT_OFF = ">D000\r"        # reply: *Dii000
_SET_BRIGHT = ">B%03d\r"      # reply: *Biixxx
_GET_BRIGHT = ">J000\r"       # reply: *Jiixxx

PRODUCTS = {
    "10": "Flat-Man_XL",
    "15": "Flat-Man_L",
    "19": "Flat-Man",
    "98": "Flip-Mask/Remote Dust Cover",
    "99": "Flip-Flat",
}

_REPLY_LEN = 7

def _clamp(value):
    'limit brightness to device range'
    return max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, int(value)))

def parse_reply(reply, cmd):
    '''
    Split device reply into (product_id, data)

    Returns None if the reply is not a well formed answer to command cmd
    '''
    if len(reply) != _REPLY_LEN or reply[0] != "*" or reply[1] != cmd:
        return None
    return reply[2:4], reply[4:7]

class FlatMan:
    'Alnitak flat panel connected to a serial line'
    def __init__(self, port, timeout=TIMEOUT):
        self.port = port
        self.timeout = timeout
        self.serial = None
        self.product_id = ""
        self.logger = logging.getLogger('aacmd.flatman')

    def _send(self, command):
        'send command to panel, return reply (empty string on error)'
        self.logger.debug('sending: %r', command)
        try:
            self.serial.reset_input_buffer()
            self.serial.write(command.encode("ascii"))
            line = self.serial.readline()
        except (serial.SerialException, OSError) as excp:
            self.logger.error('communication error on %s: %s', self.port, excp)
            return ""
        ret = line.decode("ascii", errors="replace").strip()
        self.logger.debug('reply: %r', ret)
        return ret

    def _command(self, command, cmd):
        'send command, return reply data field or None'
        if self.serial is None:
            return None
        parsed = parse_reply(self._send(command), cmd)
        if parsed is None:
            return None
        return parsed[1]

    def connect(self):
        'open serial line and check that a panel is answering'
        try:
            self.serial = serial.Serial(self.port, SPEED, timeout=self.timeout)
        except (serial.SerialException, ValueError) as excp:
            self.logger.error('cannot open %s: %s', self.port, excp)
            self.serial = None
            return False
        parsed = parse_reply(self._send(_PING), "P")
        if parsed is None:
            self.logger.error('no flat panel answering on %s', self.port)
            self.close()
            return False
        self.product_id = parsed[0]
        self.logger.info('connected to %s on %s',
                         PRODUCTS.get(self.product_id, "product "+self.product_id), self.port)
        return True

    def close(self):
        'release serial line'
        if self.serial is not None:
            try:
                self.serial.close()
            except serial.SerialException:
                pass
            self.serial = None

    def set_light_on(self, enable=True):
        'switch light on/off. Return True on success'
        if enable:
            return self._command(_LIGHT_ON, "L") is not None
        return self._command(_LIGHT_OFF, "D") is not None

    def set_brightness(self, value):
        'set brightness (clamped to 0..255). Return True on success'
        value = _clamp(value)
        data = self._command(_SET_BRIGHT%value, "B")
        if data is None or not data.isdigit():
            return False
        return int(data) == value

    def get_brightness(self):
        'read brightness from panel (0 if unavailable)'
        data = self._command(_GET_BRIGHT, "J")
        if data is None or not data.isdigit():
            return 0
        return int(data)

def main():
    'test basic commands'
    if "-h" in sys.argv or len(sys.argv) < 2:
        print(__doc__)
        sys.exit()
    loglevel = logging.DEBUG if "-d" in sys.argv else logging.INFO
    logging.basicConfig(level=loglevel)
    panel = FlatMan(sys.argv[1])
    if not panel.connect():
        print("Error: panel not connected")
        sys.exit(1)
    print("Connected:", PRODUCTS.get(panel.product_id, panel.product_id))
    print("Light on:", panel.set_light_on(True))
    for val in (50, 150, 255):
        print(f"Brightness {val}:", panel.set_brightness(val), panel.get_brightness())
        time.sleep(1)
    print("Light off:", panel.set_light_on(False))
    panel.close()

if __name__ == "__main__":
    main()
