'''
flatman_simulator.py  - Flat panel simulator for tests and dry runs

Selected by the aacmd port identifier "SIM".
'''

from aacmd.flatman import MIN_BRIGHTNESS, MAX_BRIGHTNESS

class FlatManSimulator:
    'Flat-Man simulator'
    PRODUCT_ID = '19'

    def __init__(self, port='SIM', connect_ok=True, ops_ok=True, brightness=0):
        self.port = port
        self.connect_ok = connect_ok
        self.ops_ok = ops_ok
        self.product_id = ''
        self.connected = False
        self.light_on = False
        self.brightness = brightness
        self.calls = []

    def connect(self):
        'simulated entry'
        self.calls.append(('connect',))
        self.connected = self.connect_ok
        if self.connected:
            self.product_id = self.PRODUCT_ID
        return self.connected

    def close(self):
        'simulated entry'
        self.calls.append(('close',))
        self.connected = False

    def set_light_on(self, enable=True):
        'simulated entry'
        self.calls.append(('set_light_on', enable))
        if not (self.connected and self.ops_ok):
            return False
        self.light_on = enable
        return True

    def set_brightness(self, value):
        'simulated entry'
        self.calls.append(('set_brightness', value))
        if not (self.connected and self.ops_ok):
            return False
        self.brightness = max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, int(value)))
        return True

    def get_brightness(self):
        'simulated entry'
        self.calls.append(('get_brightness',))
        return self.brightness
