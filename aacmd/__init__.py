"""
aacmd - AACmd compatible control of flat field panels
"""
