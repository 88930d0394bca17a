"""engine
Headless turn sequencing, scheduling and run export on top of core.
"""
