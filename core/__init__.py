"""core
Pure simulation core: state in, state out. No UI, no I/O.
"""

API_VERSION = "core-v1-ceo-dashboard"
