"""
utils/ - Shared helpers
=======================
Logging setup and input validation used by every other layer.
"""
