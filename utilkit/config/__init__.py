"""
Configuration and settings management.

Loads environment variables (proxy, logging level, float precision) into a
validated, frozen Settings object.
"""
