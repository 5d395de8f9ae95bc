"""
Generic utility functions shared across modules.

Includes time/clock abstractions, scalar conversion and comparison helpers,
hashing, and logging setup.
"""
