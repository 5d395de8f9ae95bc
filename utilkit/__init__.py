"""
utilkit – general-purpose helper package.

Response envelopes, fixed-zone time formatting, scalar conversions, text and
encoding helpers, and small OS/process utilities.
"""

__version__ = "0.1.0"
