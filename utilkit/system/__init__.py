"""
OS-level helpers: files, subprocesses, the default-application opener, and
HTTP proxy configuration.
"""
