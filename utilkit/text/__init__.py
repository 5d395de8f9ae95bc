"""
Text helpers: URL escaping, substrings, regex replacement, and character
encoding conversion.
"""
