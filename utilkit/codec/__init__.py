"""
Response envelope codec.

Builds and parses the tagged message/success/code/data JSON structure,
optionally wrapped as JSONP.
"""
