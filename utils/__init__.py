"""
utils/ - Shared helpers: logging, calendar math, money formatting, ids.
"""
