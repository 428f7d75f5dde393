"""
Configuration package.

All tunables live in config.settings.
"""
