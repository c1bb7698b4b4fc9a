"""
Core module - configuration, logging, errors, auth and shared field rules.
"""
