"""
Core infrastructure: configuration, logging, errors, auth and dependency wiring.
"""
