"""
Core infrastructure: settings, logging, container and shared utilities.
"""
