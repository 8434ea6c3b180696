"""Adapters for remote AI and speech services."""
