"""Logging setup and import error log for packtrack."""
