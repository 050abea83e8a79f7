"""taskdesk - recurring task scheduling for the manager task dashboard."""

__version__ = "1.0.0"
