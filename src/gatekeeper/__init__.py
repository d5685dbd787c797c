"""Gatekeeper - access control and delegation engine."""

__version__ = "0.1.0"
