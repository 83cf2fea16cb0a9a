"""Makeline service - order summary repository over a Dapr-style state store."""

__version__ = "0.1.0"
