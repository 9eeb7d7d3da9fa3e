"""Fretes: admin client for the shipping-management backend."""

__version__ = "0.1.0"
