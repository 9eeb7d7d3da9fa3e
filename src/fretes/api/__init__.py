"""HTTP access to the shipping backend."""

from .client import ShippingApiClient, API_PREFIX

__all__ = ["ShippingApiClient", "API_PREFIX"]
