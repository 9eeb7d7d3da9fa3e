"""Data models for the Fretes admin client."""

from .enums import PackageStatus, status_label
from .package import Package, NewPackage, HireRequest
from .reference import Carrier, State, Quote

__all__ = [
    # Enums
    "PackageStatus",
    "status_label",
    # Package
    "Package",
    "NewPackage",
    "HireRequest",
    # Reference
    "Carrier",
    "State",
    "Quote",
]
