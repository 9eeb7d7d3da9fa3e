"""Client-side services for the Fretes admin client."""

from .reference import ReferenceDataLoader
from .directory import PackageDirectory
from .quotes import QuoteLookup, normalize_state
from .hire import HireWorkflow, find_carrier_quote

__all__ = [
    "ReferenceDataLoader",
    "PackageDirectory",
    "QuoteLookup",
    "normalize_state",
    "HireWorkflow",
    "find_carrier_quote",
]
