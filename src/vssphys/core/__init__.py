"""
Core foundation: frozen parameters and content fingerprints.
"""

from .registry import param_registry, RegistryError
from .hashing import blake3_hash

__all__ = [
    # Registry
    "param_registry",
    "RegistryError",

    # Fingerprints
    "blake3_hash",
]
