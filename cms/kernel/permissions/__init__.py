"""
Access Gate - restricted/public classification and sign-in enforcement.
"""

from cms.kernel.permissions.access_gate import AccessGate, AccessLevel

__all__ = [
    "AccessGate",
    "AccessLevel",
]
