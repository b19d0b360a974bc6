"""
Authentication helpers for the gateway service.
"""

from .passwords import BcryptPasswordHasher

__all__ = [
    "BcryptPasswordHasher",
]
