"""
Credentials Module - Black Box Interface

Purpose: Hash and verify account passwords
Interface: hash(), verify(), needs_rehash()
Hidden: Hashing algorithm, salt handling, thread offloading

Replaceable with any one-way password hashing scheme.
"""

from .codec import CredentialCodec

__all__ = ["CredentialCodec"]
