"""PKCS #11 helper operations and ECDSA signature format conversion."""

__version__ = "3.3.0"
__all__ = ["pkcs11", "pki_utils"]