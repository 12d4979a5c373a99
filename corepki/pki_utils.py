"""Conversions between ECDSA P-256 signature encodings."""

from __future__ import annotations

from typing import Optional, Tuple

COMPONENT_LENGTH = 32
PKCS11_SIGNATURE_LENGTH = 2 * COMPONENT_LENGTH
MAX_DER_SIGNATURE_LENGTH = 72

_SEQUENCE = 0x30
_INTEGER = 0x02


class SignatureFormatError(ValueError):
    """A signature does not have the expected encoding."""


def _read_integer(buf: bytes) -> Tuple[bytes, bytes]:
    if len(buf) < 2 or buf[0] != _INTEGER:
        raise SignatureFormatError("expected a DER INTEGER")
    length = buf[1]
    if length == 0 or length > COMPONENT_LENGTH + 1 or 2 + length > len(buf):
        raise SignatureFormatError("invalid signature component length")
    value = buf[2 : 2 + length]
    if length == COMPONENT_LENGTH + 1:
        if value[0] != 0:
            raise SignatureFormatError("signature component too large")
        value = value[1:]
    return value.rjust(COMPONENT_LENGTH, b"\x00"), buf[2 + length :]


def mbedtls_signature_to_pkcs11(signature: Optional[bytes]) -> bytes:
    """Convert a DER ECDSA signature (possibly zero-padded) to 64 bytes of R followed by S."""
    if signature is None:
        raise SignatureFormatError("no signature given")
    data = bytes(signature)
    if len(data) < 2 or data[0] != _SEQUENCE:
        raise SignatureFormatError("expected a DER SEQUENCE")
    body_length = data[1]
    if body_length & 0x80 or 2 + body_length > len(data):
        raise SignatureFormatError("invalid sequence length")
    body = data[2 : 2 + body_length]
    r, rest = _read_integer(body)
    s, rest = _read_integer(rest)
    if rest:
        raise SignatureFormatError("unexpected data inside signature sequence")
    return r + s


def _encode_integer(component: bytes) -> bytes:
    if component[0] & 0x80:
        return bytes([_INTEGER, COMPONENT_LENGTH + 1, 0x00]) + component
    return bytes([_INTEGER, COMPONENT_LENGTH]) + component


def pkcs11_signature_to_mbedtls(signature: Optional[bytes]) -> bytes:
    """Convert a 64-byte R||S signature to its ASN.1 DER form (at most 72 bytes)."""
    if signature is None:
        raise SignatureFormatError("no signature given")
    data = bytes(signature)
    if len(data) != PKCS11_SIGNATURE_LENGTH:
        raise SignatureFormatError("PKCS #11 signature must be 64 bytes")
    body = _encode_integer(data[:COMPONENT_LENGTH]) + _encode_integer(data[COMPONENT_LENGTH:])
    return bytes([_SEQUENCE, len(body)]) + body