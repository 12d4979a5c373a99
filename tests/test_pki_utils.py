import pytest

from corepki.pki_utils import (
    SignatureFormatError,
    mbedtls_signature_to_pkcs11,
    pkcs11_signature_to_mbedtls,
)

LOW_R = bytes(range(1, 33))
LOW_S = bytes(range(33, 65))
HIGH_R = bytes([0xFF]) + bytes(range(1, 32))
HIGH_S = bytes([0x80]) + bytes(range(40, 71))


@pytest.mark.parametrize(
    "r, s",
    [(LOW_R, LOW_S), (HIGH_R, LOW_S), (LOW_R, HIGH_S), (HIGH_R, HIGH_S)],
)
def test_round_trip(r, s):
    der = pkcs11_signature_to_mbedtls(r + s)
    assert mbedtls_signature_to_pkcs11(der) == r + s


@pytest.mark.parametrize(
    "r, s",
    [(LOW_R, LOW_S), (HIGH_R, LOW_S), (HIGH_R, HIGH_S)],
)
def test_der_structure(r, s):
    der = pkcs11_signature_to_mbedtls(r + s)
    assert der[0] == 0x30
    assert der[1] == len(der) - 2
    assert der[2] == 0x02
    assert len(der) <= 72
    assert der.endswith(s)


def test_high_bit_components_get_zero_prefix():
    der = pkcs11_signature_to_mbedtls(HIGH_R + HIGH_S)
    assert len(der) == 72
    assert der[3:5] == bytes([33, 0])
    assert der[5:37] == HIGH_R


def test_low_components_have_no_prefix():
    der = pkcs11_signature_to_mbedtls(LOW_R + LOW_S)
    assert der[3] == 32
    assert der[4:36] == LOW_R


def test_zero_padded_der_is_accepted():
    der = pkcs11_signature_to_mbedtls(LOW_R + HIGH_S)
    padded = der + bytes(72 - len(der))
    assert mbedtls_signature_to_pkcs11(padded) == LOW_R + HIGH_S


def test_short_components_are_left_padded():
    der = bytes([0x30, 6, 0x02, 1, 0x05, 0x02, 1, 0x07])
    result = mbedtls_signature_to_pkcs11(der)
    assert result == bytes(31) + b"\x05" + bytes(31) + b"\x07"


def test_accepts_bytearray():
    der = bytearray(pkcs11_signature_to_mbedtls(bytearray(LOW_R + LOW_S)))
    assert mbedtls_signature_to_pkcs11(der) == LOW_R + LOW_S


@pytest.mark.parametrize("value", [None, b"", bytes(63), bytes(65)])
def test_pkcs11_to_der_rejects_bad_length(value):
    with pytest.raises(SignatureFormatError):
        pkcs11_signature_to_mbedtls(value)


@pytest.mark.parametrize(
    "der",
    [
        None,
        b"",
        bytes([0x31, 6, 0x02, 1, 0x05, 0x02, 1, 0x07]),
        bytes([0x30, 6, 0x03, 1, 0x05, 0x02, 1, 0x07]),
        bytes([0x30, 20, 0x02, 1, 0x05, 0x02, 1, 0x07]),
        bytes([0x30, 4, 0x02, 1, 0x05, 0x02]),
        bytes([0x30, 9, 0x02, 1, 0x05, 0x02, 1, 0x07, 0x00]),
        bytes([0x30, 37, 0x02, 34]) + bytes(34) + bytes([0x02, 1, 0x01]),
        bytes([0x30, 38, 0x02, 33, 0x01]) + bytes(32) + bytes([0x02, 1, 0x01]),
    ],
)
def test_der_to_pkcs11_rejects_malformed(der):
    with pytest.raises(SignatureFormatError):
        mbedtls_signature_to_pkcs11(der)