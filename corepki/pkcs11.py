"""High-level helpers over a PKCS #11 function list.

The module talks to a PKCS #11 implementation through a :class:`FunctionList`
whose members are plain callables.  Those callables return their results
directly and report failures by raising :class:`Pkcs11Error`.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

CK_INVALID_HANDLE = 0

CKF_RW_SESSION = 0x00000002
CKF_SERIAL_SESSION = 0x00000004
CKF_OS_LOCKING_OK = 0x00000002
CKF_TOKEN_INITIALIZED = 0x00000400

CKU_USER = 1

CKA_CLASS = 0x00000000
CKA_LABEL = 0x00000003

DEFAULT_USER_PIN = "0000"
DEFAULT_TOKEN_LABEL = "FreeRTOS"
TOKEN_LABEL_LENGTH = 32

SHA256_DIGEST_LENGTH = 32

# DER DigestInfo header that precedes a SHA-256 digest in an RSA PKCS #1 v1.5 signature.
SHA256_DIGEST_INFO_PREFIX = bytes(
    [
        0x30, 0x31, 0x30, 0x0D, 0x06, 0x09, 0x60, 0x86, 0x48, 0x01,
        0x65, 0x03, 0x04, 0x02, 0x01, 0x05, 0x00, 0x04, 0x20,
    ]
)


class ReturnValue(enum.IntEnum):
    """PKCS #11 return codes used by these helpers."""

    OK = 0x000
    HOST_MEMORY = 0x002
    SLOT_ID_INVALID = 0x003
    GENERAL_ERROR = 0x005
    FUNCTION_FAILED = 0x006
    ARGUMENTS_BAD = 0x007
    PIN_INCORRECT = 0x0A0
    SESSION_HANDLE_INVALID = 0x0B3
    TOKEN_NOT_PRESENT = 0x0E0
    USER_ALREADY_LOGGED_IN = 0x100
    CRYPTOKI_NOT_INITIALIZED = 0x190
    CRYPTOKI_ALREADY_INITIALIZED = 0x191


class ObjectClass(enum.IntEnum):
    """PKCS #11 object classes."""

    DATA = 0x0
    CERTIFICATE = 0x1
    PUBLIC_KEY = 0x2
    PRIVATE_KEY = 0x3
    SECRET_KEY = 0x4


class Pkcs11Error(Exception):
    """A PKCS #11 call failed with the given return code."""

    def __init__(self, code: Union[int, ReturnValue], message: Optional[str] = None):
        try:
            code = ReturnValue(code)
        except ValueError:
            pass
        self.code = code
        name = code.name if isinstance(code, ReturnValue) else hex(code)
        super().__init__(message or f"PKCS #11 call failed: {name}")


@dataclass
class FunctionList:
    """Entry points of a PKCS #11 module; any of them may be absent.

    initialize(flags)
    get_slot_list(token_present) -> sequence of slot ids
    get_token_info(slot) -> token flags
    init_token(slot, pin, label)
    open_session(slot, flags) -> session handle
    login(session, user_type, pin)
    find_objects_init(session, template)
    find_objects(session, max_count) -> sequence of object handles
    find_objects_final(session)
    """

    initialize: Optional[Callable[[int], Any]] = None
    get_slot_list: Optional[Callable[[bool], Sequence[int]]] = None
    get_token_info: Optional[Callable[[int], int]] = None
    init_token: Optional[Callable[[int, bytes, bytes], Any]] = None
    open_session: Optional[Callable[[int, int], int]] = None
    login: Optional[Callable[[int, int, bytes], Any]] = None
    find_objects_init: Optional[Callable[[int, List[Tuple[int, Any]]], Any]] = None
    find_objects: Optional[Callable[[int, int], Sequence[int]]] = None
    find_objects_final: Optional[Callable[[int], Any]] = None


def get_slot_list(function_list: Optional[FunctionList]) -> List[int]:
    """Return the ids of all slots that have a token present."""
    if function_list is None or function_list.get_slot_list is None:
        raise Pkcs11Error(ReturnValue.FUNCTION_FAILED)
    return list(function_list.get_slot_list(True))


def initialize_pkcs11(function_list: Optional[FunctionList]) -> None:
    """Initialize the module, allowing it to use native OS locking."""
    if function_list is not None and function_list.initialize is not None:
        function_list.initialize(CKF_OS_LOCKING_OK)


def _initialize_tolerating_repeat(function_list: Optional[FunctionList]) -> None:
    try:
        initialize_pkcs11(function_list)
    except Pkcs11Error as error:
        if error.code != ReturnValue.CRYPTOKI_ALREADY_INITIALIZED:
            raise


def _first_slot(function_list: Optional[FunctionList]) -> int:
    slots = get_slot_list(function_list)
    if not slots:
        raise Pkcs11Error(ReturnValue.SLOT_ID_INVALID, "no slot with a token present")
    return slots[0]


def _pin_bytes(pin: Union[str, bytes]) -> bytes:
    return pin.encode("utf-8") if isinstance(pin, str) else bytes(pin)


def initialize_token(
    function_list: Optional[FunctionList],
    pin: Union[str, bytes] = DEFAULT_USER_PIN,
    label: Union[str, bytes] = DEFAULT_TOKEN_LABEL,
) -> int:
    """Initialize the token in the first slot unless it already is; return that slot."""
    if (
        function_list is None
        or function_list.get_token_info is None
        or function_list.init_token is None
    ):
        raise Pkcs11Error(ReturnValue.FUNCTION_FAILED)

    label_bytes = label.encode("utf-8") if isinstance(label, str) else bytes(label)
    if len(label_bytes) > TOKEN_LABEL_LENGTH:
        raise Pkcs11Error(ReturnValue.ARGUMENTS_BAD, "token label longer than 32 bytes")

    _initialize_tolerating_repeat(function_list)
    slot = _first_slot(function_list)

    flags = function_list.get_token_info(slot)
    if flags & CKF_TOKEN_INITIALIZED != CKF_TOKEN_INITIALIZED:
        function_list.init_token(
            slot, _pin_bytes(pin), label_bytes.ljust(TOKEN_LABEL_LENGTH, b" ")
        )
    return slot


def initialize_session(
    function_list: Optional[FunctionList],
    pin: Union[str, bytes] = DEFAULT_USER_PIN,
) -> int:
    """Initialize the module, open a read/write session on the first slot and log in."""
    _initialize_tolerating_repeat(function_list)
    slot = _first_slot(function_list)

    if function_list.open_session is None:
        raise Pkcs11Error(ReturnValue.FUNCTION_FAILED)
    session = function_list.open_session(slot, CKF_SERIAL_SESSION | CKF_RW_SESSION)

    if function_list.login is not None:
        function_list.login(session, CKU_USER, _pin_bytes(pin))
    return session


def find_object_with_label_and_class(
    function_list: Optional[FunctionList],
    session: int,
    label: Union[str, bytes, None],
    object_class: Union[int, ObjectClass],
) -> int:
    """Return the handle of the first object with this label and class.

    Returns CK_INVALID_HANDLE when no object matches.
    """
    if label is None:
        raise Pkcs11Error(ReturnValue.ARGUMENTS_BAD)
    if (
        function_list is None
        or function_list.find_objects_init is None
        or function_list.find_objects is None
        or function_list.find_objects_final is None
    ):
        raise Pkcs11Error(ReturnValue.FUNCTION_FAILED)

    label_bytes = label.encode("utf-8") if isinstance(label, str) else bytes(label)
    template = [(CKA_LABEL, label_bytes), (CKA_CLASS, int(object_class))]

    function_list.find_objects_init(session, template)
    found = list(function_list.find_objects(session, 1))
    function_list.find_objects_final(session)

    return found[0] if found else CK_INVALID_HANDLE


def append_sha256_algorithm_identifier(hashed_message: Optional[bytes]) -> bytes:
    """Prefix a 32-byte SHA-256 digest with its DER algorithm identifier (51 bytes total)."""
    if hashed_message is None or len(hashed_message) != SHA256_DIGEST_LENGTH:
        raise Pkcs11Error(ReturnValue.ARGUMENTS_BAD)
    return SHA256_DIGEST_INFO_PREFIX + bytes(hashed_message)