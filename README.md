# corepki

Small helpers for driving a PKCS #11 module and for converting ECDSA P-256
signatures between formats.

The package does not contain a cryptographic token. You supply an object
that implements the PKCS #11 calls you need. It must follow the
`corepki.pkcs11.FunctionList` protocol, with methods such as `initialize`,
`get_slot_list`, `open_session`, `login` and `find_objects`. The helpers
then run the usual call sequences against it.

## Installation

```
pip install corepki
```

## PKCS #11 helpers

All of these live in `corepki.pkcs11`:

- `initialize_pkcs11(function_list)` initializes the module so that it uses
  operating-system locking.
- `get_slot_list(function_list)` returns the IDs of the slots that have a
  token present.
- `initialize_token(function_list, pin, label)` initializes the token in
  the first slot, unless that token is already initialized.
- `initialize_session(function_list, pin)` initializes the module if
  needed, opens a read/write session on the first slot and logs in as the
  user. It returns the session handle.
- `find_object_with_label_and_class(function_list, session, label, object_class)`
  returns the handle of the first object that matches both the label and
  the class. If nothing matches, it returns the invalid handle.
- `append_sha256_algorithm_identifier(hashed_message)` takes a 32-byte
  SHA-256 digest and puts the DigestInfo prefix in front of it. The result
  is the 51-byte block used in RSA PKCS #1 v1.5 signing.

Any failure from the module is raised as `Pkcs11Error`. Its `ReturnValue`
attribute carries the return code.

```python
from corepki.pkcs11 import (
    ObjectClass,
    find_object_with_label_and_class,
    initialize_session,
)

session = initialize_session(module, pin="0000")
handle = find_object_with_label_and_class(
    module, session, "Device Priv TLS Key", ObjectClass.PRIVATE_KEY
)
```

## Signature conversion

These live in `corepki.pki_utils`:

- `mbedtls_signature_to_pkcs11(signature)` converts a DER-encoded ECDSA
  signature into the 64-byte `R || S` form that PKCS #11 expects.
- `pkcs11_signature_to_mbedtls(signature)` converts a 64-byte `R || S`
  signature into its ASN.1 DER encoding, which is at most 72 bytes.

Input that cannot be converted raises `SignatureFormatError`.