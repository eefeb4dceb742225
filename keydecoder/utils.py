# SPDX-FileCopyrightText: Copyright 2024 Siemens AG
#
# SPDX-License-Identifier: Apache-2.0

"""Helpers to read encrypted key files and to convert keyword arguments."""

import binascii
import logging
import re
from base64 import b64decode
from typing import Union

from keydecoder.exceptions import BadAsn1Data

ENCRYPTED_KEY_LABEL = "ENCRYPTED PRIVATE KEY"


def str_to_bytes(value: Union[str, bytes]) -> bytes:
    """Convert a given string or byte input to bytes.

    :param value: The value to convert:
           - If the input is already bytes, it is returned unchanged.
           - if it starts with "0x" and interpreted as hex and converts it to bytes.
           - Otherwise, encodes the string in UTF-8 format.
    :return: The converted bytes object.
    :raises ValueError: If the input is neither a string nor bytes.
    """
    if isinstance(value, str):
        if value.startswith("0x"):
            return bytes.fromhex(value[2:])
        return value.encode("utf-8")
    if isinstance(value, bytes):
        return value
    raise ValueError(f"Input must be of type 'str' or 'bytes'. Received: {type(value)}")


def strip_armour(raw: bytes, label: str = ENCRYPTED_KEY_LABEL) -> bytes:
    """Remove the PEM armour with the given label and decode the base64 body.

    Lines starting with `#` are treated as comments.

    :param raw: The PEM data.
    :param label: The expected label, e.g. "ENCRYPTED PRIVATE KEY".
    :return: The DER data.
    :raises BadAsn1Data: If the armour is missing or the body is not valid base64.
    """
    text = raw.decode("ascii", errors="replace")
    match = re.search(f"-----BEGIN {label}-----(.*?)-----END {label}-----", text, re.DOTALL)
    if match is None:
        raise BadAsn1Data(f"No `{label}` PEM block found.", overwrite=True)

    lines = [line for line in match.group(1).splitlines() if line.strip() and not line.startswith("#")]
    if any(":" in line for line in lines):
        # Legacy OpenSSL headers ("Proc-Type", "DEK-Info") belong to a different format.
        raise BadAsn1Data("PEM headers are not supported for PKCS#8 encrypted keys.", overwrite=True)

    try:
        return b64decode("".join(lines), validate=True)
    except binascii.Error as err:
        raise BadAsn1Data(f"The `{label}` PEM block is not valid base64.", overwrite=True) from err


def load_der_or_pem_file(path: str, label: str = ENCRYPTED_KEY_LABEL) -> bytes:
    """Load a file, which is either DER-encoded or PEM-encoded with the given label.

    :param path: The path to the file.
    :param label: The PEM label to accept.
    :return: The DER data.
    """
    with open(path, "rb") as f:
        data = f.read()

    if b"-----BEGIN " in data:
        logging.debug("Loading PEM file: %s", path)
        return strip_armour(data, label=label)
    logging.debug("Loading DER file: %s", path)
    return data
